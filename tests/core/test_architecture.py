"""
Architecture - Bootstrap and Dispatch Tests

Every test declares its own Architecture subclass; each subclass is its own
lazily created singleton.
"""
import pytest
from abc import abstractmethod
from dataclasses import dataclass
from unittest.mock import MagicMock

from archkit import (
    AbstractCommand,
    AbstractModel,
    AbstractQuery,
    AbstractSystem,
    Architecture,
    ArchitectureState,
    BindableProperty,
    ICommand,
    IModel,
    IUtility,
    TypeMismatchError,
)


class InitLog:
    """Records init calls across modules."""

    def __init__(self):
        self.entries = []


class CountingModel(AbstractModel):
    def __init__(self, name, log):
        self.name = name
        self.log = log
        self.init_count = 0

    def on_init(self):
        self.init_count += 1
        self.log.entries.append(self.name)


class OtherModel(CountingModel):
    pass


class ThirdModel(CountingModel):
    pass


class ReadingSystem(AbstractSystem):
    """Reads model state during its own init."""

    def __init__(self, log):
        self.log = log
        self.seen_model_inits = None

    def on_init(self):
        self.seen_model_inits = self.get_model(CountingModel).init_count
        self.log.entries.append("system")


class IClock(IUtility):
    @abstractmethod
    def now(self) -> int: ...


class FixedClock(IClock):
    def now(self) -> int:
        return 42


class TestBootstrap:

    def test_lazy_creation_and_singleton(self):
        created = []

        class App(Architecture):
            def init(self):
                created.append(self)

        assert "_instance" not in App.__dict__
        first = App.interface()
        second = App.interface()

        assert first is second
        assert created == [first]
        assert first.is_ready
        assert first.lifecycle.state == ArchitectureState.READY

    def test_subclasses_have_separate_singletons(self):
        class AppA(Architecture):
            def init(self):
                pass

        class AppB(Architecture):
            def init(self):
                pass

        assert AppA.interface() is not AppB.interface()
        assert isinstance(AppB.interface(), AppB)

    def test_base_architecture_is_abstract(self):
        with pytest.raises(TypeError):
            Architecture.interface()

    def test_staged_models_initialize_in_order_once(self):
        log = InitLog()
        m1 = CountingModel("m1", log)
        m2 = OtherModel("m2", log)

        class App(Architecture):
            def init(self):
                self.register_model(m1)
                self.register_model(m2)
                # nothing initialized while registering
                assert log.entries == []
                assert not self.is_ready

        app = App.interface()

        assert log.entries == ["m1", "m2"]
        assert m1.init_count == 1
        assert m2.init_count == 1
        assert app._models == []
        assert app._systems == []

    def test_models_initialize_before_systems(self):
        log = InitLog()
        system = ReadingSystem(log)
        model = CountingModel("model", log)

        class App(Architecture):
            def init(self):
                # system registered first on purpose
                self.register_system(system)
                self.register_model(model)

        App.interface()

        assert log.entries == ["model", "system"]
        assert system.seen_model_inits == 1

    def test_registration_after_ready_initializes_immediately(self):
        log = InitLog()

        class App(Architecture):
            def init(self):
                self.register_model(CountingModel("m1", log))

        app = App.interface()
        m3 = ThirdModel("m3", log)

        app.register_model(m3)

        assert log.entries == ["m1", "m3"]
        assert m3.init_count == 1
        assert app._models == []

    def test_same_instance_registered_twice_initializes_once(self):
        log = InitLog()
        model = CountingModel("model", log)
        system = ReadingSystem(log)

        class App(Architecture):
            def init(self):
                self.register_model(model)
                self.register_model(model)
                self.register_system(system)
                self.register_system(system)

        app = App.interface()

        assert app.is_ready
        assert model.init_count == 1
        assert log.entries == ["model", "system"]
        assert app.get_model(CountingModel) is model

    def test_reregistering_after_ready_does_not_init_again(self):
        log = InitLog()
        model = CountingModel("model", log)

        class App(Architecture):
            def init(self):
                self.register_model(model)

        app = App.interface()
        app.register_model(model)

        assert model.init_count == 1
        assert app.get_model(CountingModel) is model

    def test_module_registered_from_module_init_is_initialized(self):
        log = InitLog()
        late = ThirdModel("late", log)

        class SpawningModel(AbstractModel):
            def on_init(self):
                self.get_architecture().register_model(late)

        class App(Architecture):
            def init(self):
                self.register_model(SpawningModel())

        App.interface()

        assert late.init_count == 1

    def test_back_reference_assigned_at_registration(self):
        holder = {}

        class App(Architecture):
            def init(self):
                model = CountingModel("m", InitLog())
                self.register_model(model)
                holder["model"] = model
                holder["during_init"] = model.get_architecture()

        app = App.interface()

        assert holder["during_init"] is app
        assert holder["model"].get_architecture() is app

    def test_register_patch_runs_before_staged_init(self):
        log = InitLog()
        replacement = CountingModel("replacement", log)
        patch_calls = []

        class App(Architecture):
            def init(self):
                self.register_model(CountingModel("original", log))

        def patch(architecture):
            patch_calls.append(architecture)
            assert log.entries == []
            # overrides the lookup binding; the staged original still initializes
            architecture.register_model(replacement)

        App.on_register_patch = patch
        app = App.interface()

        assert patch_calls == [app]
        assert app.get_model(CountingModel) is replacement
        assert log.entries == ["original", "replacement"]

    def test_default_patch_is_noop(self):
        class App(Architecture):
            def init(self):
                pass

        App.interface()
        assert App.on_register_patch(App.interface()) is None

    def test_bootstrap_failure_propagates_and_is_not_retried(self):
        attempts = []

        class FailingModel(AbstractModel):
            def on_init(self):
                attempts.append(1)
                raise RuntimeError("model init failed")

        class App(Architecture):
            def init(self):
                self.register_model(FailingModel())

        with pytest.raises(RuntimeError, match="model init failed"):
            App.interface()

        partial = App.interface()
        assert attempts == [1]
        assert not partial.is_ready
        assert partial.lifecycle.state == ArchitectureState.INITIALIZING

    def test_setup_hook_failure_propagates(self):
        class App(Architecture):
            def init(self):
                raise ValueError("bad setup")

        with pytest.raises(ValueError, match="bad setup"):
            App.interface()

    def test_static_register_and_get(self):
        class App(Architecture):
            def init(self):
                pass

        clock = FixedClock()
        App.register(clock, key=IClock)

        assert App.get(IClock) is clock
        assert App.get(FixedClock) is None


class TestRegistry:

    @pytest.fixture
    def app(self):
        class App(Architecture):
            def init(self):
                pass
        return App.interface()

    def test_get_missing_returns_none(self, app):
        assert app.get_model(CountingModel) is None
        assert app.get_system(ReadingSystem) is None
        assert app.get_utility(FixedClock) is None

    def test_register_model_replaces(self, app):
        first = CountingModel("a", InitLog())
        second = CountingModel("b", InitLog())

        app.register_model(first)
        app.register_model(second)

        assert app.get_model(CountingModel) is second

    def test_utility_under_interface_has_no_back_reference(self, app):
        clock = FixedClock()
        app.register_utility(clock, key=IClock)

        assert app.get_utility(IClock).now() == 42
        assert not hasattr(clock, "get_architecture")

    def test_model_under_interface_key(self, app):
        class ICounterModel(IModel):
            pass

        class CounterModel(AbstractModel, ICounterModel):
            def on_init(self):
                self.count = BindableProperty(0)

        app.register_model(CounterModel(), key=ICounterModel)

        model = app.get_model(ICounterModel)
        assert isinstance(model, CounterModel)
        assert model.count.value == 0

    def test_wrong_role_rejected(self, app):
        with pytest.raises(TypeError):
            app.register_model(FixedClock())
        with pytest.raises(TypeError):
            app.register_system(CountingModel("m", InitLog()))
        with pytest.raises(TypeError):
            app.register_utility(object())

    def test_type_mismatch_on_colliding_key(self, app):
        App = type(app)
        App.register(FixedClock(), key=CountingModel)

        with pytest.raises(TypeMismatchError):
            app.get_model(CountingModel)


@dataclass
class Scored:
    amount: int = 1


class ScoreModel(AbstractModel):
    def on_init(self):
        self.score = BindableProperty(0)


class AddScoreCommand(AbstractCommand):
    def __init__(self, amount: int = 1):
        self.amount = amount

    def on_execute(self, architecture):
        model = architecture.get_model(ScoreModel)
        model.score.value += self.amount
        architecture.send_event(Scored(self.amount))


class ScoreQuery(AbstractQuery[int]):
    def on_do(self, architecture) -> int:
        return architecture.get_model(ScoreModel).score.value


class TestCommandsAndQueries:

    @pytest.fixture
    def app(self):
        class App(Architecture):
            def init(self):
                self.register_model(ScoreModel())
        return App.interface()

    def test_send_command_executes_once_with_architecture(self, app):
        seen = []

        class Probe(ICommand):
            def execute(self, architecture):
                seen.append(architecture)

        command = Probe()
        app.send_command(command)

        assert seen == [app]
        # nothing keeps the architecture after execution
        assert all(value is not app for value in vars(command).values())

    def test_send_command_updates_state_and_sends_event(self, app):
        handler = MagicMock()
        app.register_event(Scored, handler)

        app.send_command(AddScoreCommand(5))

        assert app.get_model(ScoreModel).score.value == 5
        handler.assert_called_once_with(Scored(5))

    def test_send_command_class_default_constructs(self, app):
        app.send_command(AddScoreCommand)
        app.send_command(AddScoreCommand)

        assert app.send_query(ScoreQuery()) == 2

    def test_command_errors_propagate(self, app):
        class Broken(AbstractCommand):
            def on_execute(self, architecture):
                raise KeyError("missing")

        with pytest.raises(KeyError):
            app.send_command(Broken())

    def test_send_command_rejects_non_commands(self, app):
        with pytest.raises(TypeError):
            app.send_command(object())

    def test_send_query_returns_result(self, app):
        app.get_model(ScoreModel).score.value = 12
        assert app.send_query(ScoreQuery()) == 12

    def test_send_query_rejects_non_queries(self, app):
        with pytest.raises(TypeError):
            app.send_query(ScoreModel())


class TestEvents:

    @pytest.fixture
    def app(self):
        class App(Architecture):
            def init(self):
                pass
        return App.interface()

    def test_register_send_unregister(self, app):
        handler = MagicMock()
        handle = app.register_event(Scored, handler)

        app.send_event(Scored(3))
        app.send_event(Scored)
        handle.unregister()
        app.send_event(Scored(4))

        assert handler.call_args_list[0].args == (Scored(3),)
        assert handler.call_args_list[1].args == (Scored(1),)
        assert handler.call_count == 2

    def test_unregister_event_by_handler(self, app):
        handler = MagicMock()
        app.register_event(Scored, handler)

        app.unregister_event(Scored, handler)
        app.send_event(Scored(1))

        handler.assert_not_called()

    def test_architectures_have_separate_buses(self, app):
        class Other(Architecture):
            def init(self):
                pass

        handler = MagicMock()
        app.register_event(Scored, handler)
        Other.interface().send_event(Scored(1))

        handler.assert_not_called()
        assert app.event_bus is not Other.interface().event_bus
