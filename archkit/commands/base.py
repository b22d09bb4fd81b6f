"""
Command and Query Interfaces.

Commands and queries are transient: constructed per use, executed once by
the architecture, then discarded. The architecture is passed in at
execution time rather than stored on the object.
"""
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Generic, TypeVar

if TYPE_CHECKING:
    from ..architecture import IArchitecture

R = TypeVar('R')


class ICommand(ABC):
    """Operation that changes state; returns nothing."""

    @abstractmethod
    def execute(self, architecture: 'IArchitecture') -> None:
        pass


class AbstractCommand(ICommand):
    """
    Base class for commands.

    Example:
        class AddScoreCommand(AbstractCommand):
            def __init__(self, amount: int = 1):
                self.amount = amount

            def on_execute(self, architecture):
                model = architecture.get_model(ScoreModel)
                model.score.value += self.amount
                architecture.send_event(ScoreAdded(self.amount))
    """

    def execute(self, architecture: 'IArchitecture') -> None:
        self.on_execute(architecture)

    @abstractmethod
    def on_execute(self, architecture: 'IArchitecture') -> None:
        pass


class IQuery(ABC, Generic[R]):
    """Read-only operation returning one result."""

    @abstractmethod
    def do(self, architecture: 'IArchitecture') -> R:
        pass


class AbstractQuery(IQuery[R]):
    """
    Base class for queries.

    Example:
        class TotalScoreQuery(AbstractQuery[int]):
            def on_do(self, architecture) -> int:
                return architecture.get_model(ScoreModel).score.value
    """

    def do(self, architecture: 'IArchitecture') -> R:
        return self.on_do(architecture)

    @abstractmethod
    def on_do(self, architecture: 'IArchitecture') -> R:
        pass
