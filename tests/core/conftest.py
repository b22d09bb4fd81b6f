import pytest
from loguru import logger


@pytest.fixture
def log_messages():
    """Capture loguru output (TRACE and up) as a list of formatted strings."""
    messages = []
    handler_id = logger.add(messages.append, level="TRACE", format="{level} {message}")
    yield messages
    logger.remove(handler_id)


class Recorder:
    """Callable that records every value it is called with."""

    def __init__(self, name="recorder", log=None):
        self.name = name
        self.calls = []
        self.log = log

    def __call__(self, value):
        self.calls.append(value)
        if self.log is not None:
            self.log.append((self.name, value))


@pytest.fixture
def recorder():
    return Recorder
