import pytest

from lifetree.core.config import Settings
from lifetree.lifespan.base import Component
from lifetree.lifespan.emitter import EventEmitter


class RawEmitter(EventEmitter):
    """Foreign object with only close() and events, as found in third-party code."""

    def __init__(self):
        super().__init__()
        self.close_calls = 0

    def close(self):
        self.close_calls += 1
        self.emit("close")


@pytest.fixture
def settings():
    return Settings(DEBUG=True)


@pytest.fixture
def make(settings):
    def factory(name, ready=False):
        return Component(name, ready, settings=settings)
    return factory


@pytest.fixture
def raw():
    return RawEmitter()

