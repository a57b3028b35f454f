import pytest

from config.defaults import default_engine_config
from engine.service import SchedulingEngine
from store.memory import InMemoryRecordStore


@pytest.fixture
def store():
    return InMemoryRecordStore()


@pytest.fixture
def engine(store):
    return SchedulingEngine(store, default_engine_config())
