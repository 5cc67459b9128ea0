"""
Shared fixtures for eventcal tests
"""

import pytest

from eventcal.editor_controller import EventEditorController
from eventcal.event_models import Event
from eventcal.event_store import EventStore
from eventcal.logging_helper import Log
from eventcal.storage import MemoryStorage


@pytest.fixture(autouse=True)
def log_to_tmp(tmp_path):
    """Keep log files out of the project tree"""
    Log.set_log_dir(tmp_path / "logs")
    yield


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def store(storage):
    return EventStore(storage)


@pytest.fixture
def controller(store):
    return EventEditorController(store)


@pytest.fixture
def old_event():
    return Event(
        id="42",
        title="Old",
        start="2025-06-11T14:00",
        end="2025-06-11T15:30",
        color="#ff0000",
        image="blob:http://localhost/abc",
    )
