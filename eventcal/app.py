"""
Composition of the calendar core: settings -> storage -> EventStore -> editor.
The grid and form surface are built on top of the returned controller.
"""

from typing import Callable, Optional

from eventcal.editor_controller import EventEditorController
from eventcal.errors import PersistenceWarning
from eventcal.event_store import EventStore
from eventcal.logging_helper import Log
from eventcal.settings_manager import (
    SettingsSchema,
    get_default_color,
    get_storage_dir,
    get_storage_slot,
    get_strict_time_order,
    load_settings,
)
from eventcal.storage import FileStorage, SlotStorage


def create_controller(
    settings: Optional[SettingsSchema] = None,
    storage: Optional[SlotStorage] = None,
    on_warning: Optional[Callable[[PersistenceWarning], None]] = None,
) -> EventEditorController:
    """
    Build a ready-to-use editor with its events loaded.

    Args:
        settings: settings to use instead of the saved settings file
        storage: storage backend; defaults to FileStorage in the configured directory
        on_warning: called with each PersistenceWarning (e.g. to notify the user)
    """
    Log.section("Event Calendar")
    if settings is None:
        settings = load_settings()

    if storage is None:
        storage_dir = get_storage_dir(settings)
        Log.info(f"Using file storage in {storage_dir}")
        storage = FileStorage(storage_dir)

    store = EventStore(storage, slot=get_storage_slot(settings), on_warning=on_warning)
    store.load_all()

    controller = EventEditorController(
        store,
        default_color=get_default_color(settings),
        strict_time_order=get_strict_time_order(settings),
    )
    Log.kv({"stage": "app", "events": len(store.events), "strict_time_order": controller.strict_time_order})
    return controller
