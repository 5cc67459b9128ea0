"""
EventStore: the authoritative event collection and its write-through persistence.
"""

import json
from typing import Callable, List, Optional, Tuple

from eventcal.errors import PersistenceWarning, StorageError
from eventcal.event_models import Event
from eventcal.logging_helper import Log
from eventcal.storage import SlotStorage

DEFAULT_SLOT = "calendarEvents"


class EventStore:
    """
    Owns the live event list.

    Every mutation replaces the whole list in memory and then writes the whole
    list to the storage slot before returning. A failed write never rolls back
    the in-memory list; it is reported through last_warning / on_warning.
    """

    def __init__(
        self,
        storage: SlotStorage,
        slot: str = DEFAULT_SLOT,
        on_warning: Optional[Callable[[PersistenceWarning], None]] = None,
    ):
        self.storage = storage
        self.slot = slot
        self.on_warning = on_warning
        self.last_warning: Optional[PersistenceWarning] = None
        self._events: Tuple[Event, ...] = ()

    @property
    def events(self) -> Tuple[Event, ...]:
        """Current collection, read-only."""
        return self._events

    def get(self, event_id: str) -> Optional[Event]:
        for event in self._events:
            if event.id == event_id:
                return event
        return None

    def records(self) -> List[dict]:
        """Current collection in the stored/grid record layout."""
        return [event.to_record() for event in self._events]

    def load_all(self) -> Tuple[Event, ...]:
        """
        Replace the in-memory collection with what the slot holds.
        Missing or unreadable data gives an empty collection, never an exception.
        """
        Log.section("Event Store")
        Log.info(f"Loading events from slot '{self.slot}'")

        try:
            raw = self.storage.get_item(self.slot)
        except StorageError as err:
            self._warn("load", err)
            self._events = ()
            return self._events

        if raw is None:
            Log.info("No saved events found")
            self._events = ()
            return self._events

        try:
            data = json.loads(raw)
            if not isinstance(data, list):
                raise ValueError("Saved events are not a JSON array")
        except ValueError as err:
            Log.warn(f"Discarding unreadable saved events: {err}")
            Log.kv({"stage": "store", "action": "load", "result": "malformed"})
            self._events = ()
            return self._events

        loaded: List[Event] = []
        seen = set()
        for index, record in enumerate(data):
            try:
                event = Event.from_record(record)
            except ValueError as err:
                Log.warn(f"Skipping saved event #{index}: {err}")
                continue
            if event.id in seen:
                Log.warn(f"Skipping saved event #{index}: duplicate id {event.id}")
                continue
            seen.add(event.id)
            loaded.append(event)

        self._events = tuple(loaded)
        Log.kv({"stage": "store", "action": "load", "result": "success", "count": len(self._events)})
        return self._events

    def upsert(self, event: Event) -> Tuple[Event, ...]:
        """Replace the event with the same id, or append it."""
        if self.get(event.id) is not None:
            action = "update"
            self._events = tuple(event if e.id == event.id else e for e in self._events)
        else:
            action = "insert"
            self._events = self._events + (event,)

        Log.info(f"Upserted event {event.id} ({action}): {event.title}")
        self._persist(action)
        return self._events

    def remove(self, event_id: str) -> Tuple[Event, ...]:
        """Remove the event with event_id. Unknown ids are a no-op."""
        if self.get(event_id) is None:
            Log.info(f"Remove: no event with id {event_id}, nothing to do")
        else:
            self._events = tuple(e for e in self._events if e.id != event_id)
            Log.info(f"Removed event {event_id}")

        # Written either way: the slot always mirrors the live list
        self._persist("remove")
        return self._events

    def _persist(self, action: str) -> None:
        payload = json.dumps(self.records(), ensure_ascii=False)
        try:
            self.storage.set_item(self.slot, payload)
        except StorageError as err:
            self._warn(action, err)
            return
        self.last_warning = None
        Log.kv({"stage": "store", "action": action, "result": "persisted", "count": len(self._events)})

    def _warn(self, action: str, err: StorageError) -> None:
        warning = PersistenceWarning(action, err)
        self.last_warning = warning
        Log.warn(str(warning))
        Log.kv({"stage": "store", "action": action, "result": "failed", "error": str(err)})
        if self.on_warning is not None:
            self.on_warning(warning)
