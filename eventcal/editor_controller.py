"""
Event editor controller.
Turns grid and form intents into edit sessions, validates drafts, and hands
finished events to the EventStore.

States: CLOSED -> CREATING (date click) or EDITING (event click), and back to
CLOSED on save, delete (editing only) or cancel.
"""

import time
from pathlib import Path
from typing import Any, Callable, Optional, Tuple

from eventcal.errors import InvalidTransitionError, ValidationError
from eventcal.event_models import DEFAULT_COLOR, EditSession, Event, EventDraft, SessionMode
from eventcal.event_normalizer import combine_datetime, date_only, ends_before_start, split_datetime
from eventcal.event_store import EventStore
from eventcal.logging_helper import Log


class EventEditorController:
    """Single edit session on top of an EventStore."""

    def __init__(
        self,
        store: EventStore,
        default_color: str = DEFAULT_COLOR,
        strict_time_order: bool = False,
        id_factory: Optional[Callable[[], str]] = None,
    ):
        """
        Args:
            store: EventStore receiving saved and deleted events
            default_color: color for new events
            strict_time_order: reject events whose end precedes their start
            id_factory: overrides the millisecond-timestamp id source
        """
        self.store = store
        self.default_color = default_color
        self.strict_time_order = strict_time_order
        self._id_factory = id_factory
        self._last_issued_id = 0
        self._session: Optional[EditSession] = None

    # Read surface for the grid and the form

    @property
    def session(self) -> Optional[EditSession]:
        return self._session

    @property
    def state(self) -> SessionMode:
        return self._session.mode if self._session else SessionMode.CLOSED

    @property
    def draft(self) -> Optional[EventDraft]:
        return self._session.draft if self._session else None

    @property
    def is_open(self) -> bool:
        return self._session is not None

    @property
    def is_editing(self) -> bool:
        return self.state is SessionMode.EDITING

    @property
    def events(self) -> Tuple[Event, ...]:
        return self.store.events

    @property
    def warning(self):
        """Last persistence warning from the store, if the latest write failed."""
        return self.store.last_warning

    # Grid intents

    def on_date_click(self, date: Any) -> EditSession:
        """Open a Creating session pre-filled with the clicked date."""
        self._require_closed("date click")
        day = date_only(date)
        draft = EventDraft(start_date=day, end_date=day, color=self.default_color)
        self._session = EditSession(mode=SessionMode.CREATING, draft=draft)
        Log.kv({"stage": "editor", "action": "open", "mode": "creating", "date": day})
        return self._session

    def on_event_click(self, event_id: str) -> Optional[EditSession]:
        """Open an Editing session for event_id. Unknown ids are ignored."""
        self._require_closed("event click")
        event = self.store.get(event_id)
        if event is None:
            Log.info(f"Event click: no event with id {event_id}, ignoring")
            return None

        start_date, start_time = split_datetime(event.start)
        end_date, end_time = split_datetime(event.end)
        draft = EventDraft(
            title=event.title,
            start_date=start_date,
            start_time=start_time,
            end_date=end_date,
            end_time=end_time,
            color=event.color,
            image=event.image,
        )
        self._session = EditSession(mode=SessionMode.EDITING, draft=draft, target_id=event.id)
        Log.kv({"stage": "editor", "action": "open", "mode": "editing", "id": event.id})
        return self._session

    # Form intents

    def update_field(self, name: str, value: Any) -> EventDraft:
        session = self._require_open("update field")
        draft = session.draft.with_field(name, value)
        self._session = session.with_draft(draft)
        return draft

    def attach_image(self, path) -> EventDraft:
        """Reference a local image file by its file:// URI. The file is not read."""
        uri = Path(path).expanduser().resolve().as_uri()
        Log.info(f"Attached image reference: {uri}")
        return self.update_field("image", uri)

    def submit(self) -> Optional[Event]:
        """
        Validate the draft and save it.

        Returns:
            The saved Event, or None if the edited event was removed meanwhile

        Raises:
            ValidationError: draft incomplete or malformed; session stays open
            InvalidTransitionError: no session is open
        """
        session = self._require_open("submit")
        draft = session.draft

        missing = draft.missing_fields()
        if missing:
            Log.warn(f"Submit rejected, missing fields: {', '.join(missing)}")
            Log.kv({"stage": "editor", "action": "submit", "result": "invalid", "missing": ",".join(missing)})
            raise ValidationError(missing)

        start = combine_datetime(draft.start_date, draft.start_time, "start")
        end = combine_datetime(draft.end_date, draft.end_time, "end")

        if ends_before_start(start, end):
            if self.strict_time_order:
                Log.warn(f"Submit rejected, end {end} is before start {start}")
                raise ValidationError(["end_date", "end_time"], f"End ({end}) is before start ({start})")
            Log.warn(f"Event ends before it starts ({start} -> {end}), saving anyway")

        if session.mode is SessionMode.EDITING:
            event_id = session.target_id
            if self.store.get(event_id) is None:
                # Edits only replace existing events, a vanished one stays gone
                Log.info(f"Submit: event {event_id} no longer exists, nothing to update")
                self._close("not_found")
                return None
        else:
            event_id = self._new_id()

        event = Event(
            id=event_id,
            title=draft.title.strip(),
            start=start,
            end=end,
            color=draft.color or self.default_color,
            image=draft.image,
        )
        self.store.upsert(event)
        self._close("saved")
        return event

    def delete_current(self) -> Tuple[Event, ...]:
        """Delete the event being edited and close the session."""
        session = self._require_open("delete")
        if session.mode is not SessionMode.EDITING:
            raise InvalidTransitionError("Delete is only available while editing an event")
        events = self.store.remove(session.target_id)
        self._close("deleted")
        return events

    def cancel(self) -> None:
        if self._session is not None:
            self._close("cancelled")

    # Internals

    def _require_open(self, intent: str) -> EditSession:
        if self._session is None:
            raise InvalidTransitionError(f"Cannot {intent}: no event is being edited")
        return self._session

    def _require_closed(self, intent: str) -> None:
        if self._session is not None:
            raise InvalidTransitionError(
                f"Cannot handle {intent}: an edit session is already open ({self._session.mode.value})"
            )

    def _close(self, result: str) -> None:
        Log.kv({"stage": "editor", "action": "close", "mode": self.state.value, "result": result})
        self._session = None

    def _new_id(self) -> str:
        if self._id_factory is not None:
            return self._id_factory()
        # Millisecond timestamp, bumped past anything already issued or stored
        candidate = max(int(time.time() * 1000), self._last_issued_id + 1)
        while self.store.get(str(candidate)) is not None:
            candidate += 1
        self._last_issued_id = candidate
        return str(candidate)
