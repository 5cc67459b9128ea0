"""
Event data models for the calendar editor.
Defines Event (persisted), EventDraft and EditSession (transient).
"""

from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import Any, Dict, List, Optional

from eventcal.errors import ValidationError
from eventcal.event_normalizer import combine_datetime, split_datetime

DEFAULT_COLOR = "#3788d8"

# Form input names as the form surface sends them
FORM_FIELD_NAMES = {
    "title": "title",
    "startDate": "start_date",
    "startTime": "start_time",
    "endDate": "end_date",
    "endTime": "end_time",
    "color": "color",
    "image": "image",
}

REQUIRED_FIELDS = ("title", "start_date", "start_time", "end_date", "end_time")


@dataclass(frozen=True)
class Event:
    """
    A persisted calendar entry.
    start/end are local wall-clock strings: "YYYY-MM-DDTHH:MM".
    """
    id: str
    title: str
    start: str
    end: str
    color: str = DEFAULT_COLOR
    image: Optional[str] = None  # Opaque reference, never dereferenced here

    def to_record(self) -> Dict[str, Any]:
        """Serialize to the stored/grid record layout."""
        return {
            "id": self.id,
            "title": self.title,
            "start": self.start,
            "end": self.end,
            "backgroundColor": self.color,
            "borderColor": self.color,
            "extendedProps": {"image": self.image},
        }

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Event":
        """
        Build an Event from a stored record.

        Raises:
            ValueError: if the record is not a dict, lacks id/title/start/end,
                or start/end is not a valid date and time
        """
        if not isinstance(record, dict):
            raise ValueError(f"Event record is not an object: {record!r}")

        missing = [key for key in ("id", "title", "start", "end") if not str(record.get(key) or "").strip()]
        if missing:
            raise ValueError(f"Event record missing {', '.join(missing)}")

        for key in ("start", "end"):
            try:
                combine_datetime(*split_datetime(str(record[key])), key)
            except ValidationError as e:
                raise ValueError(f"Event record has invalid {key} '{record[key]}': {e}") from e

        extended = record.get("extendedProps") or {}
        image = extended.get("image") if isinstance(extended, dict) else None
        color = record.get("backgroundColor") or record.get("borderColor") or DEFAULT_COLOR

        return cls(
            id=str(record["id"]),
            title=str(record["title"]),
            start=str(record["start"]),
            end=str(record["end"]),
            color=str(color),
            image=str(image) if image else None,
        )


class SessionMode(Enum):
    """State of the editor."""
    CLOSED = "closed"
    CREATING = "creating"
    EDITING = "editing"


@dataclass(frozen=True)
class EventDraft:
    """Working copy of the editable fields. Every update yields a new draft."""
    title: str = ""
    start_date: str = ""
    start_time: str = ""
    end_date: str = ""
    end_time: str = ""
    color: str = DEFAULT_COLOR
    image: Optional[str] = None

    @classmethod
    def field_name(cls, name: str) -> str:
        """Resolve a form name (startDate) or attribute name (start_date)."""
        resolved = FORM_FIELD_NAMES.get(name, name)
        if resolved not in {f.name for f in fields(cls)}:
            raise ValueError(f"Unknown draft field: {name}")
        return resolved

    def with_field(self, name: str, value: Any) -> "EventDraft":
        resolved = self.field_name(name)
        if resolved == "image":
            value = value or None
        elif value is None:
            value = ""
        else:
            value = str(value)
        return replace(self, **{resolved: value})

    def missing_fields(self) -> List[str]:
        """Required fields that are empty, in form order."""
        return [name for name in REQUIRED_FIELDS if not str(getattr(self, name)).strip()]


@dataclass(frozen=True)
class EditSession:
    mode: SessionMode
    draft: EventDraft = field(default_factory=EventDraft)
    target_id: Optional[str] = None  # Only set while editing

    def with_draft(self, draft: EventDraft) -> "EditSession":
        return replace(self, draft=draft)
