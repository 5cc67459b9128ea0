"""
Tests for event models and the date/time normalizer
"""

import pytest

from eventcal.errors import ValidationError
from eventcal.event_models import DEFAULT_COLOR, Event, EventDraft
from eventcal.event_normalizer import combine_datetime, ends_before_start, split_datetime


class TestEventRecord:
    """Test the stored record layout"""

    def test_color_falls_back_to_border_then_default(self):
        base = {"id": "1", "title": "t", "start": "2025-06-10T09:00", "end": "2025-06-10T10:00"}

        assert Event.from_record({**base, "borderColor": "#abcdef"}).color == "#abcdef"
        assert Event.from_record(base).color == DEFAULT_COLOR

    def test_missing_extended_props_means_no_image(self):
        record = {"id": 7, "title": "t", "start": "2025-06-10T09:00", "end": "2025-06-10T10:00"}

        event = Event.from_record(record)

        assert event.id == "7"
        assert event.image is None

    @pytest.mark.parametrize("record", [
        None,
        [],
        {"id": "1", "title": "t", "start": "2025-06-10T09:00"},
        {"id": "", "title": "t", "start": "2025-06-10T09:00", "end": "2025-06-10T10:00"},
        {"id": "1", "title": "  ", "start": "2025-06-10T09:00", "end": "2025-06-10T10:00"},
        {"id": "1", "title": "t", "start": "2025-06-10T09:00", "end": "2025-06-10T24:00"},
        {"id": "1", "title": "t", "start": "tomorrow", "end": "2025-06-10T10:00"},
    ])
    def test_invalid_records(self, record):
        with pytest.raises(ValueError):
            Event.from_record(record)


class TestDraft:
    """Test draft updates"""

    def test_with_field_returns_new_draft(self):
        draft = EventDraft()

        updated = draft.with_field("startDate", "2025-06-10")

        assert updated.start_date == "2025-06-10"
        assert draft.start_date == ""

    def test_attribute_and_form_names(self):
        draft = EventDraft().with_field("end_time", "10:00").with_field("endDate", "2025-06-10")

        assert (draft.end_date, draft.end_time) == ("2025-06-10", "10:00")

    def test_empty_image_clears(self):
        assert EventDraft(image="x").with_field("image", "").image is None


class TestNormalizer:
    """Test splitting and combining date/time fields"""

    @pytest.mark.parametrize("value,expected", [
        ("2025-06-10T09:00", ("2025-06-10", "09:00")),
        ("2025-06-10", ("2025-06-10", "")),
        ("", ("", "")),
        (None, ("", "")),
    ])
    def test_split(self, value, expected):
        assert split_datetime(value) == expected

    def test_combine_keeps_seconds_only_when_set(self):
        assert combine_datetime("2025-06-10", "09:00:00", "start") == "2025-06-10T09:00"
        assert combine_datetime("2025-06-10", "09:00:30", "start") == "2025-06-10T09:00:30"

    def test_combine_rejects_hour_24(self):
        with pytest.raises(ValidationError) as exc_info:
            combine_datetime("2025-06-10", "24:00", "end")

        assert exc_info.value.fields == ("end_time",)

    def test_combine_rejects_bad_date(self):
        with pytest.raises(ValidationError) as exc_info:
            combine_datetime("2025-13-40", "09:00", "start")

        assert exc_info.value.fields == ("start_date",)

    def test_ends_before_start(self):
        assert ends_before_start("2025-06-10T10:00", "2025-06-10T09:00")
        assert not ends_before_start("2025-06-10T10:00", "2025-06-10T10:00")
        assert not ends_before_start("2025-06-10T23:00", "2025-06-11T01:00")
