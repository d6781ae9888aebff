"""Unit tests for time slot generation and date/time parsing."""

from datetime import date, datetime, time

import pytest

from salonbook.utils.scheduling import (
    generate_time_slots, parse_time, parse_date, format_time, overlaps
)

DAY = date(2030, 1, 7)


def at(hour, minute=0):
    return datetime(2030, 1, 7, hour, minute)


class TestGenerateTimeSlots:
    """Test the free start times of a working day."""

    def test_steps_by_duration_by_default(self):
        slots = generate_time_slots(DAY, time(9, 0), time(12, 0), 60)
        assert slots == ['09:00', '10:00', '11:00']

    def test_custom_interval(self):
        slots = generate_time_slots(DAY, time(9, 0), time(11, 0), 60, interval_minutes=30)
        assert slots == ['09:00', '09:30', '10:00']

    def test_slot_must_end_by_closing_time(self):
        """A 90 minute service cannot start at 17:00 when the day ends at 18:00."""
        slots = generate_time_slots(DAY, time(15, 0), time(18, 0), 90)
        assert slots == ['15:00', '16:30']

    def test_busy_intervals_exclude_overlapping_slots(self):
        busy = [(at(10, 30), at(11, 30))]
        slots = generate_time_slots(DAY, time(9, 0), time(13, 0), 60, interval_minutes=30, busy=busy)
        assert slots == ['09:00', '09:30', '11:30', '12:00']

    def test_touching_intervals_do_not_overlap(self):
        busy = [(at(10), at(11))]
        slots = generate_time_slots(DAY, time(9, 0), time(12, 0), 60, busy=busy)
        assert slots == ['09:00', '11:00']

    def test_not_before_drops_earlier_slots(self):
        slots = generate_time_slots(DAY, time(9, 0), time(13, 0), 60, not_before=at(10, 15))
        assert slots == ['11:00', '12:00']

    def test_non_positive_duration_gives_no_slots(self):
        assert generate_time_slots(DAY, time(9, 0), time(18, 0), 0) == []

    def test_window_shorter_than_service(self):
        assert generate_time_slots(DAY, time(9, 0), time(9, 30), 60) == []


class TestParsing:
    """Test date and time helpers."""

    def test_parse_time(self):
        assert parse_time('09:30') == time(9, 30)
        assert parse_time(' 18:00 ') == time(18, 0)

    def test_parse_time_passes_time_through(self):
        assert parse_time(time(8, 15)) == time(8, 15)

    def test_parse_time_rejects_bad_input(self):
        with pytest.raises(ValueError):
            parse_time('9h30')

    def test_parse_date(self):
        assert parse_date('2030-01-07') == DAY

    def test_parse_date_rejects_bad_input(self):
        with pytest.raises(ValueError):
            parse_date('07/01/2030')

    def test_format_time(self):
        assert format_time(time(7, 5)) == '07:05'

    def test_overlaps(self):
        assert overlaps(at(9), at(10), at(9, 30), at(11))
        assert not overlaps(at(9), at(10), at(10), at(11))
