"""
Tests for MeterTracker against a real SQLite database.

These cover the behavior that depends on storage: ordering, totals,
referential integrity and cascading deletes.
"""

from datetime import date

import pytest

from million_meters.core.tracking.service import SwimmerNotFoundError
from million_meters.core.tracking.validation import (
    InvalidMetersError,
    OutOfRangeError,
)
from million_meters.infrastructure.database import (
    ReferentialIntegrityError,
    StorageRangeError,
)

INT64_MAX = 2 ** 63 - 1


# ---------------------------------------------------------------------------
# Swimmers
# ---------------------------------------------------------------------------

class TestSwimmers:
    """Tests for the swimmer roster."""

    def test_created_swimmer_is_listed_once(self, tracker):
        """A new swimmer shows up in the roster exactly once."""
        swimmer = tracker.create_swimmer("Ana", "Pérez", 500)

        listed = [s for s in tracker.list_swimmers() if s.id == swimmer.id]

        assert len(listed) == 1
        assert listed[0].share_number == 500
        assert listed[0].created_at is not None

    def test_swimmers_ordered_by_last_then_first_name(self, tracker):
        """The roster is sorted by last name, then first name."""
        tracker.create_swimmer("Luis", "Zapata")
        tracker.create_swimmer("Carla", "Díaz")
        tracker.create_swimmer("Ana", "Díaz")
        tracker.create_swimmer("Beto", "Alonso")

        names = [(s.last_name, s.first_name) for s in tracker.list_swimmers()]

        assert names == [
            ("Alonso", "Beto"),
            ("Díaz", "Ana"),
            ("Díaz", "Carla"),
            ("Zapata", "Luis"),
        ]

    def test_ids_are_assigned_in_order(self, tracker):
        """Later registrations get larger ids."""
        first = tracker.create_swimmer("Ana", "Pérez")
        second = tracker.create_swimmer("Beto", "Pérez")
        assert second.id > first.id

    def test_invalid_share_number_stores_nothing(self, tracker):
        """A rejected swimmer leaves no row behind."""
        with pytest.raises(OutOfRangeError):
            tracker.create_swimmer("Ana", "Pérez", 1000)

        assert tracker.list_swimmers() == []

    def test_share_number_is_not_unique(self, tracker):
        """Two swimmers may hold the same share number."""
        tracker.create_swimmer("Ana", "Pérez", 7)
        tracker.create_swimmer("Beto", "Gómez", 7)

        assert [s.share_number for s in tracker.list_swimmers()] == [7, 7]

    def test_delete_unknown_swimmer(self, tracker):
        """Deleting an id nobody has is reported, not ignored."""
        with pytest.raises(SwimmerNotFoundError, match="999"):
            tracker.delete_swimmer(999)


# ---------------------------------------------------------------------------
# Meter Log
# ---------------------------------------------------------------------------

class TestMeterLog:
    """Tests for logging and listing meters."""

    def test_log_meters_returns_entry(self, tracker):
        """Logging returns the stored entry with its id."""
        swimmer = tracker.create_swimmer("Ana", "Pérez")

        entry = tracker.log_meters(swimmer.id, 1, "2024-01-01", "warm-up only")

        assert entry.id > 0
        assert entry.meters == 1
        assert entry.session_date == date(2024, 1, 1)
        assert entry.notes == "warm-up only"

    def test_zero_meters_rejected(self, tracker):
        """A zero-meter session is rejected before anything is written."""
        swimmer = tracker.create_swimmer("Ana", "Pérez")

        with pytest.raises(InvalidMetersError):
            tracker.log_meters(swimmer.id, 0, "2024-01-01")

        assert tracker.list_meter_log() == []

    def test_unknown_swimmer_is_referential_integrity_error(self, tracker):
        """The foreign key rejects entries for swimmers that don't exist."""
        with pytest.raises(ReferentialIntegrityError, match="Swimmer 42 does not exist"):
            tracker.log_meters(42, 100, "2024-01-01")

    def test_log_includes_swimmer_names(self, tracker):
        """Log rows carry the swimmer's name."""
        swimmer = tracker.create_swimmer("Ana", "Pérez")
        tracker.log_meters(swimmer.id, 2000, "2024-01-01")

        (row,) = tracker.list_meter_log()

        assert (row.first_name, row.last_name) == ("Ana", "Pérez")
        assert row.swimmer_id == swimmer.id

    def test_same_day_entries_newest_first(self, tracker):
        """Entries for the same day list the latest recorded first."""
        swimmer = tracker.create_swimmer("Ana", "Pérez")
        first = tracker.log_meters(swimmer.id, 100, "2024-01-01")
        second = tracker.log_meters(swimmer.id, 200, "2024-01-01")

        assert [row.id for row in tracker.list_meter_log()] == [second.id, first.id]


# ---------------------------------------------------------------------------
# Summary and Scenarios
# ---------------------------------------------------------------------------

class TestSummary:
    """Tests for summaries computed from stored entries."""

    def test_empty_log(self, tracker):
        """With nothing logged every swimmer is ranked with zeros."""
        tracker.create_swimmer("Ana", "Pérez")
        tracker.create_swimmer("Beto", "Gómez")

        summary = tracker.compute_summary()

        assert summary.total_meters == 0
        assert summary.percentage == "0.00"
        assert summary.swimmer_count == 2
        assert {(t.total_meters, t.total_sessions) for t in summary.by_swimmer} == {(0, 0)}

    def test_goal_passed_saturates(self, tracker):
        """The total keeps growing past the goal; the percentage stops at 100."""
        swimmer = tracker.create_swimmer("Ana", "Pérez")
        tracker.log_meters(swimmer.id, 1_000_000, "2024-01-01")
        tracker.log_meters(swimmer.id, 234_567, "2024-01-02")

        summary = tracker.compute_summary(1_000_000)

        assert summary.total_meters == 1_234_567
        assert summary.percentage == "100.00"
        assert summary.remaining_meters == 0

    def test_two_swimmer_scenario(self, tracker):
        """
        A logs 500 m and 300 m, B logs 1000 m: B ranks first and the log
        runs newest session first.
        """
        a = tracker.create_swimmer("Ana", "Alonso")
        b = tracker.create_swimmer("Beto", "Blanco")
        a_first = tracker.log_meters(a.id, 500, "2024-01-01")
        a_second = tracker.log_meters(a.id, 300, "2024-01-02")
        b_entry = tracker.log_meters(b.id, 1000, "2024-01-01")

        summary = tracker.compute_summary()

        assert [(t.id, t.total_meters, t.total_sessions) for t in summary.by_swimmer] == [
            (b.id, 1000, 1),
            (a.id, 800, 2),
        ]
        assert summary.total_meters == 1800
        assert summary.percentage == "0.18"

        log_ids = [row.id for row in tracker.list_meter_log()]
        assert log_ids == [a_second.id, b_entry.id, a_first.id]

    def test_delete_cascades_to_entries(self, tracker):
        """Deleting a swimmer removes their entries from the log and the totals."""
        a = tracker.create_swimmer("Ana", "Alonso")
        b = tracker.create_swimmer("Beto", "Blanco")
        tracker.log_meters(a.id, 500, "2024-01-01")
        tracker.log_meters(a.id, 300, "2024-01-02")
        tracker.log_meters(b.id, 1000, "2024-01-01")

        tracker.delete_swimmer(a.id)

        assert [s.id for s in tracker.list_swimmers()] == [b.id]
        assert all(row.swimmer_id != a.id for row in tracker.list_meter_log())
        summary = tracker.compute_summary()
        assert summary.total_meters == 1000
        assert summary.swimmer_count == 1

    def test_every_call_rescans_storage(self, tracker):
        """Summaries reflect writes made since the last call."""
        swimmer = tracker.create_swimmer("Ana", "Pérez")
        assert tracker.compute_summary().total_meters == 0

        tracker.log_meters(swimmer.id, 750, "2024-01-01")

        assert tracker.compute_summary().total_meters == 750


# ---------------------------------------------------------------------------
# Large Values
# ---------------------------------------------------------------------------

class TestLargeValues:
    """Tests for distances near the limits of 64-bit storage."""

    def test_totals_are_exact_past_64_bits(self, tracker):
        """Entries whose sum overflows a database integer still add up exactly."""
        a = tracker.create_swimmer("Ana", "Alonso")
        b = tracker.create_swimmer("Beto", "Blanco")
        tracker.log_meters(a.id, 2 ** 62, "2024-01-01")
        tracker.log_meters(a.id, 2 ** 62, "2024-01-02")
        tracker.log_meters(b.id, INT64_MAX, "2024-01-01")

        summary = tracker.compute_summary()

        assert summary.total_meters == 2 ** 63 + INT64_MAX
        assert summary.percentage == "100.00"
        assert summary.remaining_meters == 0
        assert [(t.id, t.total_meters) for t in summary.by_swimmer] == [
            (a.id, 2 ** 63),
            (b.id, INT64_MAX),
        ]

    def test_largest_storable_entry_round_trips(self, tracker):
        """The biggest 64-bit value is stored and listed unchanged."""
        swimmer = tracker.create_swimmer("Ana", "Pérez")

        entry = tracker.log_meters(swimmer.id, INT64_MAX, "2024-01-01")

        assert entry.meters == INT64_MAX
        assert [row.meters for row in tracker.list_meter_log()] == [INT64_MAX]

    def test_entry_beyond_64_bits_is_range_error(self, tracker):
        """A value the database can't hold is rejected and nothing is stored."""
        swimmer = tracker.create_swimmer("Ana", "Pérez")

        with pytest.raises(StorageRangeError):
            tracker.log_meters(swimmer.id, 2 ** 63, "2024-01-01")

        assert tracker.list_meter_log() == []
        assert tracker.compute_summary().total_meters == 0
