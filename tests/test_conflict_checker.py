"""Tests for half-open overlap detection and concurrency counting."""
from datetime import datetime, timedelta

import pytz

from shelter_visits.services.availability.conflict_checker import (
    capacity_exceeded,
    count_overlapping,
    find_overlapping,
    overlaps,
)


class TestOverlaps:
    """Test the half-open interval overlap check."""

    def test_no_overlap(self):
        assert not overlaps(540, 600, 660, 720)

    def test_partial_overlap(self):
        assert overlaps(540, 660, 600, 720)

    def test_containment(self):
        assert overlaps(540, 720, 600, 660)
        assert overlaps(600, 660, 540, 720)

    def test_touching_endpoints_do_not_overlap(self):
        assert not overlaps(540, 600, 600, 660)
        assert not overlaps(600, 660, 540, 600)

    def test_same_interval(self):
        assert overlaps(540, 600, 540, 600)

    def test_aware_datetimes_across_timezones(self):
        utc_start = datetime(2030, 6, 3, 9, 0, tzinfo=pytz.UTC)
        lisbon = pytz.timezone("Europe/Lisbon")
        # 10:00 Lisbon summer time is 09:00 UTC
        lisbon_start = lisbon.localize(datetime(2030, 6, 3, 10, 0))

        assert overlaps(
            utc_start, utc_start + timedelta(hours=1),
            lisbon_start, lisbon_start + timedelta(minutes=30)
        )


class TestCounting:
    """Test counting of overlapping bookings against capacity."""

    intervals = [(540, 600), (570, 630), (660, 720)]

    def test_find_overlapping(self):
        assert find_overlapping(580, 640, self.intervals) == [(540, 600), (570, 630)]

    def test_count_overlapping(self):
        assert count_overlapping(600, 660, self.intervals) == 1
        assert count_overlapping(630, 660, self.intervals) == 0

    def test_capacity_exceeded(self):
        assert capacity_exceeded(580, 640, self.intervals, 2)
        assert not capacity_exceeded(580, 640, self.intervals, 3)

    def test_empty_intervals(self):
        assert count_overlapping(0, 10, []) == 0
        assert not capacity_exceeded(0, 10, [], 1)
