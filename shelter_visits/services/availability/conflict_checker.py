# shelter_visits/services/availability/conflict_checker.py
"""
Overlap Detection

Half-open interval checks shared by lunch-break exclusion, partial-day
blocks and booking concurrency counting. Works for anything orderable:
minute offsets, aware datetimes.
"""
from typing import Iterable, List, Tuple, TypeVar

T = TypeVar("T")


def overlaps(a_start, a_end, b_start, b_end) -> bool:
    """
    True when [a_start, a_end) and [b_start, b_end) share any instant.
    Touching endpoints (a_end == b_start) do not overlap.
    """
    return a_start < b_end and a_end > b_start


def find_overlapping(start, end, intervals: Iterable[Tuple[T, T]]) -> List[Tuple[T, T]]:
    return [
        (other_start, other_end)
        for other_start, other_end in intervals
        if overlaps(start, end, other_start, other_end)
    ]


def count_overlapping(start, end, intervals: Iterable[Tuple[T, T]]) -> int:
    """Number of intervals that overlap [start, end)"""
    return len(find_overlapping(start, end, intervals))


def capacity_exceeded(start, end, intervals: Iterable[Tuple[T, T]], capacity: int) -> bool:
    return count_overlapping(start, end, intervals) >= capacity
