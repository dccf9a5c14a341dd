"""Search helpers over reservation lists"""
from datetime import date, datetime
from typing import Iterable, List, Optional, Union

from models import Reservation


def binary_search_by_flight(records: Iterable[Reservation], flight_number: str) -> Optional[Reservation]:
    """Binary search on a flight-sorted copy; returns the first hit only.

    The comparison is case-insensitive. The source is never reordered.
    """
    ordered = sorted(records, key=lambda r: r.flight_number.lower())
    target = flight_number.lower()

    low, high = 0, len(ordered) - 1
    while low <= high:
        mid = (low + high) // 2
        candidate = ordered[mid].flight_number.lower()
        if candidate == target:
            return ordered[mid]
        if candidate < target:
            low = mid + 1
        else:
            high = mid - 1
    return None


def search_by_flight_and_date(records: Iterable[Reservation], flight_number: str,
                              booking_date: Union[date, datetime]) -> List[Reservation]:
    """Exact flight match booked on the same calendar date"""
    if isinstance(booking_date, datetime):
        booking_date = booking_date.date()
    return [
        r for r in records
        if r.flight_number == flight_number and r.booking_time.date() == booking_date
    ]
