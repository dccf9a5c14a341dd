from pathlib import Path
import sys
from datetime import date, datetime

BACKEND_DIR = Path(__file__).resolve().parents[1] / "APP" / "backend"
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from data_structures import ReservationList
from models import Reservation
from search import binary_search_by_flight, search_by_flight_and_date


def make(reservation_id: int, flight: str, when: datetime) -> Reservation:
    return Reservation(
        passenger_name=f"Pax{reservation_id}",
        flight_number=flight,
        seat_number="1A",
        booking_time=when,
        id=reservation_id,
    )


def build(records) -> ReservationList:
    lst = ReservationList()
    for record in records:
        lst.insert_sorted(record)
    return lst


def test_binary_search_finds_single_match() -> None:
    lst = build([
        make(1, "DL300", datetime(2025, 1, 1)),
        make(2, "AA100", datetime(2025, 1, 2)),
        make(3, "BA200", datetime(2025, 1, 3)),
        make(4, "UA400", datetime(2025, 1, 4)),
    ])

    match = binary_search_by_flight(lst, "AA100")

    assert match is not None
    assert match.id == 2


def test_binary_search_is_case_insensitive() -> None:
    lst = build([make(1, "aa100", datetime(2025, 1, 1)), make(2, "BA200", datetime(2025, 1, 2))])

    assert binary_search_by_flight(lst, "AA100").id == 1


def test_binary_search_empty_and_missing() -> None:
    assert binary_search_by_flight(ReservationList(), "AA100") is None

    lst = build([make(1, "BA200", datetime(2025, 1, 1))])
    assert binary_search_by_flight(lst, "AA100") is None


def test_binary_search_returns_one_of_duplicates() -> None:
    lst = build([make(i, "AA100", datetime(2025, 1, i)) for i in range(1, 4)])

    match = binary_search_by_flight(lst, "AA100")

    assert match.id in {1, 2, 3}


def test_binary_search_leaves_list_order_alone() -> None:
    lst = build([
        make(1, "ZZ900", datetime(2025, 1, 1)),
        make(2, "AA100", datetime(2025, 1, 2)),
    ])

    binary_search_by_flight(lst, "AA100")

    assert [r.id for r in lst] == [1, 2]


def test_search_by_flight_and_date_matches_calendar_day() -> None:
    records = [
        make(1, "AA100", datetime(2025, 1, 10, 6, 0)),
        make(2, "AA100", datetime(2025, 1, 10, 23, 30)),
        make(3, "AA100", datetime(2025, 1, 11, 0, 0)),
        make(4, "BA200", datetime(2025, 1, 10, 9, 0)),
    ]

    matches = search_by_flight_and_date(records, "AA100", date(2025, 1, 10))

    assert [r.id for r in matches] == [1, 2]


def test_search_by_flight_and_date_accepts_datetime_and_is_case_sensitive() -> None:
    records = [make(1, "AA100", datetime(2025, 1, 10, 6, 0))]

    assert [r.id for r in search_by_flight_and_date(records, "AA100", datetime(2025, 1, 10, 18, 0))] == [1]
    assert search_by_flight_and_date(records, "aa100", date(2025, 1, 10)) == []
