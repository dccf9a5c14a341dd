"""Reservation engine: regular and urgent lists, seat index and file store"""
import logging
import threading
from datetime import date, datetime, timedelta
from typing import Dict, List, Optional, Union

from data_structures import ReservationList, SeatIndex
from database import LoadResult, ReservationStore, has_offset
from models import OperationResult, OperationStatus, Population, Reservation
from search import binary_search_by_flight, search_by_flight_and_date

URGENT_WINDOW = timedelta(hours=24)

logger = logging.getLogger(__name__)


class ReservationEngine:
    def __init__(self, file_path: Optional[str] = None):
        self.regular_list = ReservationList()
        self.urgent_list = ReservationList()
        self.seat_index = SeatIndex()
        self.store = ReservationStore(file_path)
        self._lock = threading.RLock()
        self.load_result = self.load_data()

    def load_data(self) -> LoadResult:
        """Replay the persisted rows into the two lists without saving"""
        result = self.store.load()
        rejected = 0
        with self._lock:
            for record, population in result.rows:
                if not self._insert(record, population, persist=False).ok:
                    rejected += 1
        if rejected:
            result = result._replace(skipped=result.skipped + rejected)
        logger.info(
            f"Reservation lists initialized: {len(self.regular_list)} regular, "
            f"{len(self.urgent_list)} urgent"
        )
        return result

    @property
    def regular(self) -> List[Reservation]:
        with self._lock:
            return self.regular_list.get_all()

    @property
    def urgent(self) -> List[Reservation]:
        with self._lock:
            return self.urgent_list.get_all()

    def _offset_conflict(self, booking_time: datetime) -> bool:
        """True when booking_time is naive and stored times are aware, or the reverse"""
        for target in (self.regular_list, self.urgent_list):
            existing = target.first()
            if existing is not None:
                return has_offset(existing.booking_time) != has_offset(booking_time)
        return False

    def _save(self, result: OperationResult) -> OperationResult:
        if not self.store.save(self.regular_list, self.urgent_list):
            result.persisted = False
            result.warning = f"Reservations could not be saved to {self.store.path}"
        return result

    def _insert(self, record: Reservation, population: Population, persist: bool = True) -> OperationResult:
        """Insert into the population's list; persist=False while replaying the file"""
        target = self.urgent_list if population == Population.URGENT else self.regular_list
        kind = "Urgent reservation" if population == Population.URGENT else "Reservation"
        with self._lock:
            if self._offset_conflict(record.booking_time):
                logger.info(f"{kind} {record.id} rejected: booking time offset does not match stored reservations")
                return OperationResult(
                    status=OperationStatus.REJECTED,
                    message="Booking time must match the UTC offset handling of existing reservations.",
                )
            target.insert_sorted(record)
            result = OperationResult(
                message=f"{kind} added for {record.passenger_name} on flight {record.flight_number}.",
                records=[record],
            )
            if persist:
                logger.info(f"{kind} {record.id} added on flight {record.flight_number}")
                self._save(result)
            return result

    # Reservation operations

    def add_reservation(self, passenger_name: str, flight_number: str, seat_number: str,
                        booking_time: datetime, reservation_id: int) -> OperationResult:
        """Insert a regular reservation in booking date order"""
        record = Reservation(
            passenger_name=passenger_name,
            flight_number=flight_number,
            seat_number=seat_number,
            booking_time=booking_time,
            id=reservation_id,
        )
        return self._insert(record, Population.REGULAR)

    def add_urgent_reservation(self, passenger_name: str, flight_number: str, seat_number: str,
                               booking_time: datetime, reservation_id: int,
                               now: Optional[datetime] = None) -> OperationResult:
        """Insert into the urgent list if booking_time is within 24 hours of now"""
        record = Reservation(
            passenger_name=passenger_name,
            flight_number=flight_number,
            seat_number=seat_number,
            booking_time=booking_time,
            id=reservation_id,
        )
        if now is None:
            now = datetime.now(booking_time.tzinfo)
        elif has_offset(now) != has_offset(booking_time):
            return OperationResult(
                status=OperationStatus.REJECTED,
                message="Booking time and current time must both carry a UTC offset or both omit it.",
            )

        if booking_time - now > URGENT_WINDOW:
            logger.info(f"Reservation {reservation_id} rejected as urgent: departs after 24 hours")
            return OperationResult(
                status=OperationStatus.REJECTED,
                message="Reservation is not within 24 hours and does not qualify as urgent.",
            )

        return self._insert(record, Population.URGENT)

    def remove_reservation(self, reservation_id: int) -> OperationResult:
        """Remove by id from the regular list, falling back to the urgent list"""
        with self._lock:
            removed = self.regular_list.delete_by_id(reservation_id)
            if removed is None:
                removed = self.urgent_list.delete_by_id(reservation_id)
            if removed is None:
                return OperationResult(
                    status=OperationStatus.NOT_FOUND,
                    message=f"No reservation found with ID {reservation_id}.",
                )
            logger.info(f"Reservation {reservation_id} removed")
            return self._save(OperationResult(
                message=f"Reservation ID {reservation_id} has been removed.",
                records=[removed],
            ))

    def list_reservations(self) -> Dict[str, List[Reservation]]:
        """All reservations, urgent first, each in booking date order"""
        with self._lock:
            return {
                Population.URGENT.value: self.urgent_list.get_all(),
                Population.REGULAR.value: self.regular_list.get_all(),
            }

    def search_reservations(self, flight_number: str, booking_date: Union[date, datetime]) -> OperationResult:
        """Regular reservations on a flight booked on the given calendar date"""
        matches = search_by_flight_and_date(self.regular, flight_number, booking_date)
        if not matches:
            return OperationResult(
                status=OperationStatus.NOT_FOUND,
                message="No matching reservations found.",
            )
        return OperationResult(message=f"Found {len(matches)} reservation(s).", records=matches)

    def search_reservations_binary(self, flight_number: str) -> OperationResult:
        """Binary search the regular list by flight number (first hit only)"""
        match = binary_search_by_flight(self.regular, flight_number)
        if match is None:
            return OperationResult(
                status=OperationStatus.NOT_FOUND,
                message=f"No reservation found for flight {flight_number}.",
            )
        return OperationResult(
            message=f"Found: Passenger {match.passenger_name}, Seat {match.seat_number}, Reservation ID {match.id}",
            records=[match],
        )

    def manage_seat_availability(self, flight_number: str, seat_number: str, is_available: bool) -> OperationResult:
        """Add or remove a seat in the flight's available set"""
        with self._lock:
            changed = self.seat_index.set_availability(flight_number, seat_number, is_available)
        if not changed:
            return OperationResult(
                status=OperationStatus.NOT_FOUND,
                message=f"Seat {seat_number} on flight {flight_number} was not available.",
            )
        state = "available" if is_available else "unavailable"
        logger.info(f"Seat {seat_number} on flight {flight_number} marked {state}")
        return OperationResult(message=f"Seat {seat_number} on flight {flight_number} marked {state}.")

    def sort_reservations_by_date(self) -> OperationResult:
        """Merge sort the regular list by booking date and persist"""
        with self._lock:
            self.regular_list.sort_by_date()
            return self._save(OperationResult(
                message="Reservations sorted by booking date.",
                records=self.regular,
            ))
