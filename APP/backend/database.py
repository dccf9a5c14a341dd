"""Flat file persistence for Flight Reservation System"""
import logging
import os
import threading
from datetime import datetime
from pathlib import Path
from typing import Iterable, List, NamedTuple, Optional, Tuple

from dotenv import load_dotenv
from pydantic import ValidationError

from models import Population, Reservation

ROOT_DIR = Path(__file__).parent
load_dotenv(ROOT_DIR / '.env')

DEFAULT_DATA_PATH = os.path.join(os.path.dirname(__file__), 'reservations.txt')

FIELD_COUNT = 6

logger = logging.getLogger(__name__)


class MalformedRowError(ValueError):
    """A persisted line that cannot be turned back into a reservation"""

    def __init__(self, line_number: int, line: str, reason: str):
        super().__init__(f"line {line_number}: {reason}")
        self.line_number = line_number
        self.line = line
        self.reason = reason


class LoadResult(NamedTuple):
    rows: List[Tuple[Reservation, Population]]
    skipped: int


def get_data_path() -> str:
    """Resolve the reservations file from RESERVATIONS_FILE or the default"""
    return os.environ.get('RESERVATIONS_FILE', DEFAULT_DATA_PATH)


def format_row(record: Reservation, population: Population) -> str:
    """Serialize one reservation to a file line (without newline)"""
    return ','.join([
        record.passenger_name,
        record.flight_number,
        record.seat_number,
        record.booking_time.isoformat(),
        str(record.id),
        population.value,
    ])


def decode_line(raw: bytes, line_number: int = 0) -> str:
    """Decode one UTF-8 file line and strip its line ending"""
    try:
        return raw.decode('utf-8').rstrip('\r\n')
    except UnicodeDecodeError as e:
        raise MalformedRowError(line_number, repr(raw), f"invalid UTF-8 ({e.reason})")


def has_offset(value: datetime) -> bool:
    return value.utcoffset() is not None


def parse_row(line: str, line_number: int = 0) -> Tuple[Reservation, Population]:
    """Parse a file line into a reservation and its population"""
    details = line.split(',')
    if len(details) != FIELD_COUNT:
        raise MalformedRowError(line_number, line, f"expected {FIELD_COUNT} fields, got {len(details)}")

    name, flight_number, seat_number, raw_time, raw_id, tag = details
    try:
        booking_time = datetime.fromisoformat(raw_time)
    except ValueError:
        raise MalformedRowError(line_number, line, f"invalid booking time {raw_time!r}")
    try:
        reservation_id = int(raw_id)
    except ValueError:
        raise MalformedRowError(line_number, line, f"invalid reservation id {raw_id!r}")
    try:
        population = Population(tag)
    except ValueError:
        raise MalformedRowError(line_number, line, f"unknown population tag {tag!r}")

    try:
        record = Reservation(
            passenger_name=name,
            flight_number=flight_number,
            seat_number=seat_number,
            booking_time=booking_time,
            id=reservation_id,
        )
    except ValidationError as e:
        raise MalformedRowError(line_number, line, str(e))
    return record, population


class ReservationStore:
    """Reads and rewrites the reservations file under an exclusive lock"""

    def __init__(self, path: Optional[str] = None):
        self.path = path or get_data_path()
        self._lock = threading.RLock()

    def load(self) -> LoadResult:
        """Read every row; malformed rows are skipped and counted.

        A missing file is an empty store; an unreadable one is logged and
        treated as empty.
        """
        rows = []
        skipped = 0
        with self._lock:
            if not os.path.exists(self.path):
                logger.info(f"No reservations file at {self.path}, starting empty")
                return LoadResult(rows, skipped)
            aware = None
            try:
                with open(self.path, 'rb') as handle:
                    for line_number, raw in enumerate(handle, 1):
                        if not raw.strip():
                            continue
                        try:
                            line = decode_line(raw, line_number)
                            record, population = parse_row(line, line_number)
                            row_aware = has_offset(record.booking_time)
                            if aware is None:
                                aware = row_aware
                            elif row_aware != aware:
                                raise MalformedRowError(
                                    line_number, line,
                                    "booking time offset does not match earlier rows",
                                )
                            rows.append((record, population))
                        except MalformedRowError as e:
                            skipped += 1
                            logger.warning(f"Skipping malformed reservation row ({e})")
            except OSError as e:
                logger.warning(f"Error loading reservations from {self.path}: {e}")
                return LoadResult([], 0)

        logger.info(f"Loaded {len(rows)} reservations from {self.path} ({skipped} skipped)")
        return LoadResult(rows, skipped)

    def save(self, regular: Iterable[Reservation], urgent: Iterable[Reservation]) -> bool:
        """Overwrite the file with regular rows then urgent rows"""
        lines = [format_row(r, Population.REGULAR) for r in regular]
        lines.extend(format_row(r, Population.URGENT) for r in urgent)

        with self._lock:
            try:
                with open(self.path, 'w', encoding='utf-8', newline='\n') as handle:
                    for line in lines:
                        handle.write(line + '\n')
            except OSError as e:
                logger.warning(f"Error saving reservations to {self.path}: {e}")
                return False
        return True
