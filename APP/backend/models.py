"""Pydantic models for Flight Reservation System"""
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Characters the flat file format cannot carry inside a field
FORBIDDEN_FIELD_CHARS = (',', '\n', '\r')


class Reservation(BaseModel):
    model_config = ConfigDict(frozen=True)

    passenger_name: str
    flight_number: str
    seat_number: str
    booking_time: datetime
    id: int

    @field_validator('passenger_name', 'flight_number', 'seat_number')
    @classmethod
    def no_delimiters(cls, value: str) -> str:
        if any(char in value for char in FORBIDDEN_FIELD_CHARS):
            raise ValueError('field may not contain commas or line breaks')
        return value


class Population(str, Enum):
    REGULAR = 'regular'
    URGENT = 'urgent'


class OperationStatus(str, Enum):
    OK = 'ok'
    NOT_FOUND = 'not_found'
    REJECTED = 'rejected'


class OperationResult(BaseModel):
    status: OperationStatus = OperationStatus.OK
    message: str
    records: List[Reservation] = Field(default_factory=list)
    persisted: bool = True
    warning: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == OperationStatus.OK
