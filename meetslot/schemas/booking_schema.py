"""Booking records, guest contact details, and submission outcomes."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from meetslot.errors import ErrorKind


class BookingStatus(str, Enum):
    """Lifecycle status of a booking."""
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    PENDING = "pending"


class Booking(BaseModel):
    """Persisted booking. ``end_time`` is fixed at creation."""
    id: str
    host_id: str
    guest_name: str
    guest_email: str
    title: str
    description: Optional[str] = None
    start_time: datetime
    end_time: datetime
    status: BookingStatus = BookingStatus.CONFIRMED
    created_at: datetime = Field(default_factory=datetime.now)


class NewBooking(BaseModel):
    """Booking record handed to the store before an id is assigned."""
    host_id: str
    guest_name: str
    guest_email: str
    title: str
    description: Optional[str] = None
    start_time: datetime
    end_time: datetime
    status: BookingStatus = BookingStatus.CONFIRMED


class GuestInfo(BaseModel):
    """Contact details a guest submits with the booking form."""
    name: str = Field(min_length=1, max_length=255)
    email: EmailStr
    notes: Optional[str] = None

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("name must not be blank")
        return value

    @field_validator("notes")
    @classmethod
    def _blank_notes_to_none(cls, value: Optional[str]) -> Optional[str]:
        if value is None or not value.strip():
            return None
        return value.strip()


class SubmissionResult(BaseModel):
    """Value-returned outcome of a booking submission."""
    success: bool
    booking_id: Optional[str] = None
    error: Optional[ErrorKind] = None
    message: str = ""


class DashboardStats(BaseModel):
    """Counts shown on the host dashboard."""
    upcoming_bookings: int = 0
    total_bookings: int = 0
    meeting_types: int = 0
