# models.py
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Role(str, Enum):
    ADMIN = 'admin'
    CUSTOMER = 'customer'

    @classmethod
    def parse(cls, value):
        """Return a Role for a known label, otherwise None."""
        try:
            return cls(value)
        except ValueError:
            return None


class AccommodationType(str, Enum):
    COTTAGE = 'cottage'
    ROOM = 'room'
    TENT = 'tent'


class PaymentMethod(str, Enum):
    CREDIT_CARD = 'credit_card'
    CASH = 'cash'
    BANK_TRANSFER = 'bank_transfer'
    GCASH = 'gcash'

    @property
    def label(self):
        return PAYMENT_METHOD_NAMES[self]


PAYMENT_METHOD_NAMES = {
    PaymentMethod.CREDIT_CARD: 'Credit Card',
    PaymentMethod.GCASH: 'GCash',
    PaymentMethod.CASH: 'Cash',
    PaymentMethod.BANK_TRANSFER: 'Bank Transfer',
}


class BookingStatus(str, Enum):
    PENDING = 'pending'
    CONFIRMED = 'confirmed'
    COMPLETED = 'completed'
    CANCELLED = 'cancelled'


DURATION_CHOICES = (3, 22)


def duration_from_label(label):
    """'3 Hours' -> 3; any other tier label -> 22."""
    return 3 if str(label).strip().startswith('3') else 22


def duration_label(hours):
    return f"{hours} Hours"


class _Record(BaseModel):
    model_config = ConfigDict(extra='ignore', use_enum_values=False)

    @field_validator('id', mode='before', check_fields=False)
    @classmethod
    def _id_as_str(cls, value):
        return str(value) if value is not None else value


class Session(BaseModel):
    """An authenticated session: bearer token, role and owning user."""
    token: str
    role: Optional[Role] = None
    user_id: Optional[str] = None

    @field_validator('role', mode='before')
    @classmethod
    def _known_role(cls, value):
        return Role.parse(value) if value is not None else None

    @property
    def is_admin(self):
        return self.role == Role.ADMIN


class User(_Record):
    id: str
    name: str = ''
    email: str = ''
    role: Optional[Role] = None

    @field_validator('role', mode='before')
    @classmethod
    def _known_role(cls, value):
        return Role.parse(value) if value is not None else None

    @classmethod
    def from_api(cls, data: dict) -> 'User':
        """Build a User from either ``name`` or ``firstname``/``lastname``."""
        name = data.get('name')
        if not name and (data.get('firstname') or data.get('lastname')):
            name = f"{data.get('firstname', '')} {data.get('lastname', '')}".strip()
        return cls(id=data['id'], name=name or '', email=data.get('email', ''), role=data.get('role'))


class Accommodation(_Record):
    id: str
    name: str
    type: AccommodationType
    description: str = ''
    capacity_min: int = 1
    capacity_max: int = 1
    duration_hours: int
    price: float
    available_units: int = 0
    image_path: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator('duration_hours')
    @classmethod
    def _duration_tier(cls, value):
        if value not in DURATION_CHOICES:
            raise ValueError(f"duration_hours must be one of {DURATION_CHOICES}")
        return value

    @property
    def capacity(self):
        if self.capacity_min == self.capacity_max:
            return str(self.capacity_max)
        return f"{self.capacity_min}-{self.capacity_max}"

    @property
    def duration_label(self):
        return duration_label(self.duration_hours)


class UserSummary(_Record):
    id: str
    name: str = ''
    email: str = ''


class AccommodationSummary(_Record):
    id: str
    name: str = ''
    type: str = ''
    duration_hours: Optional[int] = None
    price: Optional[float] = None


class Booking(_Record):
    """A reservation. Also used as a row of the customer's transaction history."""
    id: str
    user_id: Optional[str] = None
    accommodation_id: Optional[str] = None
    cottage_type: Optional[str] = None
    duration: Optional[int] = None
    quantity: int = 1
    total_price: float = 0
    payment_method: PaymentMethod
    status: BookingStatus = BookingStatus.PENDING
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None
    booking_date: Optional[datetime] = None
    check_in_date: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    user: Optional[UserSummary] = None
    accommodation: Optional[AccommodationSummary] = None

    @field_validator('user_id', 'accommodation_id', mode='before')
    @classmethod
    def _ref_as_str(cls, value):
        return str(value) if value is not None else value

    @field_validator('booking_date', 'check_in_date', mode='before')
    @classmethod
    def _date_only(cls, value):
        # the backend sends plain YYYY-MM-DD for calendar fields
        if isinstance(value, str) and len(value) == 10:
            return f"{value}T00:00:00"
        return value or None

    @property
    def display_name(self):
        if self.accommodation and self.accommodation.name:
            return self.accommodation.name
        return self.cottage_type or ''

    @property
    def display_customer(self):
        if self.user and self.user.name:
            return self.user.name
        return self.customer_name or ''


class DashboardStats(BaseModel):
    total: int = 0
    pending: int = 0
    confirmed: int = 0
    completed: int = 0
    cancelled: int = 0
    revenue: float = 0

    @classmethod
    def from_bookings(cls, bookings: List[Booking]) -> 'DashboardStats':
        counts = {status: 0 for status in BookingStatus}
        revenue = 0.0
        for booking in bookings:
            counts[booking.status] += 1
            # only confirmed and completed bookings count as revenue
            if booking.status in (BookingStatus.CONFIRMED, BookingStatus.COMPLETED):
                revenue += booking.total_price
        return cls(
            total=len(bookings),
            pending=counts[BookingStatus.PENDING],
            confirmed=counts[BookingStatus.CONFIRMED],
            completed=counts[BookingStatus.COMPLETED],
            cancelled=counts[BookingStatus.CANCELLED],
            revenue=revenue,
        )


class CookieAction(BaseModel):
    action: str
    token: Optional[str] = None
    role: Optional[str] = None
    user_id: Optional[str] = Field(None, alias='userId')

    model_config = ConfigDict(populate_by_name=True)
