# filters.py
from datetime import date, datetime
from typing import Iterable, List, NamedTuple, Optional, Sequence

from .models import AccommodationType, BookingStatus, duration_from_label

BOOKING_TABS = ('pending', 'confirmed', 'all')


def _blank_to_none(value):
    value = (value or '').strip()
    return value or None


def _parse_bool(value):
    if value == 'true':
        return True
    if value == 'false':
        return False
    return None


def _parse_date(value):
    value = _blank_to_none(value)
    if value is None:
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        return None


def _as_date(value):
    if isinstance(value, datetime):
        return value.date()
    return value


class AccommodationFilter(NamedTuple):
    type: Optional[str] = None
    duration: Optional[str] = None
    availability: Optional[bool] = None
    search_query: Optional[str] = None

    @classmethod
    def from_args(cls, args):
        return cls(
            type=_blank_to_none(args.get('type')),
            duration=_blank_to_none(args.get('duration')),
            availability=_parse_bool(args.get('availability')),
            search_query=_blank_to_none(args.get('q')),
        )

    @property
    def active(self):
        return any(v is not None for v in self)


def filter_accommodations(accommodations: Iterable, filters: AccommodationFilter) -> List:
    result = list(accommodations)
    if filters.type:
        result = [a for a in result if a.type.value == filters.type]
    if filters.duration:
        hours = duration_from_label(filters.duration)
        result = [a for a in result if a.duration_hours == hours]
    if filters.availability is not None:
        result = [a for a in result if a.is_active == filters.availability]
    if filters.search_query:
        query = filters.search_query.lower()
        result = [a for a in result
                  if query in a.name.lower() or query in (a.description or '').lower()]
    return result


class CatalogFilter(NamedTuple):
    """Filters on the public booking page."""
    categories: Sequence[str] = ()
    duration: Optional[str] = None

    @classmethod
    def from_args(cls, args):
        return cls(
            categories=tuple(c for c in args.getlist('category') if c),
            duration=_blank_to_none(args.get('duration')),
        )


def filter_catalog(accommodations: Iterable, filters: CatalogFilter) -> List:
    result = list(accommodations)
    if filters.categories:
        wanted = set()
        for category in filters.categories:
            try:
                wanted.add(AccommodationType(category.lower()))
            except ValueError:
                continue
        result = [a for a in result if a.type in wanted]
    if filters.duration:
        hours = duration_from_label(filters.duration)
        result = [a for a in result if a.duration_hours == hours]
    return result


class TransactionFilter(NamedTuple):
    status: Optional[BookingStatus] = None
    start: Optional[date] = None
    end: Optional[date] = None

    @classmethod
    def from_args(cls, args):
        status = _blank_to_none(args.get('status'))
        try:
            status = BookingStatus(status) if status else None
        except ValueError:
            status = None
        return cls(
            status=status,
            start=_parse_date(args.get('start')),
            end=_parse_date(args.get('end')),
        )


def filter_transactions(transactions: Iterable, filters: TransactionFilter) -> List:
    result = list(transactions)
    if filters.status:
        result = [t for t in result if t.status == filters.status]
    # a date range applies only once both ends are set
    if filters.start and filters.end:
        result = [t for t in result
                  if t.check_in_date is not None
                  and filters.start <= _as_date(t.check_in_date) <= filters.end]
    return result


def filter_bookings_by_tab(bookings: Iterable, tab: str) -> List:
    if tab == 'all':
        return list(bookings)
    status = BookingStatus(tab)
    return [b for b in bookings if b.status == status]


def with_status(bookings: Iterable, booking_id, status: BookingStatus) -> List:
    """Optimistically reflect a requested status change in a fetched list."""
    booking_id = str(booking_id)
    return [b.model_copy(update={'status': status}) if b.id == booking_id else b
            for b in bookings]
