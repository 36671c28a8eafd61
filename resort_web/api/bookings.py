# api/bookings.py
import logging

from ..models import Booking, BookingStatus
from .client import api, unwrap

logger = logging.getLogger(__name__)


def _status_value(status):
    return status.value if isinstance(status, BookingStatus) else BookingStatus(status).value


class BookingService:
    def __init__(self, client=None):
        self.client = client or api

    def get_all(self, status=None):
        """Bookings visible to the caller; admins see every user's."""
        params = {'status': _status_value(status)} if status else {}
        payload = self.client.get('/bookings', params=params)
        return [Booking.model_validate(b) for b in unwrap(payload, [])]

    def get_by_status(self, status):
        status = _status_value(status)
        logger.info("Fetching admin bookings with status: %s", status)
        payload = self.client.get(f'/admin/dashboard/bookings/{status}')
        data = unwrap(payload)
        if not isinstance(data, list):
            logger.warning("Unexpected response format from admin endpoint: %s", payload)
            return []
        return [Booking.model_validate(b) for b in data]

    def get_pending_bookings(self):
        return self.get_by_status(BookingStatus.PENDING)

    def get_confirmed_bookings(self):
        return self.get_by_status(BookingStatus.CONFIRMED)

    def get_completed_bookings(self):
        return self.get_by_status(BookingStatus.COMPLETED)

    def get_cancelled_bookings(self):
        return self.get_by_status(BookingStatus.CANCELLED)

    def get_by_id(self, booking_id):
        payload = self.client.get(f'/bookings/{booking_id}')
        return Booking.model_validate(unwrap(payload))

    def create(self, accommodation_id, quantity, payment_method):
        body = {
            'accommodation_id': accommodation_id,
            'quantity': quantity,
            'payment_method': getattr(payment_method, 'value', payment_method),
        }
        payload = self.client.post('/bookings', json=body)
        return Booking.model_validate(unwrap(payload))

    def update(self, booking_id, fields: dict):
        body = {k: getattr(v, 'value', v) for k, v in fields.items()}
        payload = self.client.put(f'/bookings/{booking_id}', json=body)
        return Booking.model_validate(unwrap(payload))

    def delete(self, booking_id):
        self.client.delete(f'/bookings/{booking_id}')

    def update_status(self, booking_id, status):
        status = _status_value(status)
        logger.info("Updating booking %s to status: %s", booking_id, status)
        payload = self.client.patch(f'/bookings/{booking_id}/status', json={'status': status})
        data = unwrap(payload)
        return Booking.model_validate(data) if data else None

    def approve_booking(self, booking_id):
        return self.update_status(booking_id, BookingStatus.CONFIRMED)

    def complete_booking(self, booking_id):
        return self.update_status(booking_id, BookingStatus.COMPLETED)

    def cancel_booking(self, booking_id):
        return self.update_status(booking_id, BookingStatus.CANCELLED)


booking_service = BookingService()
