# api/transactions.py
import logging

from flask import flash, has_request_context

from ..errors import SESSION_ERRORS, ApiError
from ..models import Booking, BookingStatus
from .client import api, unwrap

logger = logging.getLogger(__name__)


def _notify(message):
    if has_request_context():
        flash(message, 'error')


class TransactionService:
    """The current customer's bookings, read-only.

    List calls degrade to an empty list with a notice; session errors
    (401/403) still propagate so the app can redirect.
    """

    def __init__(self, client=None):
        self.client = client or api

    def get_all(self):
        try:
            payload = self.client.get('/bookings')
        except SESSION_ERRORS:
            raise
        except ApiError as e:
            logger.error("Error fetching bookings from API: %s", e.message)
            _notify('Could not load your bookings. Please try again later.')
            return []
        return [Booking.model_validate(b) for b in unwrap(payload, [])]

    def get_by_status(self, status):
        status = BookingStatus(status).value
        try:
            payload = self.client.get('/bookings', params={'status': status})
        except SESSION_ERRORS:
            raise
        except ApiError as e:
            logger.error("Error fetching bookings with status %s: %s", status, e.message)
            _notify(f"Failed to load {status} bookings. Please try again later.")
            return []
        return [Booking.model_validate(b) for b in unwrap(payload, [])]

    def get_by_id(self, booking_id):
        try:
            payload = self.client.get(f'/bookings/{booking_id}')
        except SESSION_ERRORS:
            raise
        except ApiError as e:
            logger.error("Error fetching booking with ID %s: %s", booking_id, e.message)
            _notify('Could not retrieve booking details.')
            raise ApiError('Booking not found or could not be loaded',
                           status_code=e.status_code, endpoint=e.endpoint) from e
        return Booking.model_validate(unwrap(payload))


transaction_service = TransactionService()
