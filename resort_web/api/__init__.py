from .client import ApiClient, api
from .accommodations import AccommodationService, accommodation_service
from .bookings import BookingService, booking_service
from .transactions import TransactionService, transaction_service
from .auth import AuthGateway, auth_gateway

__all__ = [
    'ApiClient', 'api',
    'AccommodationService', 'accommodation_service',
    'BookingService', 'booking_service',
    'TransactionService', 'transaction_service',
    'AuthGateway', 'auth_gateway',
]
