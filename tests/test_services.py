# tests/test_services.py
from unittest import mock

import pytest

from resort_web.api.accommodations import AccommodationService
from resort_web.api.bookings import BookingService
from resort_web.api.client import ApiClient
from resort_web.models import BookingStatus

from .conftest import ACCOMMODATION, BASE_URL, booking_record, make_response


@pytest.fixture
def http():
    return mock.Mock()


@pytest.fixture
def bookings(http):
    return BookingService(client=ApiClient(base_url=BASE_URL, session=http))


@pytest.fixture
def accommodations(http):
    return AccommodationService(client=ApiClient(base_url=BASE_URL, session=http))


def _sent(http):
    args, kwargs = http.request.call_args
    method, url = args
    return method, url[len(BASE_URL):], kwargs


@pytest.mark.parametrize('method_name, status', [
    ('get_pending_bookings', 'pending'),
    ('get_confirmed_bookings', 'confirmed'),
    ('get_completed_bookings', 'completed'),
    ('get_cancelled_bookings', 'cancelled'),
])
def test_admin_listing_by_status(bookings, http, method_name, status):
    http.request.return_value = make_response(200, {'data': [booking_record(1, status)]})
    result = getattr(bookings, method_name)()
    assert _sent(http)[:2] == ('GET', f'/admin/dashboard/bookings/{status}')
    assert [b.status for b in result] == [BookingStatus(status)]


def test_admin_listing_tolerates_bad_payload(bookings, http):
    http.request.return_value = make_response(200, {'data': {'unexpected': True}})
    assert bookings.get_completed_bookings() == []


def test_get_all_with_status(bookings, http):
    http.request.return_value = make_response(200, {'data': []})
    bookings.get_all(status=BookingStatus.PENDING)
    method, path, kwargs = _sent(http)
    assert (method, path) == ('GET', '/bookings')
    assert kwargs['params'] == {'status': 'pending'}


def test_get_by_id(bookings, http):
    http.request.return_value = make_response(200, {'data': booking_record(12, 'confirmed')})
    booking = bookings.get_by_id(12)
    assert _sent(http)[:2] == ('GET', '/bookings/12')
    assert booking.id == '12'


def test_update_is_put(bookings, http):
    http.request.return_value = make_response(200, {'data': booking_record(12, quantity=3)})
    booking = bookings.update(12, {'quantity': 3, 'status': BookingStatus.CONFIRMED})
    method, path, kwargs = _sent(http)
    assert (method, path) == ('PUT', '/bookings/12')
    assert kwargs['json'] == {'quantity': 3, 'status': 'confirmed'}
    assert booking.quantity == 3


def test_delete(bookings, http):
    http.request.return_value = make_response(204)
    bookings.delete(12)
    assert _sent(http)[:2] == ('DELETE', '/bookings/12')


@pytest.mark.parametrize('method_name, status', [
    ('approve_booking', 'confirmed'),
    ('complete_booking', 'completed'),
    ('cancel_booking', 'cancelled'),
])
def test_status_shorthands(bookings, http, method_name, status):
    http.request.return_value = make_response(200, {'data': booking_record(12, status)})
    booking = getattr(bookings, method_name)(12)
    method, path, kwargs = _sent(http)
    assert (method, path) == ('PATCH', '/bookings/12/status')
    assert kwargs['json'] == {'status': status}
    assert booking.status == BookingStatus(status)


def test_status_update_without_record(bookings, http):
    http.request.return_value = make_response(200, {'message': 'ok'})
    assert bookings.update_status(12, 'completed') is None


def test_toggle_active(accommodations, http):
    http.request.return_value = make_response(200, {'data': dict(ACCOMMODATION, is_active=False)})
    accommodation = accommodations.toggle_active(7)
    assert _sent(http)[:2] == ('PATCH', '/accommodations/7/toggle-active')
    assert accommodation.is_active is False


def test_delete_accommodation(accommodations, http):
    http.request.return_value = make_response(204)
    accommodations.delete(7)
    assert _sent(http)[:2] == ('DELETE', '/accommodations/7')
