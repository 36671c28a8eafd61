# booking_routes.py
import logging

from flask import Blueprint, flash, redirect, render_template, request, url_for

from .api import accommodation_service, booking_service, transaction_service
from .errors import SESSION_ERRORS, ApiError, ValidationError
from .filters import CatalogFilter, TransactionFilter, filter_catalog, filter_transactions
from .forms import BookingForm, validate_form
from .models import AccommodationType, BookingStatus, PaymentMethod

logger = logging.getLogger(__name__)

booking_bp = Blueprint('booking', __name__)

STATUS_MESSAGES = {
    BookingStatus.PENDING: 'Your booking is waiting for confirmation from the resort.',
    BookingStatus.CONFIRMED: 'Your booking is confirmed. See you soon!',
    BookingStatus.COMPLETED: 'Thank you for staying with us.',
    BookingStatus.CANCELLED: 'This booking was cancelled.',
}


@booking_bp.route('/home', methods=['GET'])
def home():
    return render_template('home.html')


@booking_bp.route('/booking', methods=['GET'])
def catalog():
    filters = CatalogFilter.from_args(request.args)
    error = None
    try:
        accommodations = accommodation_service.get_available()
    except SESSION_ERRORS:
        raise
    except ApiError as e:
        logger.error("Failed to load accommodations: %s", e.message)
        accommodations = []
        error = 'Failed to load accommodations. Please try again later.'
    return render_template(
        'booking.html',
        accommodations=filter_catalog(accommodations, filters),
        filters=filters,
        types=list(AccommodationType),
        error=error,
    )


def _render_booking_form(accommodation, form, errors=None, status=200):
    return render_template(
        'booking_form.html',
        accommodation=accommodation,
        form=form,
        total_price=form.total_price(accommodation),
        payment_methods=list(PaymentMethod),
        errors=errors or {},
    ), status


@booking_bp.route('/booking/<accommodation_id>', methods=['GET', 'POST'])
def book(accommodation_id):
    accommodation = accommodation_service.get_by_id(accommodation_id)

    if request.method == 'GET':
        form = BookingForm(accommodation_id=accommodation.id)
        return _render_booking_form(accommodation, form)

    try:
        form = validate_form(BookingForm, {
            'accommodation_id': accommodation.id,
            'quantity': request.form.get('quantity', 1),
            'payment_method': request.form.get('payment_method', PaymentMethod.CREDIT_CARD.value),
        })
        notice = form.clamp(accommodation)
    except ValidationError as e:
        flash(e.first(), 'error')
        # keep the typed quantity
        form = BookingForm(accommodation_id=accommodation.id, quantity=request.form.get('quantity', 1))
        return _render_booking_form(accommodation, form, e.errors, 400)

    if notice:
        # show the corrected quantity and total before submitting anything
        flash(notice, 'error')
        return _render_booking_form(accommodation, form, {'quantity': notice}, 400)

    try:
        booking_service.create(accommodation.id, form.quantity, form.payment_method)
    except SESSION_ERRORS:
        raise
    except ApiError as e:
        logger.error("Booking submission error: %s", e.message)
        message = e.payload.get('message') or 'Failed to submit booking. Please try again.'
        flash(message, 'error')
        return _render_booking_form(accommodation, form, status=400)

    flash('Booking submitted successfully! Waiting for confirmation.', 'success')
    return redirect(url_for('booking.transactions'))


@booking_bp.route('/transaction', methods=['GET'])
def transactions():
    filters = TransactionFilter.from_args(request.args)
    if filters.status:
        records = transaction_service.get_by_status(filters.status)
    else:
        records = transaction_service.get_all()
    return render_template(
        'transaction.html',
        transactions=filter_transactions(records, filters),
        filters=filters,
        statuses=list(BookingStatus),
        status_messages=STATUS_MESSAGES,
    )


@booking_bp.route('/transaction/<booking_id>', methods=['GET'])
def transaction_detail(booking_id):
    record = transaction_service.get_by_id(booking_id)
    return render_template(
        'transaction_detail.html',
        transaction=record,
        status_message=STATUS_MESSAGES[record.status],
    )
