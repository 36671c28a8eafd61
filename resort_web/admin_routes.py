# admin_routes.py
import logging
import os

from flask import Blueprint, flash, jsonify, redirect, render_template, request, url_for

from .api import accommodation_service, booking_service
from .errors import SESSION_ERRORS, ApiError, ValidationError
from .filters import BOOKING_TABS, AccommodationFilter, filter_accommodations, filter_bookings_by_tab, with_status
from .forms import AccommodationForm, validate_form
from .models import AccommodationType, BookingStatus, DashboardStats, duration_label

logger = logging.getLogger(__name__)

admin_bp = Blueprint('admin', __name__, url_prefix='/admin')


def _tab(value):
    return value if value in BOOKING_TABS else 'pending'


def load_tab(tab):
    if tab == 'pending':
        return booking_service.get_pending_bookings()
    if tab == 'confirmed':
        return booking_service.get_confirmed_bookings()
    return booking_service.get_all()


def apply_status(booking_id, status):
    if status == BookingStatus.CONFIRMED:
        return booking_service.approve_booking(booking_id)
    if status == BookingStatus.COMPLETED:
        return booking_service.complete_booking(booking_id)
    if status == BookingStatus.CANCELLED:
        return booking_service.cancel_booking(booking_id)
    return booking_service.update_status(booking_id, status)


def _changed(args):
    """The (id, status) of a change made just before this page load, if any."""
    booking_id = args.get('changed')
    try:
        status = BookingStatus(args.get('status'))
    except ValueError:
        return None
    return (booking_id, status) if booking_id else None


# --- Dashboard ---

@admin_bp.route('/dashboard', methods=['GET'])
def dashboard():
    tab = _tab(request.args.get('tab'))
    changed = _changed(request.args)

    all_bookings, stats, stats_error = None, None, None
    try:
        all_bookings = booking_service.get_all()
    except SESSION_ERRORS:
        raise
    except ApiError as e:
        logger.error("Error fetching bookings for stats: %s", e.message)
        stats_error = 'Failed to load booking data. Please try again later.'
    else:
        if changed:
            all_bookings = with_status(all_bookings, *changed)
        stats = DashboardStats.from_bookings(all_bookings)

    bookings, table_error = [], None
    if tab == 'all' and all_bookings is not None:
        bookings = all_bookings
    else:
        try:
            bookings = filter_bookings_by_tab(load_tab(tab), tab)
        except SESSION_ERRORS:
            raise
        except ApiError as e:
            logger.error("Error fetching %s bookings: %s", tab, e.message)
            table_error = f"Failed to load {tab} bookings."
        else:
            # the list may predate the change; show the new status anyway
            if changed:
                bookings = with_status(bookings, *changed)

    return render_template(
        'admin/dashboard.html',
        tab=tab,
        tabs=BOOKING_TABS,
        stats=stats,
        stats_error=stats_error,
        bookings=bookings,
        table_error=table_error,
    )


@admin_bp.route('/bookings/<booking_id>/status', methods=['POST'])
def update_booking_status(booking_id):
    tab = _tab(request.form.get('tab'))
    try:
        status = BookingStatus(request.form.get('status'))
    except ValueError:
        flash('Unknown booking status', 'error')
        return redirect(url_for('admin.dashboard', tab=tab))

    try:
        apply_status(booking_id, status)
    except SESSION_ERRORS:
        raise
    except ApiError as e:
        flash(f"Failed to update booking status: {e.message}", 'error')
        return redirect(url_for('admin.dashboard', tab=tab))

    flash(f"Booking {status.value} successfully", 'success')
    return redirect(url_for('admin.dashboard', tab=tab, changed=booking_id, status=status.value))


@admin_bp.route('/bookings/<booking_id>/status', methods=['PATCH'])
def patch_booking_status(booking_id):
    body = request.get_json(silent=True) or {}
    try:
        status = BookingStatus(body.get('status'))
    except ValueError:
        return jsonify({'error': 'Unknown booking status'}), 400
    tab = _tab(body.get('tab'))

    updated = apply_status(booking_id, status)

    # reflect the change right away; a stale list must not undo it
    try:
        bookings = with_status(load_tab(tab), booking_id, status)
    except SESSION_ERRORS:
        raise
    except ApiError as e:
        logger.warning("Refreshing %s bookings failed: %s", tab, e.message)
        bookings = None

    return jsonify({
        'booking': updated.model_dump(mode='json') if updated else None,
        'bookings': [b.model_dump(mode='json') for b in bookings] if bookings is not None else None,
    })


# --- Accommodations ---

@admin_bp.route('/accommodation', methods=['GET'])
def accommodations():
    filters = AccommodationFilter.from_args(request.args)
    error = None
    try:
        records = accommodation_service.get_all()
    except SESSION_ERRORS:
        raise
    except ApiError as e:
        logger.error("Failed to load accommodations: %s", e.message)
        records, error = [], 'Failed to load accommodations.'
    return render_template(
        'admin/accommodation.html',
        accommodations=filter_accommodations(records, filters),
        filters=filters,
        types=list(AccommodationType),
        durations=[duration_label(3), duration_label(22)],
        error=error,
    )


def _image_from_request():
    image = request.files.get('image')
    if image is None or not image.filename:
        return None, 0
    image.stream.seek(0, os.SEEK_END)
    size = image.stream.tell()
    image.stream.seek(0)
    return image, size


def _form_data(editing):
    image, size = _image_from_request()
    data = {
        'editing': editing,
        'name': request.form.get('name', ''),
        'type': request.form.get('type', AccommodationType.COTTAGE.value),
        'duration': request.form.get('duration', ''),
        'price': request.form.get('price', ''),
        'description': request.form.get('description', ''),
        'capacity': request.form.get('capacity', ''),
        'available': request.form.get('available') in ('on', 'true', '1'),
        'available_units': request.form.get('available_units', 1),
        'image_filename': image.filename if image else None,
        'image_size': size,
    }
    return data, image


def _render_form(values, errors=None, accommodation=None, status=200):
    return render_template(
        'admin/accommodation_form.html',
        values=values,
        errors=errors or {},
        accommodation=accommodation,
        types=list(AccommodationType),
        durations=[duration_label(3), duration_label(22)],
    ), status


@admin_bp.route('/accommodation/new', methods=['GET', 'POST'])
def create_accommodation():
    if request.method == 'GET':
        return _render_form(AccommodationForm.defaults())

    data, image = _form_data(editing=False)
    try:
        form = validate_form(AccommodationForm, data)
    except ValidationError as e:
        flash(e.message, 'error')
        return _render_form(data, e.errors, status=400)

    try:
        accommodation_service.create(form.to_fields(), image)
    except SESSION_ERRORS:
        raise
    except ApiError as e:
        logger.error("Failed to save accommodation: %s", e.message)
        flash('Failed to save accommodation', 'error')
        return _render_form(data, status=400)

    flash('Accommodation created successfully', 'success')
    return redirect(url_for('admin.accommodations'))


@admin_bp.route('/accommodation/<accommodation_id>/edit', methods=['GET', 'POST'])
def edit_accommodation(accommodation_id):
    accommodation = accommodation_service.get_by_id(accommodation_id)
    if request.method == 'GET':
        return _render_form(AccommodationForm.from_accommodation(accommodation), accommodation=accommodation)

    data, image = _form_data(editing=True)
    try:
        form = validate_form(AccommodationForm, data)
    except ValidationError as e:
        flash(e.message, 'error')
        return _render_form(data, e.errors, accommodation, status=400)

    try:
        accommodation_service.update(accommodation.id, form.to_fields(), image)
    except SESSION_ERRORS:
        raise
    except ApiError as e:
        logger.error("Failed to save accommodation %s: %s", accommodation.id, e.message)
        flash('Failed to save accommodation', 'error')
        return _render_form(data, accommodation=accommodation, status=400)

    flash('Accommodation updated successfully', 'success')
    return redirect(url_for('admin.accommodations'))


@admin_bp.route('/accommodation/<accommodation_id>/delete', methods=['POST'])
def delete_accommodation(accommodation_id):
    try:
        accommodation_service.delete(accommodation_id)
    except SESSION_ERRORS:
        raise
    except ApiError as e:
        logger.error("Failed to delete accommodation %s: %s", accommodation_id, e.message)
        flash('Failed to delete accommodation', 'error')
    else:
        flash('Accommodation deleted successfully', 'success')
    return redirect(url_for('admin.accommodations', **request.args))


@admin_bp.route('/accommodation/<accommodation_id>/toggle', methods=['POST'])
def toggle_accommodation(accommodation_id):
    try:
        accommodation_service.toggle_active(accommodation_id)
    except SESSION_ERRORS:
        raise
    except ApiError as e:
        logger.error("Failed to toggle accommodation %s: %s", accommodation_id, e.message)
        flash('Failed to update accommodation status', 'error')
    else:
        flash('Accommodation status updated successfully', 'success')
    return redirect(url_for('admin.accommodations', **request.args))
