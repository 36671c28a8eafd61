# api/accommodations.py
import logging

from ..models import Accommodation
from .client import api, unwrap

logger = logging.getLogger(__name__)

FORM_FIELDS = (
    'name', 'type', 'description', 'capacity_min', 'capacity_max',
    'duration_hours', 'price', 'available_units', 'is_active',
)


def to_form_data(fields: dict) -> dict:
    """Flatten accommodation fields for a multipart body; booleans go as 1/0."""
    data = {}
    for key in FORM_FIELDS:
        if key not in fields or fields[key] is None:
            continue
        value = fields[key]
        if isinstance(value, bool):
            data[key] = '1' if value else '0'
        elif hasattr(value, 'value'):
            data[key] = str(value.value)
        else:
            data[key] = str(value)
    return data


def image_files(image):
    """``image`` is a werkzeug FileStorage (or None)."""
    if image is None or not getattr(image, 'filename', None):
        return None
    return {'image': (image.filename, image.stream, image.mimetype)}


class AccommodationService:
    def __init__(self, client=None):
        self.client = client or api

    def get_all(self):
        payload = self.client.get('/accommodations')
        return [Accommodation.model_validate(a) for a in unwrap(payload, [])]

    def get_available(self):
        payload = self.client.get('/accommodations/available')
        return [Accommodation.model_validate(a) for a in unwrap(payload, [])]

    def get_by_id(self, accommodation_id):
        payload = self.client.get(f'/accommodations/{accommodation_id}')
        return Accommodation.model_validate(unwrap(payload))

    def create(self, fields: dict, image=None):
        data = to_form_data(fields)
        logger.info("Creating accommodation: %s", data)
        payload = self.client.post('/accommodations', data=data, files=image_files(image))
        return Accommodation.model_validate(unwrap(payload))

    def update(self, accommodation_id, fields: dict, image=None):
        # multipart bodies can't ride on PUT, so spoof the method
        data = to_form_data(fields)
        data['_method'] = 'PUT'
        logger.info("Updating accommodation %s: %s", accommodation_id, data)
        payload = self.client.post(f'/accommodations/{accommodation_id}', data=data, files=image_files(image))
        return Accommodation.model_validate(unwrap(payload))

    def delete(self, accommodation_id):
        self.client.delete(f'/accommodations/{accommodation_id}')

    def toggle_active(self, accommodation_id):
        payload = self.client.patch(f'/accommodations/{accommodation_id}/toggle-active')
        return Accommodation.model_validate(unwrap(payload))


accommodation_service = AccommodationService()
