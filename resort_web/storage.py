# storage.py
from flask import current_app


def _join(base, path):
    clean = path.lstrip('/')
    return f"{base}{'' if base.endswith('/') else '/'}{clean}"


def get_image_url(image_path, storage_url=None, default=None):
    """Resolve a stored image path to a full URL, or the default image."""
    if storage_url is None:
        storage_url = current_app.config['STORAGE_URL']
    if default is None:
        default = current_app.config['DEFAULT_ACCOMMODATION_IMAGE']
    if not image_path:
        return default
    if image_path.startswith('http'):
        return image_path
    return _join(storage_url, image_path)


def get_accommodation_image_url(image_path, storage_url=None, default=None):
    """Like get_image_url, but bare file names live under accommodations/."""
    if image_path and not image_path.startswith('http') and '/' not in image_path.lstrip('/'):
        image_path = f"accommodations/{image_path.lstrip('/')}"
    return get_image_url(image_path, storage_url=storage_url, default=default)
