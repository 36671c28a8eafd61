# forms.py
import re
from typing import Optional

from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError

from .errors import ValidationError
from .models import AccommodationType, PaymentMethod, Role, duration_from_label, duration_label

EMAIL_RE = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')
CONTACT_NUMBER_MAX = 11
MAX_IMAGE_SIZE = 5 * 1024 * 1024  # 5MB


def validate_form(form_cls, data):
    try:
        return form_cls.model_validate(data)
    except PydanticValidationError as e:
        errors = {}
        for err in e.errors():
            field = str(err['loc'][0]) if err['loc'] else 'form'
            if err['type'] == 'value_error':
                message = str(err['ctx']['error'])
            else:
                message = err['msg']
            errors.setdefault(field, message)
        raise ValidationError(errors) from e


def _required(value, label):
    value = (value or '').strip()
    if not value:
        raise ValueError(f"{label} is required")
    return value


class _Form(BaseModel):
    model_config = ConfigDict(validate_default=True)


class LoginForm(_Form):
    email: str = ''
    password: str = ''

    @field_validator('email')
    @classmethod
    def _email(cls, value):
        return _required(value, 'Email')

    @field_validator('password')
    @classmethod
    def _password(cls, value):
        if not value:
            raise ValueError('Password is required')
        return value


class RegisterForm(_Form):
    firstname: str = ''
    lastname: str = ''
    email: str = ''
    password: str = ''
    password_confirmation: str = ''
    contact_number: str = ''
    address: str = ''
    role: Role = Role.CUSTOMER

    @field_validator('firstname')
    @classmethod
    def _firstname(cls, value):
        return _required(value, 'First name')

    @field_validator('lastname')
    @classmethod
    def _lastname(cls, value):
        return _required(value, 'Last name')

    @field_validator('email')
    @classmethod
    def _email(cls, value):
        value = (value or '').strip()
        if not EMAIL_RE.match(value):
            raise ValueError('Please enter a valid email address')
        return value

    @field_validator('password')
    @classmethod
    def _password(cls, value):
        if not value:
            raise ValueError('Password is required')
        return value

    @field_validator('contact_number', mode='before')
    @classmethod
    def _digits_only(cls, value):
        return re.sub(r'[^0-9]', '', value or '')[:CONTACT_NUMBER_MAX]

    @model_validator(mode='after')
    def _passwords_match(self):
        if self.password != self.password_confirmation:
            raise ValueError('Passwords do not match')
        return self

    def payload(self):
        data = self.model_dump()
        data['role'] = self.role.value
        return data


class AccommodationForm(_Form):
    # editing comes first so the image check can see it
    editing: bool = False
    name: str = ''
    type: AccommodationType = AccommodationType.COTTAGE
    duration: str = duration_label(22)
    price: float = 0
    description: str = ''
    capacity: str = ''
    available: bool = True
    available_units: int = 1
    image_filename: Optional[str] = None
    image_size: int = 0

    @field_validator('name')
    @classmethod
    def _name(cls, value):
        return _required(value, 'Name')

    @field_validator('duration')
    @classmethod
    def _duration(cls, value):
        return _required(value, 'Duration')

    @field_validator('price', mode='before')
    @classmethod
    def _parse_price(cls, value):
        try:
            return float(value)
        except (TypeError, ValueError):
            return 0.0

    @field_validator('price')
    @classmethod
    def _positive_price(cls, value):
        if value <= 0:
            raise ValueError('Price must be greater than 0')
        return value

    @field_validator('capacity')
    @classmethod
    def _capacity(cls, value):
        return _required(value, 'Capacity')

    @field_validator('description')
    @classmethod
    def _description(cls, value):
        return _required(value, 'Description')

    @field_validator('available_units', mode='before')
    @classmethod
    def _parse_units(cls, value):
        try:
            return int(value)
        except (TypeError, ValueError):
            return 1

    @field_validator('image_filename')
    @classmethod
    def _image(cls, value, info: ValidationInfo):
        # only new accommodations must come with an image
        if not value and not info.data.get('editing'):
            raise ValueError('Image is required')
        return value or None

    @field_validator('image_size')
    @classmethod
    def _image_size(cls, value):
        if value > MAX_IMAGE_SIZE:
            raise ValueError('Image size exceeds 5MB limit')
        return value

    @classmethod
    def defaults(cls):
        return {
            'name': '',
            'type': AccommodationType.COTTAGE.value,
            'duration': duration_label(22),
            'price': 0,
            'description': '',
            'capacity': '',
            'available': True,
            'available_units': 1,
        }

    @classmethod
    def from_accommodation(cls, accommodation):
        """Prefill values for the edit form."""
        capacity = str(accommodation.capacity_min)
        if accommodation.capacity_max > accommodation.capacity_min:
            capacity += f"-{accommodation.capacity_max}"
        return {
            'name': accommodation.name,
            'type': accommodation.type.value,
            'duration': duration_label(accommodation.duration_hours),
            'price': accommodation.price,
            'description': accommodation.description,
            'capacity': capacity,
            'available': accommodation.is_active,
            'available_units': accommodation.available_units,
        }

    def capacity_range(self):
        parts = self.capacity.split('-')

        def _int(text):
            try:
                return int(text.strip())
            except (ValueError, AttributeError):
                return 0

        low = _int(parts[0])
        high = _int(parts[1]) if len(parts) > 1 else 0
        return low, high or _int(self.capacity)

    def to_fields(self):
        capacity_min, capacity_max = self.capacity_range()
        return {
            'name': self.name,
            'type': self.type,
            'description': self.description,
            'capacity_min': capacity_min,
            'capacity_max': capacity_max,
            'duration_hours': duration_from_label(self.duration),
            'price': self.price,
            'available_units': self.available_units,
            'is_active': self.available,
        }


class BookingForm(_Form):
    accommodation_id: str
    quantity: int = 1
    payment_method: PaymentMethod = PaymentMethod.CREDIT_CARD

    @field_validator('accommodation_id', mode='before')
    @classmethod
    def _accommodation(cls, value):
        return _required(str(value) if value is not None else '', 'Accommodation')

    @field_validator('quantity', mode='before')
    @classmethod
    def _parse_quantity(cls, value):
        try:
            return int(value)
        except (TypeError, ValueError):
            return 1

    @field_validator('payment_method', mode='before')
    @classmethod
    def _payment_method(cls, value):
        try:
            return PaymentMethod(value)
        except ValueError:
            raise ValueError('Please select a valid payment method') from None

    def clamp(self, accommodation):
        """Pull quantity into [1, available_units]; returns a notice if changed."""
        available = accommodation.available_units
        if available < 1:
            raise ValidationError({'quantity': 'No units available for this accommodation'})
        if self.quantity > available:
            self.quantity = available
            return f"Maximum available units: {available}"
        if self.quantity < 1:
            self.quantity = 1
            return 'Minimum quantity is 1'
        return None

    def total_price(self, accommodation):
        return accommodation.price * self.quantity
