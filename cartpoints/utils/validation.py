"""
Request payload validation.

Each validator takes the decoded JSON body, returns a dict of cleaned
values keyed by service argument names, and raises ValidationError on
the first bad field. Services assume their inputs passed through here.
"""
import re
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional

from .exceptions import ValidationError

EMAIL_RE = re.compile(r'^[^@\s]+@[^@\s]+\.[^@\s]+$')
URL_RE = re.compile(r'^https?://\S+$')
DATE_RE = re.compile(r'^\d{4}-\d{2}-\d{2}$')

# Upper bounds of the Integer and Numeric(10, 2) columns
MAX_INT = 2**31 - 1
MAX_PRICE = Decimal('99999999.99')


def _require_object(data: Any) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object')
    return data


def _positive_int(value: Any, field: str, label: str) -> int:
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool):
        raise ValidationError(f'{label} must be an integer', field)
    if isinstance(value, str) and value.strip().lstrip('-').isdigit():
        value = int(value)
    if not isinstance(value, int):
        raise ValidationError(f'{label} must be an integer', field)
    if value <= 0:
        raise ValidationError(f'{label} must be a positive number', field)
    if value > MAX_INT:
        raise ValidationError(f'{label} is out of range', field)
    return value


def _non_negative_int(value: Any, field: str, label: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f'{label} must be an integer', field)
    if value < 0:
        raise ValidationError(f'{label} must not be negative', field)
    if value > MAX_INT:
        raise ValidationError(f'{label} is out of range', field)
    return value


def _non_empty_str(value: Any, field: str, label: str, max_length: int) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f'{label} is required', field)
    value = value.strip()
    if len(value) > max_length:
        raise ValidationError(f'{label} must be at most {max_length} characters', field)
    return value


def _price(value: Any) -> Decimal:
    if isinstance(value, bool) or value is None:
        raise ValidationError('Price must be a number', 'price')
    try:
        price = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError('Price must be a number', 'price')
    if not price.is_finite():
        raise ValidationError('Price must be a number', 'price')
    if price < 0:
        raise ValidationError('Price must not be negative', 'price')
    if price > MAX_PRICE:
        raise ValidationError(f'Price must not exceed {MAX_PRICE}', 'price')
    if price.as_tuple().exponent < -2:
        raise ValidationError('Price must have at most 2 decimal places', 'price')
    try:
        return price.quantize(Decimal('0.01'))
    except InvalidOperation:
        raise ValidationError('Price must be a number', 'price')


def _iso_date(value: Any, field: str, label: str) -> date:
    if not isinstance(value, str) or not DATE_RE.match(value):
        raise ValidationError(f'{label} must be an ISO date (YYYY-MM-DD)', field)
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise ValidationError(f'{label} must be an ISO date (YYYY-MM-DD)', field)


def _image_url(value: Any) -> Optional[str]:
    if value is None or value == '':
        return None
    if not isinstance(value, str) or not URL_RE.match(value):
        raise ValidationError('Image URL must be an http(s) URL', 'image_url')
    return value


# ==================== Auth & Cart ====================

def validate_login(data: Any) -> Dict[str, Any]:
    data = _require_object(data)
    return {'customer_id': _positive_int(data.get('customer_id'), 'customer_id', 'Customer ID')}


def validate_add_to_cart(data: Any) -> Dict[str, Any]:
    data = _require_object(data)
    return {
        'product_id': _positive_int(data.get('productId'), 'productId', 'Product ID'),
        'quantity': _positive_int(data.get('quantity'), 'quantity', 'Quantity'),
    }


def validate_update_cart_item(data: Any) -> Dict[str, Any]:
    data = _require_object(data)
    return {'quantity': _positive_int(data.get('quantity'), 'quantity', 'Quantity')}


# ==================== Catalog ====================

def validate_create_product(data: Any) -> Dict[str, Any]:
    data = _require_object(data)
    category_id = data.get('categoryId')
    return {
        'name': _non_empty_str(data.get('name'), 'name', 'Name', 200),
        'price': _price(data.get('price')),
        'image_url': _image_url(data.get('image_url')),
        'category_id': (
            _positive_int(category_id, 'categoryId', 'Category ID')
            if category_id is not None else None
        ),
    }


def validate_update_product(data: Any) -> Dict[str, Any]:
    """Partial update: only fields present in the body are returned."""
    data = _require_object(data)
    cleaned = {}
    if 'name' in data:
        cleaned['name'] = _non_empty_str(data['name'], 'name', 'Name', 200)
    if 'price' in data:
        cleaned['price'] = _price(data['price'])
    if 'image_url' in data:
        cleaned['image_url'] = _image_url(data['image_url'])
    if 'categoryId' in data:
        cleaned['category_id'] = (
            _positive_int(data['categoryId'], 'categoryId', 'Category ID')
            if data['categoryId'] is not None else None
        )
    if not cleaned:
        raise ValidationError('No updatable fields provided')
    return cleaned


def validate_create_category(data: Any) -> Dict[str, Any]:
    data = _require_object(data)
    return {'name': _non_empty_str(data.get('name'), 'name', 'Name', 100)}


def validate_create_rule(data: Any) -> Dict[str, Any]:
    data = _require_object(data)
    start_date = _iso_date(data.get('startDate'), 'startDate', 'Start date')
    end_date = None
    if data.get('endDate') is not None:
        end_date = _iso_date(data['endDate'], 'endDate', 'End date')
        if end_date < start_date:
            raise ValidationError('End date must not be before start date', 'endDate')
    return {
        'points_per_dollar': _non_negative_int(data.get('pointsPerDollar'), 'pointsPerDollar', 'Points per dollar'),
        'start_date': start_date,
        'end_date': end_date,
    }


# ==================== Customers ====================

def _email(value: Any) -> str:
    email = _non_empty_str(value, 'email', 'Email', 255).lower()
    if not EMAIL_RE.match(email):
        raise ValidationError('Email must be a valid email address', 'email')
    return email


def validate_create_customer(data: Any) -> Dict[str, Any]:
    data = _require_object(data)
    return {
        'name': _non_empty_str(data.get('name'), 'name', 'Name', 100),
        'email': _email(data.get('email')),
    }


def validate_update_customer(data: Any) -> Dict[str, Any]:
    data = _require_object(data)
    cleaned = {}
    if 'name' in data:
        cleaned['name'] = _non_empty_str(data['name'], 'name', 'Name', 100)
    if 'email' in data:
        cleaned['email'] = _email(data['email'])
    if not cleaned:
        raise ValidationError('No updatable fields provided')
    return cleaned
