"""
Customer Authentication Middleware.

Storefront requests identify the customer with a cookie set by /login.
The decorator resolves it and exposes the id as g.customer_id.
"""
from functools import wraps
from flask import request, g, current_app

from ..extensions import db
from ..models import Customer
from ..utils.errors import unauthorized, ErrorCode
from ..utils.validation import MAX_INT


def get_customer_id_from_request() -> int | None:
    """
    Read the customer id cookie.

    Returns:
        Customer id, or None when the cookie is missing, not an integer
        or outside the id column range
    """
    raw = request.cookies.get(current_app.config['AUTH_COOKIE_NAME'])
    if not raw:
        return None
    try:
        customer_id = int(raw)
    except (TypeError, ValueError):
        return None
    if not 0 < customer_id <= MAX_INT:
        return None
    return customer_id


def require_customer(f):
    """
    Require a logged-in customer.

    Sets g.customer_id. Returns 401 if the cookie is missing, malformed,
    or names a customer that does not exist.

    Usage:
        @bp.route('/points')
        @require_customer
        def get_points():
            customer_id = g.customer_id
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        customer_id = get_customer_id_from_request()
        if customer_id is None:
            return unauthorized()

        if not db.session.get(Customer, customer_id):
            return unauthorized('Unknown customer', ErrorCode.INVALID_CUSTOMER)

        g.customer_id = customer_id
        return f(*args, **kwargs)

    return decorated_function
