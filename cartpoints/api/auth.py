"""
Storefront login/logout.

Login is by customer id only: the cookie it sets is what the
require_customer decorator reads on later requests.
"""
from flask import Blueprint, request, jsonify, current_app, make_response

from ..services.customer_service import customer_service
from ..utils.errors import unauthorized, ErrorCode
from ..utils.validation import validate_login

auth_bp = Blueprint('auth', __name__)


@auth_bp.route('/login', methods=['POST'])
def login():
    """
    Log a customer in.

    Request body:
        customer_id: Customer ID

    Returns:
        {success: true} and sets the customer cookie, or 401
    """
    data = validate_login(request.get_json(silent=True))

    customer = customer_service.find_by_id(data['customer_id'])
    if not customer:
        return unauthorized('Invalid customer ID', ErrorCode.INVALID_CUSTOMER)

    response = make_response(jsonify({'success': True, 'customer': customer.to_dict()}))
    response.set_cookie(
        current_app.config['AUTH_COOKIE_NAME'],
        str(customer.id),
        httponly=True,
        samesite='Lax'
    )
    return response


@auth_bp.route('/logout', methods=['GET'])
def logout():
    response = make_response(jsonify({'success': True}))
    response.delete_cookie(current_app.config['AUTH_COOKIE_NAME'])
    return response
