"""
Customer API endpoints.
"""
from flask import Blueprint, request, jsonify

from ..services.customer_service import customer_service
from ..utils.validation import validate_create_customer, validate_update_customer

customers_bp = Blueprint('customers', __name__)


@customers_bp.route('', methods=['GET'])
def list_customers():
    customers = customer_service.list_customers()
    return jsonify({'customers': [c.to_dict() for c in customers]})


@customers_bp.route('/<int:customer_id>', methods=['GET'])
def get_customer(customer_id):
    return jsonify(customer_service.get_customer(customer_id).to_dict())


@customers_bp.route('', methods=['POST'])
def create_customer():
    """
    Create a customer with an empty loyalty account and cart.

    Request body:
        name: Full name
        email: Unique email address
    """
    data = validate_create_customer(request.get_json(silent=True))
    customer = customer_service.create_customer(**data)
    return jsonify(customer.to_dict()), 201


@customers_bp.route('/<int:customer_id>', methods=['PUT'])
def update_customer(customer_id):
    data = validate_update_customer(request.get_json(silent=True))
    customer = customer_service.update_customer(customer_id, **data)
    return jsonify(customer.to_dict())


@customers_bp.route('/<int:customer_id>', methods=['DELETE'])
def delete_customer(customer_id):
    customer_service.delete_customer(customer_id)
    return '', 204
