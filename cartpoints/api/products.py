"""
Product API endpoints.
"""
from flask import Blueprint, request, jsonify

from ..services.catalog_service import catalog_service
from ..utils.validation import validate_create_product, validate_update_product

products_bp = Blueprint('products', __name__)


@products_bp.route('', methods=['GET'])
def list_products():
    products = catalog_service.list_products()
    return jsonify({'products': [p.to_dict() for p in products]})


@products_bp.route('/<int:product_id>', methods=['GET'])
def get_product(product_id):
    return jsonify(catalog_service.get_product(product_id).to_dict())


@products_bp.route('', methods=['POST'])
def create_product():
    """
    Create a product.

    Request body:
        name: Product name
        price: Unit price (>= 0, 2 decimals)
        image_url: Optional image URL
        categoryId: Optional category ID
    """
    data = validate_create_product(request.get_json(silent=True))
    product = catalog_service.create_product(**data)
    return jsonify(product.to_dict()), 201


@products_bp.route('/<int:product_id>', methods=['PUT'])
def update_product(product_id):
    data = validate_update_product(request.get_json(silent=True))
    product = catalog_service.update_product(product_id, **data)
    return jsonify(product.to_dict())


@products_bp.route('/<int:product_id>', methods=['DELETE'])
def delete_product(product_id):
    catalog_service.delete_product(product_id)
    return '', 204
