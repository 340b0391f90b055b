"""
Category and point earning rule API endpoints.
"""
from flask import Blueprint, request, jsonify

from ..services.catalog_service import catalog_service
from ..utils.validation import validate_create_category, validate_create_rule

categories_bp = Blueprint('categories', __name__)


@categories_bp.route('', methods=['GET'])
def list_categories():
    categories = catalog_service.list_categories()
    return jsonify({'categories': [c.to_dict(include_rules=True) for c in categories]})


@categories_bp.route('/<int:category_id>', methods=['GET'])
def get_category(category_id):
    return jsonify(catalog_service.get_category(category_id).to_dict(include_rules=True))


@categories_bp.route('', methods=['POST'])
def create_category():
    data = validate_create_category(request.get_json(silent=True))
    category = catalog_service.create_category(**data)
    return jsonify(category.to_dict()), 201


@categories_bp.route('/<int:category_id>/rules', methods=['POST'])
def create_rule(category_id):
    """
    Add a point earning rule to a category.

    Request body:
        pointsPerDollar: Points per $1 of unit price (>= 0)
        startDate: First active day (YYYY-MM-DD)
        endDate: Last active day, omit or null for open-ended
    """
    data = validate_create_rule(request.get_json(silent=True))
    rule = catalog_service.create_rule(category_id, **data)
    return jsonify(rule.to_dict()), 201
