"""
Loyalty API endpoints: checkout, points balance and the shopping cart.

All routes act on the logged-in customer (see require_customer).
"""
from flask import Blueprint, request, jsonify, g, current_app

from ..middleware.customer_auth import require_customer
from ..services.cart_service import cart_service
from ..services.loyalty_account_store import loyalty_account_store
from ..utils.exceptions import CartNotFoundError
from ..utils.validation import validate_add_to_cart, validate_update_cart_item

loyalty_bp = Blueprint('loyalty', __name__)


# ==============================================================================
# CHECKOUT & POINTS
# ==============================================================================

@loyalty_bp.route('/checkout', methods=['POST'])
@require_customer
def checkout():
    """
    Check out the customer's cart and award points.

    The cart is cleared only when every line earned points; otherwise it
    is left as is so the customer can see which items were skipped.

    Returns:
        {
            total_points_earned: int,
            invalid_products: [int],
            products_missing_category: [int],
            point_earning_rules_missing: [int],
            success: bool
        }
    """
    customer_id = g.customer_id

    result = loyalty_account_store.checkout_transaction(customer_id)

    if result.success:
        cart_service.clear_cart(customer_id, snapshot=result.cart)
    else:
        current_app.logger.info(
            f"Checkout for customer {customer_id} had skipped items; cart kept"
        )

    return jsonify(result.to_dict())


@loyalty_bp.route('/points', methods=['GET'])
@require_customer
def get_points():
    """Current points balance."""
    return jsonify({'points': loyalty_account_store.get_points(g.customer_id)})


@loyalty_bp.route('/points/history', methods=['GET'])
@require_customer
def get_points_history():
    """
    Recent point transactions, newest first.

    Query params:
        limit: Max rows (default POINTS_HISTORY_LIMIT, capped at it)
    """
    max_limit = current_app.config['POINTS_HISTORY_LIMIT']
    limit = request.args.get('limit', max_limit, type=int)
    limit = max(1, min(limit, max_limit))

    transactions = loyalty_account_store.get_transactions(g.customer_id, limit=limit)
    return jsonify({
        'transactions': [t.to_dict() for t in transactions],
        'count': len(transactions),
    })


# ==============================================================================
# CART
# ==============================================================================

@loyalty_bp.route('/cart', methods=['GET'])
@require_customer
def get_cart():
    cart = cart_service.find_cart(g.customer_id)
    if not cart:
        raise CartNotFoundError(g.customer_id)
    return jsonify(cart.to_dict())


@loyalty_bp.route('/cart', methods=['POST'])
@require_customer
def add_to_cart():
    """
    Add a product to the cart.

    Request body:
        productId: Product ID
        quantity: Units to add (merged with an existing line)
    """
    data = validate_add_to_cart(request.get_json(silent=True))
    cart = cart_service.add_item(g.customer_id, data['product_id'], data['quantity'])
    return jsonify(cart.to_dict()), 201


@loyalty_bp.route('/cart/<int:product_id>', methods=['PUT'])
@require_customer
def update_cart_item(product_id):
    data = validate_update_cart_item(request.get_json(silent=True))
    cart = cart_service.update_item_quantity(g.customer_id, product_id, data['quantity'])
    return jsonify(cart.to_dict())


@loyalty_bp.route('/cart/<int:product_id>', methods=['DELETE'])
@require_customer
def remove_from_cart(product_id):
    cart = cart_service.remove_item(g.customer_id, product_id)
    return jsonify(cart.to_dict())


@loyalty_bp.route('/cart', methods=['DELETE'])
@require_customer
def clear_cart():
    removed = cart_service.clear_cart(g.customer_id)
    return jsonify({'success': True, 'removed': removed})
