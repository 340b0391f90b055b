"""
Shopping cart service.

Cart mutation for the storefront plus the snapshot interface checkout
consumes (get_cart / clear_cart).
"""
from dataclasses import dataclass, field
from typing import List, Optional

from flask import current_app

from ..extensions import db
from ..models.cart import ShoppingCart, ShoppingCartItem
from ..models.catalog import Product
from ..models.customer import Customer
from ..utils.exceptions import (
    CustomerNotFoundError,
    ProductNotFoundError,
    NotFoundError,
    ValidationError,
)


@dataclass(frozen=True)
class CartLine:
    """A product reference and quantity at checkout time."""
    product_id: int
    quantity: int


@dataclass
class CartSnapshot:
    """Cart contents for one customer, in insertion order."""
    customer_id: int
    items: List[CartLine] = field(default_factory=list)


class CartService:
    """
    Shopping cart operations keyed by customer id.

    Mutating methods commit their own unit of work.
    """

    def find_cart(self, customer_id: int) -> Optional[ShoppingCart]:
        return ShoppingCart.query.filter_by(customer_id=customer_id).first()

    def get_or_create_cart(self, customer_id: int) -> ShoppingCart:
        cart = self.find_cart(customer_id)
        if cart:
            return cart

        if not db.session.get(Customer, customer_id):
            raise CustomerNotFoundError(customer_id)

        cart = ShoppingCart(customer_id=customer_id)
        db.session.add(cart)
        db.session.commit()
        return cart

    def get_cart(self, customer_id: int) -> Optional[CartSnapshot]:
        """Snapshot of the customer's cart, or None if they have no cart."""
        cart = self.find_cart(customer_id)
        if not cart:
            return None
        return CartSnapshot(
            customer_id=customer_id,
            items=[CartLine(item.product_id, item.quantity) for item in cart.items]
        )

    def add_item(self, customer_id: int, product_id: int, quantity: int) -> ShoppingCart:
        """Add quantity of a product, merging with an existing line."""
        if quantity <= 0:
            raise ValidationError('Quantity must be a positive number', 'quantity')
        if not db.session.get(Product, product_id):
            raise ProductNotFoundError(product_id)

        cart = self.get_or_create_cart(customer_id)
        item = ShoppingCartItem.query.filter_by(cart_id=cart.id, product_id=product_id).first()
        if item:
            item.quantity += quantity
        else:
            cart.items.append(ShoppingCartItem(product_id=product_id, quantity=quantity))

        cart.touch()
        db.session.commit()
        return cart

    def update_item_quantity(self, customer_id: int, product_id: int, quantity: int) -> ShoppingCart:
        if quantity <= 0:
            raise ValidationError('Quantity must be a positive number', 'quantity')

        cart = self.get_or_create_cart(customer_id)
        item = ShoppingCartItem.query.filter_by(cart_id=cart.id, product_id=product_id).first()
        if not item:
            raise NotFoundError('Cart item', product_id)

        item.quantity = quantity
        cart.touch()
        db.session.commit()
        return cart

    def remove_item(self, customer_id: int, product_id: int) -> ShoppingCart:
        cart = self.get_or_create_cart(customer_id)
        ShoppingCartItem.query.filter_by(cart_id=cart.id, product_id=product_id).delete()
        cart.touch()
        db.session.commit()
        db.session.refresh(cart)
        return cart

    def clear_cart(self, customer_id: int, snapshot: Optional[CartSnapshot] = None) -> int:
        """
        Remove items from the customer's cart.

        With a snapshot, only lines still matching it (same product and
        quantity) are removed, so items added after checkout read the
        cart survive. Returns the number of lines removed.
        """
        cart = self.get_or_create_cart(customer_id)
        query = ShoppingCartItem.query.filter_by(cart_id=cart.id)

        if snapshot is None:
            removed = query.delete()
        else:
            removed = 0
            for line in snapshot.items:
                removed += query.filter_by(
                    product_id=line.product_id,
                    quantity=line.quantity
                ).delete()

        cart.touch()
        db.session.commit()
        db.session.refresh(cart)

        current_app.logger.info(f"Cart cleared for customer {customer_id}: {removed} line(s) removed")
        return removed


cart_service = CartService()
