"""
Shopping cart models.
"""
from datetime import datetime
from ..extensions import db


class ShoppingCart(db.Model):
    """One cart per customer; emptied after a fully successful checkout."""
    __tablename__ = 'shopping_carts'

    id = db.Column(db.Integer, primary_key=True)
    customer_id = db.Column(db.Integer, db.ForeignKey('customers.id'), nullable=False, unique=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    customer = db.relationship('Customer', back_populates='cart')
    items = db.relationship(
        'ShoppingCartItem',
        back_populates='cart',
        order_by='ShoppingCartItem.id',
        cascade='all, delete-orphan'
    )

    def __repr__(self):
        return f'<ShoppingCart {self.id} for customer {self.customer_id}>'

    def touch(self):
        self.updated_at = datetime.utcnow()

    def to_dict(self):
        return {
            'id': self.id,
            'customer_id': self.customer_id,
            'items': [item.to_dict() for item in self.items],
            'updated_at': self.updated_at.isoformat() if self.updated_at else None
        }


class ShoppingCartItem(db.Model):
    """
    A product and quantity in a cart.

    product_id is a plain reference without a foreign key: products can be
    deleted while still sitting in a cart, and checkout reports those ids
    as invalid instead of failing.
    """
    __tablename__ = 'shopping_cart_items'

    id = db.Column(db.Integer, primary_key=True)
    cart_id = db.Column(db.Integer, db.ForeignKey('shopping_carts.id'), nullable=False)
    product_id = db.Column(db.Integer, nullable=False)
    quantity = db.Column(db.Integer, nullable=False, default=1)

    # Relationships
    cart = db.relationship('ShoppingCart', back_populates='items')

    __table_args__ = (
        db.UniqueConstraint('cart_id', 'product_id', name='uq_shopping_cart_items_cart_product'),
        db.CheckConstraint('quantity > 0', name='ck_shopping_cart_items_quantity_positive'),
    )

    def __repr__(self):
        return f'<ShoppingCartItem product={self.product_id} qty={self.quantity}>'

    def to_dict(self):
        return {
            'productId': self.product_id,
            'quantity': self.quantity,
        }
