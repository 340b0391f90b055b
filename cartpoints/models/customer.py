"""
Customer and LoyaltyAccount models.
"""
from datetime import datetime
from ..extensions import db


class Customer(db.Model):
    """
    A shopper who can log in, fill a cart and check out.
    Owns exactly one LoyaltyAccount.
    """
    __tablename__ = 'customers'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(255), nullable=False, unique=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    # Relationships
    loyalty_account = db.relationship(
        'LoyaltyAccount',
        back_populates='customer',
        uselist=False,
        cascade='all, delete-orphan'
    )
    cart = db.relationship(
        'ShoppingCart',
        back_populates='customer',
        uselist=False,
        cascade='all, delete-orphan'
    )

    def __repr__(self):
        return f'<Customer {self.id}: {self.email}>'

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'email': self.email,
        }


class LoyaltyAccount(db.Model):
    """
    Running points balance for a customer.

    The balance only ever grows in this system: it equals the sum of the
    account's PointTransaction rows plus any opening balance granted at
    creation. Writes go through LoyaltyAccountStore.add_points, which
    issues an atomic SQL increment.
    """
    __tablename__ = 'loyalty_accounts'

    id = db.Column(db.Integer, primary_key=True)
    customer_id = db.Column(db.Integer, db.ForeignKey('customers.id'), nullable=False, unique=True)
    points = db.Column(db.Integer, nullable=False, default=0)
    last_updated = db.Column(db.DateTime, default=datetime.utcnow)

    # Relationships
    customer = db.relationship('Customer', back_populates='loyalty_account')
    transactions = db.relationship(
        'PointTransaction',
        back_populates='loyalty_account',
        order_by='PointTransaction.id',
        lazy='dynamic',
        cascade='all, delete-orphan'
    )

    __table_args__ = (
        db.CheckConstraint('points >= 0', name='ck_loyalty_accounts_points_non_negative'),
    )

    def __repr__(self):
        return f'<LoyaltyAccount {self.id}: {self.points} pts for customer {self.customer_id}>'

    def get_points(self) -> int:
        return self.points or 0

    def calculate_total_points(self) -> int:
        """Sum of points earned across the transaction log."""
        return sum(t.points_earned for t in self.transactions)

    def to_dict(self):
        return {
            'id': self.id,
            'customer_id': self.customer_id,
            'points': self.get_points(),
            'last_updated': self.last_updated.isoformat() if self.last_updated else None
        }
