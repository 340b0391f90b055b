"""
Point transaction model: append-only audit trail of points earned.
"""
from datetime import datetime
from ..extensions import db


class PointTransaction(db.Model):
    """
    One row per checkout line item that earned points.

    Rows are never updated or deleted by the application.
    """
    __tablename__ = 'point_transactions'

    id = db.Column(db.Integer, primary_key=True)
    loyalty_account_id = db.Column(db.Integer, db.ForeignKey('loyalty_accounts.id'), nullable=False)
    product_id = db.Column(db.Integer, db.ForeignKey('products.id'), nullable=False)
    points_earned = db.Column(db.Integer, nullable=False)
    transaction_date = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    # Relationships
    loyalty_account = db.relationship('LoyaltyAccount', back_populates='transactions')
    product = db.relationship('Product')

    __table_args__ = (
        db.CheckConstraint('points_earned >= 0', name='ck_point_transactions_points_non_negative'),
        db.Index('ix_point_transactions_account_date', 'loyalty_account_id', 'transaction_date'),
    )

    def __repr__(self):
        return f'<PointTransaction {self.id}: {self.points_earned} pts for account {self.loyalty_account_id}>'

    def to_dict(self):
        return {
            'id': self.id,
            'loyalty_account_id': self.loyalty_account_id,
            'product_id': self.product_id,
            'points_earned': self.points_earned,
            'transaction_date': self.transaction_date.isoformat() if self.transaction_date else None
        }
