"""
Catalog models: categories, products and point earning rules.
"""
import math
from datetime import datetime
from decimal import Decimal
from ..extensions import db


class Category(db.Model):
    """
    Product category. Point earning rules hang off categories,
    so a product earns points only once it is assigned one.
    """
    __tablename__ = 'categories'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False, unique=True)

    # Relationships
    products = db.relationship('Product', back_populates='category', lazy='dynamic')
    point_earning_rules = db.relationship(
        'PointEarningRule',
        back_populates='category',
        order_by='PointEarningRule.id',
        cascade='all, delete-orphan'
    )

    def __repr__(self):
        return f'<Category {self.name}>'

    def to_dict(self, include_rules: bool = False):
        data = {
            'id': self.id,
            'name': self.name,
        }
        if include_rules:
            data['rules'] = [rule.to_dict() for rule in self.point_earning_rules]
        return data


class Product(db.Model):
    """
    Sellable product.

    Eligible for points only with a positive price and an assigned category.
    """
    __tablename__ = 'products'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    price = db.Column(db.Numeric(10, 2), nullable=False, default=Decimal('0.00'))
    image_url = db.Column(db.String(500))
    category_id = db.Column(db.Integer, db.ForeignKey('categories.id'), nullable=True)

    # Relationships
    category = db.relationship('Category', back_populates='products')

    __table_args__ = (
        db.CheckConstraint('price >= 0', name='ck_products_price_non_negative'),
    )

    def __repr__(self):
        return f'<Product {self.id}: {self.name}>'

    def is_eligible_for_points(self) -> bool:
        return self.price is not None and self.price > 0 and self.category_id is not None

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'price': float(self.price) if self.price is not None else None,
            'image_url': self.image_url,
            'categoryId': self.category_id,
        }


class PointEarningRule(db.Model):
    """
    Points-per-dollar rate for a category over a date window.

    Both bounds are inclusive calendar dates; a null end_date means the
    rule never expires. Several rules may exist per category (historical
    and current); well-formed data has at most one active on any date.
    """
    __tablename__ = 'point_earning_rules'

    id = db.Column(db.Integer, primary_key=True)
    category_id = db.Column(db.Integer, db.ForeignKey('categories.id'), nullable=False)
    points_per_dollar = db.Column(db.Integer, nullable=False, default=1)
    start_date = db.Column(db.Date, nullable=False)
    end_date = db.Column(db.Date, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    # Relationships
    category = db.relationship('Category', back_populates='point_earning_rules')

    __table_args__ = (
        db.CheckConstraint('points_per_dollar >= 0', name='ck_rules_points_per_dollar_non_negative'),
        db.Index('ix_point_earning_rules_category_dates', 'category_id', 'start_date', 'end_date'),
    )

    def __repr__(self):
        return f'<PointEarningRule {self.id}: {self.points_per_dollar} pts/$ category={self.category_id}>'

    def is_active(self, as_of) -> bool:
        if isinstance(as_of, datetime):
            as_of = as_of.date()
        if self.start_date > as_of:
            return False
        return self.end_date is None or self.end_date >= as_of

    def calculate_points(self, price) -> int:
        """Points for a single unit, rounded down."""
        return math.floor(Decimal(str(price)) * self.points_per_dollar)

    def to_dict(self):
        return {
            'id': self.id,
            'categoryId': self.category_id,
            'pointsPerDollar': self.points_per_dollar,
            'startDate': self.start_date.isoformat() if self.start_date else None,
            'endDate': self.end_date.isoformat() if self.end_date else None,
        }
