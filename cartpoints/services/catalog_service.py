"""
Catalog service: products, categories and point earning rules.

Thin CRUD used by the admin endpoints and the seed command. Inputs are
expected to be validated already (see utils.validation).
"""
from datetime import date
from decimal import Decimal
from typing import List, Optional

from flask import current_app

from ..extensions import db
from ..models.catalog import Category, Product, PointEarningRule
from ..models.points import PointTransaction
from ..utils.exceptions import (
    CategoryNotFoundError,
    DuplicateError,
    ProductNotFoundError,
    ValidationError,
)


class CatalogService:
    """CRUD for the product catalog and its earning rules."""

    # ==================== Categories ====================

    def list_categories(self) -> List[Category]:
        return Category.query.order_by(Category.id).all()

    def get_category(self, category_id: int) -> Category:
        category = db.session.get(Category, category_id)
        if not category:
            raise CategoryNotFoundError(category_id)
        return category

    def find_category_by_name(self, name: str) -> Optional[Category]:
        return Category.query.filter_by(name=name).first()

    def create_category(self, name: str) -> Category:
        if self.find_category_by_name(name):
            raise DuplicateError('Category', f'name {name}')

        category = Category(name=name)
        db.session.add(category)
        db.session.commit()
        current_app.logger.info(f"Category created: {category.id} {name}")
        return category

    # ==================== Rules ====================

    def create_rule(
        self,
        category_id: int,
        points_per_dollar: int,
        start_date: date,
        end_date: Optional[date] = None
    ) -> PointEarningRule:
        """Attach a points-per-dollar rule to a category."""
        category = self.get_category(category_id)

        if end_date is not None and end_date < start_date:
            raise ValidationError('End date must not be before start date', 'endDate')

        overlapping = [
            rule for rule in category.point_earning_rules
            if rule.is_active(start_date) or (
                rule.start_date >= start_date
                and (end_date is None or rule.start_date <= end_date)
            )
        ]
        if overlapping:
            current_app.logger.warning(
                f"Rule for category {category_id} overlaps rule(s) "
                f"{[r.id for r in overlapping]}; checkout uses the lowest id"
            )

        rule = PointEarningRule(
            category_id=category.id,
            points_per_dollar=points_per_dollar,
            start_date=start_date,
            end_date=end_date
        )
        db.session.add(rule)
        db.session.commit()
        return rule

    # ==================== Products ====================

    def list_products(self) -> List[Product]:
        return Product.query.order_by(Product.id).all()

    def get_product(self, product_id: int) -> Product:
        product = db.session.get(Product, product_id)
        if not product:
            raise ProductNotFoundError(product_id)
        return product

    def create_product(
        self,
        name: str,
        price: Decimal,
        image_url: str = None,
        category_id: int = None
    ) -> Product:
        if category_id is not None:
            self.get_category(category_id)

        product = Product(
            name=name,
            price=price,
            image_url=image_url,
            category_id=category_id
        )
        db.session.add(product)
        db.session.commit()
        return product

    def update_product(self, product_id: int, **fields) -> Product:
        product = self.get_product(product_id)

        if fields.get('category_id') is not None:
            self.get_category(fields['category_id'])

        for key in ('name', 'price', 'image_url', 'category_id'):
            if key in fields:
                setattr(product, key, fields[key])

        db.session.commit()
        return product

    def delete_product(self, product_id: int) -> None:
        """
        Delete a product. Cart lines referencing it are left in place and
        reported as invalid at checkout. Products with earned points are
        part of the audit trail and cannot be deleted.
        """
        product = self.get_product(product_id)
        if PointTransaction.query.filter_by(product_id=product_id).first():
            raise ValidationError(
                f"Product {product_id} has point transactions and cannot be deleted", "id"
            )
        db.session.delete(product)
        db.session.commit()


catalog_service = CatalogService()
