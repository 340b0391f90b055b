"""
Read-only lookups used by checkout.

Each lookup is a small class so the checkout coordinator can be handed
an alternative implementation (tests, other storage) through its
constructor.
"""
from datetime import date
from typing import List, Optional

from ..extensions import db
from ..models.catalog import Product, PointEarningRule


class ProductLookup:
    """Find products by id, category included."""

    def find_by_id(self, product_id: int) -> Optional[Product]:
        return db.session.get(Product, product_id)


class CategoryRuleLookup:
    """Fetch point earning rules scoped to one category."""

    def find_rules_for_category(self, category_id: int) -> List[PointEarningRule]:
        """All rules for the category, in id order."""
        return (
            PointEarningRule.query
            .filter_by(category_id=category_id)
            .order_by(PointEarningRule.id)
            .all()
        )

    def find_active_rules_for_category(self, category_id: int, as_of: date) -> List[PointEarningRule]:
        """Rules for the category active on as_of, filtered in SQL."""
        return (
            PointEarningRule.query
            .filter(
                PointEarningRule.category_id == category_id,
                PointEarningRule.start_date <= as_of,
                db.or_(
                    PointEarningRule.end_date.is_(None),
                    PointEarningRule.end_date >= as_of
                )
            )
            .order_by(PointEarningRule.id)
            .all()
        )
