"""
Point calculation for checkout line items.

Two pure functions with no database access:
- find_active_rule: pick the rule in effect on a date
- calculate_points: points a line item earns under that rule

Points are computed per unit (price x rate, rounded down) and then
multiplied by quantity, so a $15.99 book at 1 pt/$ earns 15 points per
copy: 3 copies earn 45, not floor(47.97) = 47.
"""
from datetime import date
from typing import Iterable, Optional

from ..models.catalog import Product, PointEarningRule


def find_active_rule(
    rules: Iterable[PointEarningRule],
    as_of: date
) -> Optional[PointEarningRule]:
    """
    Return the first rule in the given order that is active on as_of.

    When several rules overlap, the caller's ordering decides; no
    tie-break is applied here.
    """
    for rule in rules:
        if rule.is_active(as_of):
            return rule
    return None


def calculate_points(
    product: Product,
    rule: PointEarningRule,
    as_of: date,
    quantity: int
) -> int:
    """
    Points earned by quantity units of product under rule.

    Returns 0 when the product is not eligible (price <= 0 or no category)
    or the rule is not active on as_of.
    """
    if not product.is_eligible_for_points() or not rule.is_active(as_of):
        return 0
    return rule.calculate_points(product.price) * quantity
