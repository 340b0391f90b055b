"""
Database models for CartPoints.
Customers, catalog, carts and the loyalty points ledger.
"""
from .customer import Customer, LoyaltyAccount
from .catalog import Category, Product, PointEarningRule
from .points import PointTransaction
from .cart import ShoppingCart, ShoppingCartItem

__all__ = [
    'Customer',
    'LoyaltyAccount',
    'Category',
    'Product',
    'PointEarningRule',
    'PointTransaction',
    'ShoppingCart',
    'ShoppingCartItem',
]
