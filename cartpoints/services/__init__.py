"""
Business logic services for CartPoints.
"""
from .point_calculation import find_active_rule, calculate_points
from .cart_service import CartService, CartSnapshot, CartLine, cart_service
from .loyalty_account_store import LoyaltyAccountStore, loyalty_account_store
from .checkout_service import CheckoutCoordinator, CheckoutResult, build_checkout_coordinator
from .catalog_service import CatalogService, catalog_service
from .customer_service import CustomerService, customer_service

__all__ = [
    'find_active_rule',
    'calculate_points',
    'CartService',
    'CartSnapshot',
    'CartLine',
    'cart_service',
    'LoyaltyAccountStore',
    'loyalty_account_store',
    'CheckoutCoordinator',
    'CheckoutResult',
    'build_checkout_coordinator',
    'CatalogService',
    'catalog_service',
    'CustomerService',
    'customer_service',
]
