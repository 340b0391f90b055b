"""
Middleware package for CartPoints.
"""
from .customer_auth import require_customer, get_customer_id_from_request

__all__ = ['require_customer', 'get_customer_id_from_request']
