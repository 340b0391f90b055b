"""
Custom exceptions for CartPoints business logic.

These exceptions carry a machine-readable code so the API layer can map
them to consistent JSON error responses and HTTP status codes.
"""


class CartPointsError(Exception):
    """Base exception for all CartPoints business logic errors."""

    def __init__(self, message: str, code: str = "CARTPOINTS_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class NotFoundError(CartPointsError):
    """Resource not found."""

    def __init__(self, resource: str, identifier=None):
        message = f"{resource} not found"
        if identifier is not None:
            message = f"{resource} with ID {identifier} not found"
        code = resource.upper().replace(' ', '_')
        super().__init__(message, f"{code}_NOT_FOUND")


class AccountNotFoundError(NotFoundError):
    """Loyalty account not found."""

    def __init__(self, identifier=None):
        super().__init__("Loyalty account", identifier)
        self.code = "ACCOUNT_NOT_FOUND"


class CustomerNotFoundError(NotFoundError):
    """Customer not found."""

    def __init__(self, identifier=None):
        super().__init__("Customer", identifier)


class ProductNotFoundError(NotFoundError):
    """Product not found."""

    def __init__(self, identifier=None):
        super().__init__("Product", identifier)


class CategoryNotFoundError(NotFoundError):
    """Category not found."""

    def __init__(self, identifier=None):
        super().__init__("Category", identifier)


class CartNotFoundError(NotFoundError):
    """Shopping cart not found."""

    def __init__(self, identifier=None):
        super().__init__("Shopping cart", identifier)
        self.code = "CART_NOT_FOUND"


class EmptyCartError(CartPointsError):
    """Checkout attempted with a missing or empty cart."""

    def __init__(self, customer_id=None):
        self.customer_id = customer_id
        message = "Shopping cart is empty"
        if customer_id is not None:
            message = f"Shopping cart for customer {customer_id} is empty"
        super().__init__(message, "EMPTY_CART")


class ValidationError(CartPointsError):
    """Invalid input data."""

    def __init__(self, message: str, field: str = None):
        self.field = field
        code = f"INVALID_{field.upper()}" if field else "VALIDATION_ERROR"
        super().__init__(message, code)


class DuplicateError(CartPointsError):
    """Resource already exists."""

    def __init__(self, resource: str, identifier=None):
        message = f"{resource} already exists"
        if identifier:
            message = f"{resource} with {identifier} already exists"
        super().__init__(message, "DUPLICATE_ENTRY")
