"""Domain errors raised by the service layer.

Every error carries the HTTP status and the user-facing message the API
returns for it, so routes can let them propagate to ``app.errors``.
"""


class StorefrontError(Exception):
    status_code = 400
    default_message = "Request could not be processed"

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class OperationFailedError(StorefrontError):
    status_code = 500
    default_message = "Operation failed. Please try again."


class InvalidQuantityError(StorefrontError):
    default_message = "Quantity must be at least 1"


# --- cart / checkout ---

class EmptyCartError(StorefrontError):
    default_message = "Cart is empty"


class ProductNotFoundError(StorefrontError):
    status_code = 404
    default_message = "Product not found"


class InsufficientStockError(StorefrontError):
    status_code = 409

    def __init__(self, product_name: str, requested: int, available: int):
        self.product_name = product_name
        self.requested = requested
        self.available = available
        super().__init__(
            f"Not enough stock for {product_name}. Available: {available}, requested: {requested}"
        )


class OrderPersistenceError(StorefrontError):
    status_code = 500
    default_message = "Failed to place order. Please try again."


# --- auth ---

class AuthError(StorefrontError):
    status_code = 400
    default_message = "Authentication failed. Please try again."


class DuplicateEmailError(AuthError):
    status_code = 409
    default_message = "Email is already registered"


class WeakPasswordError(AuthError):
    default_message = "Password must be at least 6 characters"


class InvalidEmailError(AuthError):
    default_message = "Invalid email format"


class InvalidCredentialsError(AuthError):
    status_code = 401
    default_message = "Incorrect email or password"


class AccountDisabledError(AuthError):
    status_code = 403
    default_message = "Account has been disabled"


__all__ = [
    "StorefrontError",
    "OperationFailedError",
    "InvalidQuantityError",
    "EmptyCartError",
    "ProductNotFoundError",
    "InsufficientStockError",
    "OrderPersistenceError",
    "AuthError",
    "DuplicateEmailError",
    "WeakPasswordError",
    "InvalidEmailError",
    "InvalidCredentialsError",
    "AccountDisabledError",
]
