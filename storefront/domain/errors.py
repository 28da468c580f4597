# storefront/domain/errors.py
"""
Domain exceptions.

Each error carries a stable machine readable ``code`` and the HTTP status the
API layer answers with, so routers can translate them without a lookup table.
"""


class ShopError(Exception):
    status_code = 400
    code = "error"
    default_message = "Request could not be processed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFoundError(ShopError):
    status_code = 404
    code = "not_found"
    default_message = "Resource not found"


class ProductUnavailableError(NotFoundError):
    code = "product_unavailable"
    default_message = "Product not found"


class ConflictError(ShopError):
    status_code = 409
    code = "conflict"


class EmptyCartError(ConflictError):
    code = "empty_cart"
    default_message = "Cart is empty"


class InsufficientStockError(ConflictError):
    code = "insufficient_stock"

    def __init__(self, product_name: str):
        self.product_name = product_name
        super().__init__(f"Insufficient stock for {product_name}")


class OrderNotCancellableError(ConflictError):
    code = "order_not_cancellable"
    default_message = "Cannot cancel order in current status"


class InvalidStatusTransitionError(ConflictError):
    code = "invalid_status_transition"

    def __init__(self, current: str, requested: str):
        self.current = current
        self.requested = requested
        super().__init__(f"Cannot change order status from {current} to {requested}")


class CheckoutInProgressError(ConflictError):
    code = "checkout_in_progress"
    default_message = "A checkout for this cart is already in progress"


class EmailAlreadyRegisteredError(ConflictError):
    code = "email_taken"
    default_message = "User with this email already exists"


class PaymentError(ShopError):
    status_code = 502
    code = "payment_error"

    def __init__(self, message: str | None = None):
        super().__init__(f"Payment error: {message}" if message else "Payment error")


class PaymentDeclinedError(ShopError):
    status_code = 402
    code = "payment_declined"
    default_message = "Payment failed"


class AuthenticationError(ShopError):
    status_code = 401
    code = "not_authenticated"
    default_message = "Not authenticated"


class InvalidCredentialsError(AuthenticationError):
    code = "invalid_credentials"
    default_message = "Invalid email or password"


class ForbiddenError(ShopError):
    status_code = 403
    code = "forbidden"
    default_message = "Admin privileges required"


class InvalidInputError(ShopError):
    status_code = 422
    code = "invalid_input"
    default_message = "Invalid input"
