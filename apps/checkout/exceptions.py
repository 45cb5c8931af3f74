"""
Domain exceptions for checkout app.

Plain ``CheckoutServiceError`` subclasses are raised by the services layer
and translated to ``{"error": ...}`` responses in views. The
``APIException`` subclasses carry their own HTTP status.
"""
from rest_framework.exceptions import APIException


class CheckoutServiceError(Exception):
    """Base exception for checkout service errors."""
    pass


class EmptyBasketError(CheckoutServiceError):
    """Raised when an order is attempted with no items."""
    pass


class InvalidOrderItemError(CheckoutServiceError):
    """Raised when an item references a missing or mismatched appeal/project."""
    pass


class TotalsMismatchError(CheckoutServiceError):
    """Raised when the client total does not match the server calculation."""
    pass


class ExpressCheckoutUnavailableError(CheckoutServiceError):
    """Raised when express checkout is attempted for a recurring basket or without a wallet."""
    pass


class OrderNotFoundError(CheckoutServiceError):
    """Raised when an order number does not exist."""
    pass


class PaymentNotCompletedError(CheckoutServiceError):
    """Raised when Stripe reports the payment has not succeeded yet."""
    pass


class BasketItemNotFoundError(APIException):
    """Basket item not found."""
    status_code = 404
    default_detail = 'Basket item not found.'
    default_code = 'basket_item_not_found'


class PaymentProviderError(APIException):
    """Stripe call failed."""
    status_code = 502
    default_detail = 'Payment provider is unavailable. Please try again.'
    default_code = 'payment_provider_error'


class WebhookSignatureError(APIException):
    """Stripe webhook signature could not be verified."""
    status_code = 400
    default_detail = 'Invalid webhook signature.'
    default_code = 'invalid_webhook_signature'
