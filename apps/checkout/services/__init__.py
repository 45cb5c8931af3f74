"""
Checkout app services layer.

Pure helpers (fees, basket, validation) and the Stripe gateway are
re-exported here. Order creation, finalisation and webhook handling
live in ``orders``, ``finalize`` and ``webhooks`` and are imported from
those modules directly.
"""

from .fees import (
    FeeSplit,
    split_fees,
    calculate_fees,
    apportion,
)

from .basket import (
    Basket,
    BasketItem,
    BasketStore,
)

from .validation import (
    FieldError,
    validate_donor_details,
    errors_to_dict,
)

from .payments import (
    StripePaymentService,
    WalletCapabilities,
)


__all__ = [
    # Fees
    'FeeSplit',
    'split_fees',
    'calculate_fees',
    'apportion',

    # Basket
    'Basket',
    'BasketItem',
    'BasketStore',

    # Validation
    'FieldError',
    'validate_donor_details',
    'errors_to_dict',

    # Payments
    'StripePaymentService',
    'WalletCapabilities',
]
