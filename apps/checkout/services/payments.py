"""
Stripe payment gateway.

All Stripe API calls go through ``StripePaymentService`` so the rest of the
code (and tests) can treat payments as a small set of static methods.
Every ``stripe.StripeError`` is logged and re-raised as
``PaymentProviderError`` (HTTP 502).
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone as dt_timezone
from typing import Optional

import stripe
from django.conf import settings

from apps.checkout.exceptions import PaymentProviderError, WebhookSignatureError


logger = logging.getLogger(__name__)

SUCCEEDED_STATUSES = ('succeeded', 'processing')

STRIPE_INTERVALS = {
    'MONTHLY': 'month',
    'YEARLY': 'year',
}


@dataclass(frozen=True)
class WalletCapabilities:
    """
    Which express wallets the donor's browser can use.

    Built from the Stripe.js ``canMakePayment()`` result, which reports
    ``applePay``, ``googlePay`` and ``link`` flags (or ``null`` when no
    wallet is available at all).
    """

    apple_pay: bool = False
    google_pay: bool = False
    link: bool = False

    @classmethod
    def from_result(cls, result) -> 'WalletCapabilities':
        if not isinstance(result, dict):
            return cls()
        return cls(
            apple_pay=result.get('applePay', result.get('apple_pay')) is True,
            google_pay=result.get('googlePay', result.get('google_pay')) is True,
            link=result.get('link') is True,
        )

    @property
    def any_available(self) -> bool:
        return self.apple_pay or self.google_pay or self.link


@dataclass(frozen=True)
class PaymentIntentResult:
    id: str
    client_secret: str
    status: str = ''


@dataclass(frozen=True)
class SubscriptionResult:
    id: str
    client_secret: Optional[str]
    status: str = ''


def _configure():
    stripe.api_key = settings.STRIPE_SECRET_KEY


def _timestamp_to_datetime(value) -> Optional[datetime]:
    if not value:
        return None
    return datetime.fromtimestamp(int(value), tz=dt_timezone.utc)


class StripePaymentService:
    """Thin wrapper around the Stripe SDK."""

    @staticmethod
    def get_or_create_customer(*, email: str, name: str) -> str:
        """Return the Stripe customer id for an email, creating one if needed."""
        _configure()
        try:
            existing = stripe.Customer.list(email=email, limit=1)
            if existing.data:
                return existing.data[0].id
            customer = stripe.Customer.create(email=email, name=name)
        except stripe.StripeError as exc:
            logger.exception('Stripe customer lookup failed for %s', email)
            raise PaymentProviderError() from exc
        return customer.id

    @staticmethod
    def create_payment_intent(
        *,
        amount_pence: int,
        order_number: str,
        email: str,
        customer_id: Optional[str] = None,
        description: str = ''
    ) -> PaymentIntentResult:
        """Create a PaymentIntent for the one-off part of an order."""
        _configure()
        params = {
            'amount': amount_pence,
            'currency': settings.STRIPE_CURRENCY,
            'automatic_payment_methods': {'enabled': True},
            'receipt_email': email,
            'description': description or f'Donation {order_number}',
            'metadata': {'order_number': order_number},
        }
        if customer_id:
            params['customer'] = customer_id
        try:
            intent = stripe.PaymentIntent.create(**params)
        except stripe.StripeError as exc:
            logger.exception('Stripe PaymentIntent creation failed for order %s', order_number)
            raise PaymentProviderError() from exc
        return PaymentIntentResult(id=intent.id, client_secret=intent.client_secret, status=intent.status)

    @staticmethod
    def create_subscription(
        *,
        customer_id: str,
        amount_pence: int,
        frequency: str,
        product_name: str,
        order_number: str
    ) -> SubscriptionResult:
        """
        Create an incomplete subscription for one recurring basket line.

        The first invoice's PaymentIntent client secret is returned so the
        browser can confirm the payment.
        """
        _configure()
        try:
            product = stripe.Product.create(name=product_name[:250])
            subscription = stripe.Subscription.create(
                customer=customer_id,
                items=[{
                    'price_data': {
                        'currency': settings.STRIPE_CURRENCY,
                        'product': product.id,
                        'unit_amount': amount_pence,
                        'recurring': {'interval': STRIPE_INTERVALS[frequency]},
                    },
                }],
                payment_behavior='default_incomplete',
                payment_settings={'save_default_payment_method': 'on_subscription'},
                expand=['latest_invoice.payment_intent'],
                metadata={'order_number': order_number},
            )
        except stripe.StripeError as exc:
            logger.exception('Stripe subscription creation failed for order %s', order_number)
            raise PaymentProviderError() from exc

        client_secret = None
        invoice = subscription.latest_invoice
        if invoice and getattr(invoice, 'payment_intent', None):
            client_secret = invoice.payment_intent.client_secret
        return SubscriptionResult(id=subscription.id, client_secret=client_secret, status=subscription.status)

    @staticmethod
    def retrieve_payment_intent(payment_intent_id: str):
        _configure()
        try:
            return stripe.PaymentIntent.retrieve(payment_intent_id)
        except stripe.StripeError as exc:
            logger.exception('Stripe PaymentIntent retrieval failed for %s', payment_intent_id)
            raise PaymentProviderError() from exc

    @staticmethod
    def retrieve_subscription_payment(subscription_id: str):
        """
        Return ``(payment_status, next_payment_date)`` for a subscription's
        latest invoice.
        """
        _configure()
        try:
            subscription = stripe.Subscription.retrieve(
                subscription_id,
                expand=['latest_invoice.payment_intent'],
            )
        except stripe.StripeError as exc:
            logger.exception('Stripe subscription retrieval failed for %s', subscription_id)
            raise PaymentProviderError() from exc

        status = ''
        invoice = subscription.latest_invoice
        if invoice and getattr(invoice, 'payment_intent', None):
            status = invoice.payment_intent.status
        next_payment = _timestamp_to_datetime(getattr(subscription, 'current_period_end', None))
        return status, next_payment

    @staticmethod
    def refund(*, payment_intent_id: str, amount_pence: Optional[int] = None):
        """Refund a payment (fully, or ``amount_pence`` of it)."""
        _configure()
        params = {'payment_intent': payment_intent_id}
        if amount_pence:
            params['amount'] = amount_pence
        try:
            refund = stripe.Refund.create(**params)
        except stripe.StripeError as exc:
            logger.exception('Stripe refund failed for %s', payment_intent_id)
            raise PaymentProviderError() from exc
        return refund.id

    @staticmethod
    def cancel_subscription(subscription_id: str):
        _configure()
        try:
            stripe.Subscription.cancel(subscription_id)
        except stripe.StripeError as exc:
            logger.exception('Stripe subscription cancellation failed for %s', subscription_id)
            raise PaymentProviderError() from exc

    @staticmethod
    def construct_event(payload: bytes, signature: str):
        """Verify a webhook payload against ``STRIPE_WEBHOOK_SECRET``."""
        if not signature or not settings.STRIPE_WEBHOOK_SECRET:
            raise WebhookSignatureError()
        try:
            return stripe.Webhook.construct_event(payload, signature, settings.STRIPE_WEBHOOK_SECRET)
        except (ValueError, stripe.SignatureVerificationError) as exc:
            logger.warning('Stripe webhook signature verification failed: %s', exc)
            raise WebhookSignatureError() from exc


def is_payment_successful(status: str) -> bool:
    return status in SUCCEEDED_STATUSES
