"""
Stripe webhook handling.

Handled events:
    payment_intent.succeeded       finalize the order in the metadata
    payment_intent.payment_failed  fail the order
    invoice.paid                   activate the subscription; renewals
                                   record a new completed donation
    invoice.payment_failed         mark the recurring donation FAILED
    customer.subscription.deleted  mark the recurring donation CANCELLED

Events arrive as ``stripe.Event`` objects (dict subclasses), so handlers
only use item access.
"""

import logging
from datetime import datetime, timezone as dt_timezone

from django.db import transaction
from django.utils import timezone

from apps.checkout.exceptions import OrderNotFoundError
from apps.checkout.models import Order, OrderStatus
from apps.donations.models import (
    CollectionSource,
    Donation,
    DonationStatus,
    RecurringDonation,
    RecurringStatus,
)

from .finalize import finalize_order
from .orders import mark_order_failed


logger = logging.getLogger(__name__)


def _metadata_order_number(obj) -> str:
    metadata = obj.get('metadata') or {}
    return metadata.get('order_number') or ''


def _period_end(invoice):
    lines = (invoice.get('lines') or {}).get('data') or []
    if not lines:
        return None
    end = (lines[0].get('period') or {}).get('end')
    if not end:
        return None
    return datetime.fromtimestamp(int(end), tz=dt_timezone.utc)


def handle_payment_intent_succeeded(intent) -> str:
    order_number = _metadata_order_number(intent)
    if not order_number:
        return 'ignored'
    try:
        finalize_order(order_number=order_number, payment_ref=intent['id'])
    except OrderNotFoundError:
        logger.warning('Webhook for unknown order %s', order_number)
        return 'unknown_order'
    return 'finalized'


def handle_payment_intent_failed(intent) -> str:
    order_number = _metadata_order_number(intent)
    order = Order.objects.filter(order_number=order_number).first() if order_number else None
    if order is None or order.status != OrderStatus.PENDING:
        return 'ignored'
    mark_order_failed(order)
    return 'failed'


def handle_invoice_paid(invoice) -> str:
    subscription_id = invoice.get('subscription')
    if not subscription_id:
        return 'ignored'

    recurring_donations = list(RecurringDonation.objects.filter(subscription_id=subscription_id))
    if not recurring_donations:
        logger.warning('invoice.paid for unknown subscription %s', subscription_id)
        return 'ignored'

    paid_at = timezone.now()
    next_payment_date = _period_end(invoice)

    if invoice.get('billing_reason') == 'subscription_create':
        order_number = recurring_donations[0].order_number
        if order_number:
            finalize_order(
                order_number=order_number,
                payment_ref=subscription_id,
                is_subscription=True,
                paid_at=paid_at,
                next_payment_date=next_payment_date,
            )
            return 'finalized'

    # Renewal: record the instalment as its own donation
    with transaction.atomic():
        for recurring in recurring_donations:
            if recurring.status == RecurringStatus.CANCELLED:
                continue
            Donation.objects.create(
                donor_id=recurring.donor_id,
                appeal_id=recurring.appeal_id,
                product_name=recurring.product_name,
                amount_pence=recurring.amount_pence,
                donation_type=recurring.donation_type,
                frequency=recurring.frequency,
                payment_method=recurring.payment_method,
                collected_via=CollectionSource.WEBSITE,
                status=DonationStatus.COMPLETED,
                gift_aid=recurring.gift_aid,
                transaction_id=invoice.get('payment_intent') or invoice.get('id') or '',
                order_number=recurring.order_number,
                completed_at=paid_at,
            )
            recurring.status = RecurringStatus.ACTIVE
            recurring.last_payment_date = paid_at
            if next_payment_date:
                recurring.next_payment_date = next_payment_date
            recurring.save(update_fields=['status', 'last_payment_date', 'next_payment_date'])

    logger.info('Recorded renewal for subscription %s', subscription_id)
    return 'renewed'


def handle_invoice_payment_failed(invoice) -> str:
    subscription_id = invoice.get('subscription')
    if not subscription_id:
        return 'ignored'
    RecurringDonation.objects.filter(subscription_id=subscription_id).exclude(
        status=RecurringStatus.CANCELLED
    ).update(status=RecurringStatus.FAILED)
    return 'failed'


def handle_subscription_deleted(subscription) -> str:
    updated = RecurringDonation.objects.filter(subscription_id=subscription['id']).exclude(
        status=RecurringStatus.CANCELLED
    ).update(
        status=RecurringStatus.CANCELLED,
        cancelled_at=timezone.now(),
        next_payment_date=None,
    )
    return 'cancelled' if updated else 'ignored'


EVENT_HANDLERS = {
    'payment_intent.succeeded': handle_payment_intent_succeeded,
    'payment_intent.payment_failed': handle_payment_intent_failed,
    'invoice.paid': handle_invoice_paid,
    'invoice.payment_failed': handle_invoice_payment_failed,
    'customer.subscription.deleted': handle_subscription_deleted,
}


def handle_event(event) -> str:
    """Dispatch a verified Stripe event; returns a short outcome string."""
    handler = EVENT_HANDLERS.get(event['type'])
    if handler is None:
        logger.debug('Unhandled Stripe event type %s', event['type'])
        return 'unhandled'
    outcome = handler(event['data']['object'])
    logger.info('Stripe event %s: %s', event['type'], outcome)
    return outcome
