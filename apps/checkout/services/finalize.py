"""
Order finalisation.

Called from the browser confirmation endpoint and from Stripe webhooks,
often both for the same payment, so every step is idempotent:

    - PENDING donations -> COMPLETED (with the Stripe reference)
    - order -> COMPLETED
    - recurring donations for a subscription -> ACTIVE
    - PENDING project donations -> WAITING_TO_REVIEW
    - donor confirmation email only on the first completion
"""

import logging
from datetime import datetime
from smtplib import SMTPException
from typing import Optional

from django.db import transaction
from django.utils import timezone

from apps.checkout.exceptions import OrderNotFoundError, PaymentNotCompletedError
from apps.checkout.models import Order, OrderStatus
from apps.donations.models import (
    Donation,
    DonationStatus,
    RecurringDonation,
    RecurringStatus,
)
from apps.projects.models import ProjectDonationStatus, SponsorshipDonation, WaterProjectDonation
from apps.projects.services import send_donation_receipt

from .emails import send_donation_confirmation
from .payments import StripePaymentService, is_payment_successful


logger = logging.getLogger(__name__)


def finalize_order(
    *,
    order_number: str,
    payment_ref: Optional[str] = None,
    is_subscription: bool = False,
    paid_at: Optional[datetime] = None,
    next_payment_date: Optional[datetime] = None
) -> Order:
    """
    Mark an order paid.

    Args:
        order_number: The order's ``786-1########`` number.
        payment_ref: PaymentIntent or Subscription id.
        is_subscription: ``payment_ref`` is a subscription id.
        paid_at: Defaults to now.
        next_payment_date: Next subscription charge, if known.

    Returns:
        The (locked and updated) Order.

    Raises:
        OrderNotFoundError: If no order has that number.
    """
    paid_at = paid_at or timezone.now()

    with transaction.atomic():
        order = Order.objects.select_for_update().filter(order_number=order_number).first()
        if order is None:
            raise OrderNotFoundError(f'Order {order_number} not found')

        was_completed = order.status == OrderStatus.COMPLETED

        donation_updates = {'status': DonationStatus.COMPLETED, 'completed_at': paid_at}
        if payment_ref:
            donation_updates['transaction_id'] = payment_ref
        Donation.objects.filter(
            order_number=order_number,
            status=DonationStatus.PENDING,
        ).update(**donation_updates)

        if not was_completed:
            order.status = OrderStatus.COMPLETED
            order.completed_at = paid_at
            order.save(update_fields=['status', 'completed_at', 'updated_at'])

        if is_subscription and payment_ref:
            recurring_updates = {'status': RecurringStatus.ACTIVE, 'last_payment_date': paid_at}
            if next_payment_date:
                recurring_updates['next_payment_date'] = next_payment_date
            RecurringDonation.objects.filter(subscription_id=payment_ref).exclude(
                status=RecurringStatus.CANCELLED
            ).update(**recurring_updates)

        project_donations = []
        for model in (WaterProjectDonation, SponsorshipDonation):
            pending = model.objects.filter(
                donation_number=order_number,
                status=ProjectDonationStatus.PENDING,
            )
            if payment_ref:
                pending.filter(transaction_id='').update(transaction_id=payment_ref)
            pending.update(status=ProjectDonationStatus.WAITING_TO_REVIEW)
            project_donations.extend(
                model.objects.filter(donation_number=order_number, email_sent=False)
                .select_related('donor', 'country')
            )

    if not was_completed:
        logger.info('Order %s completed (%s)', order_number, payment_ref or 'no reference')
        try:
            send_donation_confirmation(order)
        except (SMTPException, OSError):
            logger.exception('Error sending donation confirmation email for %s', order_number)

    for donation in project_donations:
        send_donation_receipt(donation)

    return order


def confirm_payment(
    *,
    order_number: str,
    payment_intent_id: Optional[str] = None,
    subscription_id: Optional[str] = None
) -> Order:
    """
    Confirm a payment reported by the browser, checking Stripe first.

    Raises:
        PaymentNotCompletedError: If the payment has not succeeded.
        OrderNotFoundError: If the order does not exist.
        PaymentProviderError: If Stripe cannot be reached.
    """
    if not payment_intent_id and not subscription_id:
        raise PaymentNotCompletedError('Missing payment reference')

    order = None

    # One-off payment first so one-off donations carry the PaymentIntent id.
    if payment_intent_id:
        intent = StripePaymentService.retrieve_payment_intent(payment_intent_id)
        if not is_payment_successful(intent.status):
            raise PaymentNotCompletedError('Payment not completed')
        order = finalize_order(order_number=order_number, payment_ref=intent.id)

    if subscription_id:
        status, next_payment_date = StripePaymentService.retrieve_subscription_payment(subscription_id)
        if not is_payment_successful(status):
            raise PaymentNotCompletedError('Payment not completed')
        order = finalize_order(
            order_number=order_number,
            payment_ref=subscription_id,
            is_subscription=True,
            next_payment_date=next_payment_date,
        )

    return order
