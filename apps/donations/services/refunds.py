"""
Refunds and recurring cancellations.

Both operations change local state and, for website payments, the
corresponding Stripe object. Stripe failures propagate as
``PaymentProviderError`` and roll the local change back.
"""

import logging
from uuid import UUID

from django.db import transaction
from django.utils import timezone

from apps.accounts.models import User
from apps.checkout.services.payments import StripePaymentService
from apps.donations.models import (
    Donation,
    DonationStatus,
    PaymentMethod,
    RecurringDonation,
    RecurringStatus,
)

from .exceptions import NotCancellableError, NotRefundableError


logger = logging.getLogger(__name__)


def refund_donation(*, donation_id: UUID, user: User) -> Donation:
    """
    Refund a completed donation.

    Website (Stripe) donations are refunded through Stripe first; offline
    payments are only marked as refunded.

    Raises:
        Donation.DoesNotExist: If the donation does not exist.
        NotRefundableError: If the donation is not COMPLETED, or was paid
            by subscription (refund those from the Stripe dashboard).
    """
    with transaction.atomic():
        donation = Donation.objects.select_for_update().get(id=donation_id)

        if donation.status != DonationStatus.COMPLETED:
            raise NotRefundableError(
                f'Only completed donations can be refunded (status is {donation.status}).'
            )

        if donation.payment_method == PaymentMethod.WEBSITE_STRIPE:
            if not donation.transaction_id.startswith('pi_'):
                raise NotRefundableError('This payment has no refundable Stripe payment.')
            StripePaymentService.refund(
                payment_intent_id=donation.transaction_id,
                amount_pence=donation.amount_pence,
            )

        donation.status = DonationStatus.REFUNDED
        donation.save(update_fields=['status'])

    logger.info('Donation %s refunded by %s', donation.id, user.email)
    return donation


def cancel_recurring_donation(*, recurring_id: UUID, user: User) -> RecurringDonation:
    """
    Cancel a recurring donation and its Stripe subscription.

    Raises:
        RecurringDonation.DoesNotExist: If the record does not exist.
        NotCancellableError: If it is already cancelled.
    """
    with transaction.atomic():
        recurring = RecurringDonation.objects.select_for_update().get(id=recurring_id)

        if recurring.status == RecurringStatus.CANCELLED:
            raise NotCancellableError('Recurring donation is already cancelled.')

        if recurring.subscription_id:
            StripePaymentService.cancel_subscription(recurring.subscription_id)

        recurring.status = RecurringStatus.CANCELLED
        recurring.cancelled_at = timezone.now()
        recurring.next_payment_date = None
        recurring.save(update_fields=['status', 'cancelled_at', 'next_payment_date'])

    logger.info('Recurring donation %s cancelled by %s', recurring.id, user.email)
    return recurring
