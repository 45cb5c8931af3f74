"""
Order finalisation tests.

Tests cover:
- State transitions for donations, recurring and project donations
- Idempotency (browser confirmation and webhook for the same payment)
- Confirmation emails
"""

import pytest
from datetime import datetime, timezone as dt_timezone
from unittest.mock import patch
from django.core import mail

from apps.checkout.exceptions import OrderNotFoundError, PaymentNotCompletedError
from apps.checkout.models import OrderStatus
from apps.checkout.services.finalize import confirm_payment, finalize_order
from apps.donations.models import Donation, DonationStatus, RecurringDonation, RecurringStatus
from apps.projects.models import ProjectDonationStatus, WaterProjectDonation


@pytest.mark.django_db
class TestFinalizeOrder:

    def test_completes_order_and_donations(self, pending_order):
        order = finalize_order(order_number=pending_order.order_number, payment_ref='pi_abc')

        assert order.status == OrderStatus.COMPLETED
        assert order.completed_at is not None
        donations = Donation.objects.filter(order_number=pending_order.order_number)
        assert donations.count() == 2
        for donation in donations:
            assert donation.status == DonationStatus.COMPLETED
            assert donation.transaction_id == 'pi_abc'
            assert donation.completed_at is not None

    def test_project_donation_moves_to_review(self, pending_order):
        finalize_order(order_number=pending_order.order_number, payment_ref='pi_abc')

        donation = WaterProjectDonation.objects.get(donation_number=pending_order.order_number)
        assert donation.status == ProjectDonationStatus.WAITING_TO_REVIEW
        assert donation.transaction_id == 'pi_abc'
        assert donation.email_sent is True

    def test_subscription_activates_recurring(self, pending_order):
        next_payment = datetime(2030, 1, 1, tzinfo=dt_timezone.utc)

        finalize_order(
            order_number=pending_order.order_number,
            payment_ref='sub_test123',
            is_subscription=True,
            next_payment_date=next_payment,
        )

        recurring = RecurringDonation.objects.get(subscription_id='sub_test123')
        assert recurring.status == RecurringStatus.ACTIVE
        assert recurring.next_payment_date == next_payment
        assert recurring.last_payment_date is not None

    def test_finalize_is_idempotent(self, pending_order):
        finalize_order(order_number=pending_order.order_number, payment_ref='pi_abc')
        first_completed_at = Donation.objects.filter(
            order_number=pending_order.order_number
        ).first().completed_at

        order = finalize_order(order_number=pending_order.order_number, payment_ref='pi_other')

        assert order.status == OrderStatus.COMPLETED
        donation = Donation.objects.filter(order_number=pending_order.order_number).first()
        assert donation.transaction_id == 'pi_abc'
        assert donation.completed_at == first_completed_at

    def test_emails_sent_once(self, pending_order):
        finalize_order(order_number=pending_order.order_number, payment_ref='pi_abc')
        finalize_order(order_number=pending_order.order_number, payment_ref='pi_abc')

        # one order confirmation + one water project receipt
        assert len(mail.outbox) == 2
        confirmation = mail.outbox[0]
        assert pending_order.order_number in confirmation.subject
        assert confirmation.to == ['amina@example.com']
        assert 'Gift Aid' in confirmation.body

    def test_email_failure_does_not_fail_finalize(self, pending_order):
        with patch(
            'apps.checkout.services.finalize.send_donation_confirmation',
            side_effect=OSError('smtp down'),
        ):
            order = finalize_order(order_number=pending_order.order_number, payment_ref='pi_abc')

        assert order.status == OrderStatus.COMPLETED

    def test_unknown_order(self, db):
        with pytest.raises(OrderNotFoundError):
            finalize_order(order_number='786-100000000')


@pytest.mark.django_db
class TestConfirmPayment:

    def test_requires_reference(self, pending_order):
        with pytest.raises(PaymentNotCompletedError):
            confirm_payment(order_number=pending_order.order_number)

    def test_processing_payment_counts_as_paid(self, pending_order):
        with patch('apps.checkout.services.finalize.StripePaymentService') as service:
            service.retrieve_payment_intent.return_value.status = 'processing'
            service.retrieve_payment_intent.return_value.id = 'pi_abc'

            order = confirm_payment(order_number=pending_order.order_number, payment_intent_id='pi_abc')

        assert order.status == OrderStatus.COMPLETED

    def test_confirms_intent_and_subscription(self, pending_order):
        next_payment = datetime(2030, 1, 1, tzinfo=dt_timezone.utc)
        with patch('apps.checkout.services.finalize.StripePaymentService') as service:
            service.retrieve_payment_intent.return_value.status = 'succeeded'
            service.retrieve_payment_intent.return_value.id = 'pi_abc'
            service.retrieve_subscription_payment.return_value = ('succeeded', next_payment)

            confirm_payment(
                order_number=pending_order.order_number,
                payment_intent_id='pi_abc',
                subscription_id='sub_test123',
            )

        assert Donation.objects.filter(
            order_number=pending_order.order_number,
            transaction_id='pi_abc',
        ).count() == 2
        recurring = RecurringDonation.objects.get(subscription_id='sub_test123')
        assert recurring.status == RecurringStatus.ACTIVE
        assert recurring.next_payment_date == next_payment

    def test_unpaid_subscription(self, pending_order):
        with patch('apps.checkout.services.finalize.StripePaymentService') as service:
            service.retrieve_subscription_payment.return_value = ('requires_payment_method', None)

            with pytest.raises(PaymentNotCompletedError):
                confirm_payment(order_number=pending_order.order_number, subscription_id='sub_test123')

        assert RecurringDonation.objects.get(subscription_id='sub_test123').status == RecurringStatus.PENDING
