import re
from datetime import timedelta
import pytest
from unittest.mock import patch
from django.utils import timezone

from apps.checkout.models import Order
from apps.donations.models import DonationStatus, Donor, Fundraiser, PaymentMethod, RecurringStatus
from apps.donations.services import (
    cancel_recurring_donation,
    generate_donation_number,
    is_donation_number_taken,
    refund_donation,
    fundraisers_with_totals,
    search_donations,
    search_donors,
    DonationNumberUnavailableError,
    NotCancellableError,
    NotRefundableError,
)


# =============================================================================
# Donation numbers
# =============================================================================

@pytest.mark.django_db
class TestDonationNumbers:

    def test_format(self):
        number = generate_donation_number()

        assert re.fullmatch(r'786-1\d{8}', number)

    def test_taken_by_order(self):
        Order.objects.create(
            order_number='786-100000042',
            donor_first_name='Amina',
            donor_last_name='Khan',
            donor_email='amina@example.com',
        )

        assert is_donation_number_taken('786-100000042') is True
        assert is_donation_number_taken('786-100000043') is False

    def test_retries_on_collision(self):
        Order.objects.create(
            order_number='786-100000042',
            donor_first_name='Amina',
            donor_last_name='Khan',
            donor_email='amina@example.com',
        )

        with patch('apps.donations.services.numbering.secrets.randbelow', side_effect=[42, 43]):
            number = generate_donation_number()

        assert number == '786-100000043'

    def test_gives_up_after_max_attempts(self):
        Order.objects.create(
            order_number='786-100000042',
            donor_first_name='Amina',
            donor_last_name='Khan',
            donor_email='amina@example.com',
        )

        with patch('apps.donations.services.numbering.secrets.randbelow', return_value=42):
            with pytest.raises(DonationNumberUnavailableError):
                generate_donation_number(max_attempts=3)


# =============================================================================
# Refunds and cancellation
# =============================================================================

@pytest.mark.django_db
class TestRefundDonation:

    def test_offline_donation_marked_refunded(self, admin_user, cash_donation):
        donation = refund_donation(donation_id=cash_donation.id, user=admin_user)

        assert donation.status == DonationStatus.REFUNDED

    def test_stripe_donation_without_payment_intent(self, admin_user, stripe_donation):
        stripe_donation.transaction_id = 'sub_123'
        stripe_donation.save()

        with pytest.raises(NotRefundableError):
            refund_donation(donation_id=stripe_donation.id, user=admin_user)

    def test_already_refunded(self, admin_user, cash_donation):
        cash_donation.status = DonationStatus.REFUNDED
        cash_donation.save()

        with pytest.raises(NotRefundableError):
            refund_donation(donation_id=cash_donation.id, user=admin_user)


@pytest.mark.django_db
class TestCancelRecurring:

    def test_cancel_without_subscription(self, admin_user, recurring_donation):
        recurring_donation.subscription_id = ''
        recurring_donation.save()

        with patch('apps.donations.services.refunds.StripePaymentService') as service:
            recurring = cancel_recurring_donation(recurring_id=recurring_donation.id, user=admin_user)

        assert recurring.status == RecurringStatus.CANCELLED
        assert recurring.cancelled_at is not None
        service.cancel_subscription.assert_not_called()

    def test_already_cancelled(self, admin_user, recurring_donation):
        recurring_donation.status = RecurringStatus.CANCELLED
        recurring_donation.save()

        with pytest.raises(NotCancellableError):
            cancel_recurring_donation(recurring_id=recurring_donation.id, user=admin_user)


# =============================================================================
# Queries
# =============================================================================

@pytest.mark.django_db
class TestQueries:

    def test_search_donations_combines_filters(self, stripe_donation, cash_donation, pending_donation):
        results = search_donations(status=DonationStatus.COMPLETED, payment_method=PaymentMethod.CASH)

        assert list(results) == [cash_donation]

    def test_search_donations_ignores_empty_filters(self, stripe_donation, cash_donation):
        results = search_donations(search='', status='', gift_aid='', start='', end='')

        assert results.count() == 2

    def test_search_donors_by_city(self, donor, other_donor):
        results = search_donors(city='bradford')

        assert list(results) == [other_donor]

    def test_donor_totals_ignore_pending(self, donor, pending_donation):
        result = search_donors().get(pk=donor.pk)

        assert result.total_pence == 0
        assert result.donation_count == 0

    def test_donor_search_has_stable_ordering(self, donor, other_donor):
        Donor.objects.create(first_name='Zara', last_name='Ahmed', email='zara@example.com')
        results = search_donors()

        assert results.ordered
        assert [row.email for row in results] == ['bilal@example.com', 'zara@example.com', 'amina@example.com']

    def test_fundraiser_totals_newest_first(self, appeal, fundraiser):
        Fundraiser.objects.filter(pk=fundraiser.pk).update(created_at=timezone.now() - timedelta(days=1))
        newer = Fundraiser.objects.create(
            appeal=appeal,
            fundraiser_name='Maryam',
            title='Bake Sale',
            slug='bake-sale',
        )
        results = fundraisers_with_totals()

        assert results.ordered
        assert list(results) == [newer, fundraiser]
