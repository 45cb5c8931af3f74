import pytest
from unittest.mock import patch
from django.urls import reverse
from rest_framework import status

from apps.checkout.exceptions import PaymentProviderError
from apps.donations.models import Appeal, DonationStatus, Donor, RecurringStatus


# =============================================================================
# Donation list
# =============================================================================

@pytest.mark.django_db
class TestDonationList:
    """Tests for GET /api/donations/"""

    def test_requires_authentication(self, api_client):
        response = api_client.get(reverse('donations:donation-list'))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_viewer_can_list(self, viewer_client, stripe_donation, cash_donation):
        response = viewer_client.get(reverse('donations:donation-list'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['count'] == 2

    def test_filter_by_payment_method(self, staff_client, stripe_donation, cash_donation):
        response = staff_client.get(reverse('donations:donation-list'), {'payment_method': 'CASH'})

        assert response.data['count'] == 1
        assert response.data['results'][0]['payment_method_display'] == 'Cash'

    def test_filter_by_gift_aid(self, staff_client, stripe_donation, cash_donation):
        response = staff_client.get(reverse('donations:donation-list'), {'gift_aid': 'true'})

        assert [row['id'] for row in response.data['results']] == [str(stripe_donation.id)]

    def test_search_by_email_and_order_number(self, staff_client, stripe_donation, cash_donation):
        by_email = staff_client.get(reverse('donations:donation-list'), {'search': 'amina@'})
        by_order = staff_client.get(reverse('donations:donation-list'), {'search': '786-112345678'})

        assert by_email.data['count'] == 1
        assert by_order.data['results'][0]['order_number'] == '786-112345678'

    def test_date_range(self, staff_client, stripe_donation):
        response = staff_client.get(
            reverse('donations:donation-list'),
            {'start': '2000-01-01', 'end': '2000-12-31'},
        )

        assert response.data['count'] == 0

    def test_retrieve_includes_display_fields(self, staff_client, stripe_donation):
        url = reverse('donations:donation-detail', kwargs={'pk': stripe_donation.id})

        response = staff_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['amount_display'] == '£25.00'
        assert response.data['donor']['full_name'] == 'Amina Khan'
        assert response.data['appeal_title'] == 'Emergency Relief'
        assert response.data['fundraiser_title'] == 'Run for Relief'


# =============================================================================
# Refunds
# =============================================================================

@pytest.mark.django_db
class TestRefund:
    """Tests for POST /api/donations/{id}/refund/"""

    def test_admin_refunds_stripe_donation(self, admin_client, stripe_donation):
        url = reverse('donations:donation-refund', kwargs={'pk': stripe_donation.id})

        with patch('apps.donations.services.refunds.StripePaymentService') as service:
            service.refund.return_value = 're_123'
            response = admin_client.post(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['status'] == DonationStatus.REFUNDED
        service.refund.assert_called_once_with(payment_intent_id='pi_refundable', amount_pence=2500)

    def test_offline_refund_skips_stripe(self, admin_client, cash_donation):
        url = reverse('donations:donation-refund', kwargs={'pk': cash_donation.id})

        with patch('apps.donations.services.refunds.StripePaymentService') as service:
            response = admin_client.post(url)

        assert response.status_code == status.HTTP_200_OK
        service.refund.assert_not_called()

    def test_staff_cannot_refund(self, staff_client, stripe_donation):
        url = reverse('donations:donation-refund', kwargs={'pk': stripe_donation.id})

        response = staff_client.post(url)

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_pending_donation_not_refundable(self, admin_client, pending_donation):
        url = reverse('donations:donation-refund', kwargs={'pk': pending_donation.id})

        response = admin_client.post(url)

        assert response.status_code == status.HTTP_409_CONFLICT

    def test_stripe_failure_keeps_donation_completed(self, admin_client, stripe_donation):
        url = reverse('donations:donation-refund', kwargs={'pk': stripe_donation.id})

        with patch('apps.donations.services.refunds.StripePaymentService') as service:
            service.refund.side_effect = PaymentProviderError()
            response = admin_client.post(url)

        assert response.status_code == status.HTTP_502_BAD_GATEWAY
        stripe_donation.refresh_from_db()
        assert stripe_donation.status == DonationStatus.COMPLETED


# =============================================================================
# Donors, appeals, fundraisers
# =============================================================================

@pytest.mark.django_db
class TestDonors:

    def test_list_with_totals(self, staff_client, stripe_donation, pending_donation):
        response = staff_client.get(reverse('donations:donor-list'))

        assert response.status_code == status.HTTP_200_OK
        row = response.data['results'][0]
        assert row['total_pence'] == 2500
        assert row['donation_count'] == 1

    def test_create_donor(self, staff_client):
        response = staff_client.post(
            reverse('donations:donor-list'),
            {'first_name': 'Omar', 'last_name': 'Farooq', 'email': 'Omar@Example.com'},
            format='json',
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert Donor.objects.get().email == 'omar@example.com'

    def test_viewer_cannot_create_donor(self, viewer_client):
        response = viewer_client.post(
            reverse('donations:donor-list'),
            {'first_name': 'Omar', 'last_name': 'Farooq', 'email': 'omar@example.com'},
            format='json',
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_donor_donations(self, staff_client, donor, stripe_donation, cash_donation):
        url = reverse('donations:donor-donations', kwargs={'pk': donor.id})

        response = staff_client.get(url)

        assert response.data['count'] == 1

    def test_pages_do_not_overlap(self, staff_client, donor, other_donor):
        url = reverse('donations:donor-list')

        first = staff_client.get(url, {'page_size': 1})
        second = staff_client.get(url, {'page_size': 1, 'page': 2})

        emails = [first.data['results'][0]['email'], second.data['results'][0]['email']]
        assert emails == ['bilal@example.com', 'amina@example.com']


@pytest.mark.django_db
class TestAppeals:

    def test_public_list_shows_active_only(self, api_client, appeal):
        Appeal.objects.create(title='Old Appeal', is_active=False)

        response = api_client.get(reverse('donations:appeal-list'))

        assert response.status_code == status.HTTP_200_OK
        assert [row['title'] for row in response.data['results']] == ['Emergency Relief']

    def test_staff_sees_inactive(self, staff_client, appeal):
        Appeal.objects.create(title='Old Appeal', is_active=False)

        response = staff_client.get(reverse('donations:appeal-list'))

        assert response.data['count'] == 2

    def test_create_generates_slug(self, staff_client):
        response = staff_client.post(
            reverse('donations:appeal-list'),
            {'title': 'Winter Appeal'},
            format='json',
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['slug'] == 'winter-appeal'

    def test_anonymous_cannot_create(self, api_client):
        response = api_client.post(reverse('donations:appeal-list'), {'title': 'X'}, format='json')

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_delete_deactivates(self, staff_client, appeal):
        url = reverse('donations:appeal-detail', kwargs={'pk': appeal.id})

        response = staff_client.delete(url)

        assert response.status_code == status.HTTP_204_NO_CONTENT
        appeal.refresh_from_db()
        assert appeal.is_active is False


@pytest.mark.django_db
class TestFundraisers:

    def test_progress(self, staff_client, fundraiser, stripe_donation):
        response = staff_client.get(reverse('donations:fundraiser-list'))

        row = response.data['results'][0]
        assert row['raised_pence'] == 2500
        assert row['progress_percent'] == 2.5
        assert row['appeal_title'] == 'Emergency Relief'


# =============================================================================
# Recurring
# =============================================================================

@pytest.mark.django_db
class TestRecurring:

    def test_list_filter_by_status(self, viewer_client, recurring_donation):
        response = viewer_client.get(reverse('donations:recurring-list'), {'status': 'ACTIVE'})

        assert response.data['count'] == 1
        assert response.data['results'][0]['amount_display'] == '£15.00'

    def test_admin_cancels(self, admin_client, recurring_donation):
        url = reverse('donations:recurring-cancel', kwargs={'pk': recurring_donation.id})

        with patch('apps.donations.services.refunds.StripePaymentService') as service:
            response = admin_client.post(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['status'] == RecurringStatus.CANCELLED
        service.cancel_subscription.assert_called_once_with('sub_live123')

    def test_cancel_twice_conflicts(self, admin_client, recurring_donation):
        recurring_donation.status = RecurringStatus.CANCELLED
        recurring_donation.save()
        url = reverse('donations:recurring-cancel', kwargs={'pk': recurring_donation.id})

        response = admin_client.post(url)

        assert response.status_code == status.HTTP_409_CONFLICT

    def test_viewer_cannot_cancel(self, viewer_client, recurring_donation):
        url = reverse('donations:recurring-cancel', kwargs={'pk': recurring_donation.id})

        response = viewer_client.post(url)

        assert response.status_code == status.HTTP_403_FORBIDDEN
