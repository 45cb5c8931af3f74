"""
Water project and sponsorship fulfillment.

Handles the lifecycle of a project donation after payment:
review -> ordered -> complete, with a completion report (exactly four
photos, optional text, PDF and Drive links) emailed to the donor.
"""

import logging
from smtplib import SMTPException
from typing import List, Optional

from django.db import transaction
from django.utils import timezone

from apps.accounts.models import User
from apps.donations.models import CollectionSource, Donor, DonationType, PaymentMethod
from apps.donations.services import generate_donation_number
from apps.projects.models import ProjectDonationStatus, SponsorshipProject

from .emails import send_project_completion_email, send_project_donation_email
from .exceptions import (
    CountryMismatchError,
    InvalidCompletionError,
    InvalidStatusTransitionError,
    PriceMismatchError,
)


logger = logging.getLogger(__name__)

REQUIRED_COMPLETION_IMAGES = 4

# Statuses staff may set directly; COMPLETE goes through complete_donation().
EDITABLE_STATUSES = (
    ProjectDonationStatus.WAITING_TO_REVIEW,
    ProjectDonationStatus.ORDERED,
    ProjectDonationStatus.PENDING,
)

CLOSED_STATUSES = (
    ProjectDonationStatus.FAILED,
    ProjectDonationStatus.REFUNDED,
)


def validate_country_for_project(*, project, country, amount_pence: int) -> None:
    """
    Check a country/price selection against a project.

    Raises:
        CountryMismatchError: If the country is for another project type.
        PriceMismatchError: If the amount is not the country's price.
    """
    label = 'Sponsorship' if isinstance(project, SponsorshipProject) else 'Water project'
    if country.project_type != project.project_type:
        raise CountryMismatchError(f'{label} country does not match project type')
    if amount_pence != country.price_pence:
        raise PriceMismatchError(f'{label} amount does not match selected country price')


def create_project_donation(
    *,
    model,
    project,
    country,
    donor: Donor,
    amount_pence: int,
    donation_type: str = DonationType.GENERAL,
    payment_method: str = PaymentMethod.WEBSITE_STRIPE,
    collected_via: str = CollectionSource.WEBSITE,
    gift_aid: bool = False,
    donation_number: Optional[str] = None,
    status: str = ProjectDonationStatus.PENDING,
    plaque_name: str = '',
    notes: str = '',
    fundraiser=None,
    added_by: Optional[User] = None
):
    """
    Create a water or sponsorship donation after checking country and price.

    ``model`` is WaterProjectDonation or SponsorshipDonation. A donation
    number is generated when none is given (offline entries).
    """
    validate_country_for_project(project=project, country=country, amount_pence=amount_pence)

    return model.objects.create(
        **{model.project_field: project},
        country=country,
        donor=donor,
        amount_pence=amount_pence,
        donation_type=donation_type,
        payment_method=payment_method,
        collected_via=collected_via,
        gift_aid=gift_aid,
        donation_number=donation_number or generate_donation_number(),
        status=status,
        plaque_name=plaque_name,
        notes=notes,
        fundraiser=fundraiser,
        added_by=added_by,
    )


def update_donation(*, donation, status: Optional[str] = None, notes: Optional[str] = None):
    """
    Update status and/or notes from the back office.

    Raises:
        InvalidStatusTransitionError: For COMPLETE (use complete_donation)
            or when the donation is failed/refunded.
    """
    with transaction.atomic():
        donation = type(donation).objects.select_for_update().get(pk=donation.pk)
        update_fields = ['updated_at']

        if status is not None:
            if status not in EDITABLE_STATUSES:
                raise InvalidStatusTransitionError(
                    'Use the complete action to mark a donation as complete.'
                    if status == ProjectDonationStatus.COMPLETE
                    else f'Status cannot be set to {status}.'
                )
            if donation.status in CLOSED_STATUSES:
                raise InvalidStatusTransitionError(
                    f'Donation is {donation.get_status_display().lower()} and cannot be updated.'
                )
            donation.status = status
            update_fields.append('status')

        if notes is not None:
            donation.notes = notes
            update_fields.append('notes')

        donation.save(update_fields=update_fields)
    return donation


def complete_donation(
    *,
    donation,
    images: List[str],
    report: str = '',
    report_pdf: Optional[str] = None,
    drive_link: Optional[str] = None
):
    """
    Mark a project donation COMPLETE and email the completion report.

    The email is best-effort: if sending fails the donation stays complete
    with ``report_sent=False`` so staff can resend.

    Raises:
        InvalidCompletionError: If ``images`` does not hold exactly 4 URLs.
        InvalidStatusTransitionError: If the donation is failed/refunded.
    """
    if len(images) != REQUIRED_COMPLETION_IMAGES:
        raise InvalidCompletionError(f'Exactly {REQUIRED_COMPLETION_IMAGES} images are required')

    with transaction.atomic():
        donation = type(donation).objects.select_for_update().get(pk=donation.pk)
        if donation.status in CLOSED_STATUSES:
            raise InvalidStatusTransitionError(
                f'Donation is {donation.get_status_display().lower()} and cannot be completed.'
            )

        donation.status = ProjectDonationStatus.COMPLETE
        donation.completed_at = timezone.now()
        donation.completion_images = list(images)
        donation.completion_report = report or ''
        donation.completion_report_pdf = report_pdf or ''
        donation.google_drive_link = drive_link or ''
        donation.save()

    logger.info('%s %s marked complete', type(donation).__name__, donation.id)

    try:
        send_project_completion_email(donation)
    except (SMTPException, OSError):
        logger.exception('Error sending completion email for %s', donation.id)
    else:
        donation.report_sent = True
        donation.save(update_fields=['report_sent', 'updated_at'])

    return donation


def send_donation_receipt(donation) -> bool:
    """Send the "thank you" email once; returns whether it was sent."""
    if donation.email_sent:
        return False
    try:
        send_project_donation_email(donation)
    except (SMTPException, OSError):
        logger.exception('Error sending project donation email for %s', donation.id)
        return False
    donation.email_sent = True
    donation.save(update_fields=['email_sent', 'updated_at'])
    return True
