"""Donor emails for water and sponsorship donations."""

from django.conf import settings
from django.core.mail import send_mail

from apps.donations.formatting import format_currency, format_enum


def _project_label(donation) -> str:
    project = donation.project
    label = format_enum(project.project_type)
    if project.location:
        label = f'{label} ({project.location})'
    return label


def send_project_donation_email(donation):
    """Thank the donor and explain what happens next."""
    donor = donation.donor
    lines = [
        f'Dear {donor.first_name},',
        '',
        f'Thank you for your {format_enum(donation.donation_type)} donation of '
        f'{format_currency(donation.amount_pence)} towards a {_project_label(donation)} '
        f'in {donation.country.country}.',
    ]
    if donation.plaque_name:
        lines.append(f'Plaque name: {donation.plaque_name}')
    lines += [
        '',
        'We will send you photos and a report once the project is complete.',
        '',
        f'Reference: {donation.donation_number}',
    ]
    send_mail(
        subject=f'Thank you for your {format_enum(donation.project.project_type)} donation',
        message='\n'.join(lines),
        from_email=settings.DEFAULT_FROM_EMAIL,
        recipient_list=[donor.email],
    )


def send_project_completion_email(donation):
    """Send the completion report: photos, report text and optional links."""
    donor = donation.donor
    lines = [
        f'Dear {donor.first_name},',
        '',
        f'Your {_project_label(donation)} in {donation.country.country} is complete.',
    ]
    if donation.completion_report:
        lines += ['', donation.completion_report]
    lines += ['', 'Photos:']
    lines += [f'  {url}' for url in donation.completion_images]
    if donation.completion_report_pdf:
        lines += ['', f'Full report (PDF): {donation.completion_report_pdf}']
    if donation.google_drive_link:
        lines += [f'More photos and videos: {donation.google_drive_link}']
    lines += ['', 'Thank you for your generosity.']

    send_mail(
        subject=f'Your {format_enum(donation.project.project_type)} project is complete',
        message='\n'.join(lines),
        from_email=settings.DEFAULT_FROM_EMAIL,
        recipient_list=[donor.email],
    )
