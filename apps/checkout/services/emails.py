"""Donor confirmation email for completed orders."""

from django.conf import settings
from django.core.mail import send_mail

from apps.donations.formatting import format_currency, format_enum


def send_donation_confirmation(order):
    items = list(order.items.all())
    lines = [
        f'Dear {order.donor_first_name},',
        '',
        'Thank you for your donation. Your reference is '
        f'{order.order_number}.',
        '',
    ]
    for item in items:
        lines.append(
            f'  {item.display_title}: {format_currency(item.amount_pence)} '
            f'({format_enum(item.frequency)})'
        )
    if order.fees_pence:
        lines.append(f'  Processing fees: {format_currency(order.fees_pence)}')
    lines += ['', f'Total: {format_currency(order.total_pence)}']
    if order.gift_aid:
        lines += ['', 'You have chosen to add Gift Aid. Thank you.']
    if any(item.is_recurring for item in items):
        lines += ['', f'To manage your regular giving, contact us via {settings.SITE_URL}.']

    send_mail(
        subject=f'Thank you for your donation ({order.order_number})',
        message='\n'.join(lines),
        from_email=settings.DEFAULT_FROM_EMAIL,
        recipient_list=[order.donor_email],
    )
