"""Display helpers shared by emails, reports and CSV exports."""

from apps.donations.models import CollectionSource, PaymentMethod


LEGACY_PAYMENT_METHODS = {
    'STRIPE': 'Website (Stripe)',
    'CARD': 'Card (SumUp)',
    'PAYPAL': 'Website (Stripe)',
    'OTHER': 'Other',
}


def format_currency(amount_pence) -> str:
    """``123456`` -> ``'£1,234.56'``."""
    pence = int(amount_pence or 0)
    sign = '-' if pence < 0 else ''
    return f'{sign}£{abs(pence) / 100:,.2f}'


def format_enum(value) -> str:
    """``'WATER_PUMP'`` -> ``'Water Pump'``."""
    if not value:
        return ''
    return ' '.join(word.capitalize() for word in str(value).split('_'))


def format_payment_method(value) -> str:
    if not value:
        return ''
    if value in PaymentMethod.values:
        return PaymentMethod(value).label
    return LEGACY_PAYMENT_METHODS.get(value, format_enum(value))


def format_collection_source(value) -> str:
    if not value:
        return ''
    if value in CollectionSource.values:
        return CollectionSource(value).label
    return format_enum(value)


def format_date(value) -> str:
    if not value:
        return '-'
    return value.strftime('%d/%m/%Y')


def format_datetime(value) -> str:
    if not value:
        return '-'
    return value.strftime('%d/%m/%Y %H:%M')


def format_donor_name(donor) -> str:
    if donor is None:
        return 'Unknown donor'
    parts = [donor.title] if donor.title else []
    parts.extend([donor.first_name, donor.last_name])
    return ' '.join(part for part in parts if part)


def format_staff_name(user) -> str:
    """Name of the staff member who recorded an entry ('' if none)."""
    if user is None:
        return ''
    name = ' '.join(part for part in [user.first_name, user.last_name] if part).strip()
    return name or '-'
