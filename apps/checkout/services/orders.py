"""
Order creation.

The server is authoritative for money: subtotals and fees are recomputed
from the submitted items with ``split_fees`` and a client total that does
not match is rejected, as is a mismatching subtotal or fee. One order
produces:

    - an ``Order`` with one ``OrderItem`` per basket line
    - a PENDING ``Donation`` per appeal line
    - a PENDING ``RecurringDonation`` per MONTHLY/YEARLY appeal line
    - a PENDING water/sponsorship donation per project line

Payment objects are created afterwards by ``start_payment``.
"""

import logging
from typing import List, Optional, Tuple

from django.db import transaction

from apps.checkout.exceptions import (
    EmptyBasketError,
    ExpressCheckoutUnavailableError,
    InvalidOrderItemError,
    PaymentProviderError,
    TotalsMismatchError,
)
from apps.checkout.models import Order, OrderItem, OrderStatus
from apps.donations.models import (
    CollectionSource,
    Donation,
    DonationStatus,
    Donor,
    Frequency,
    PaymentMethod,
    RecurringDonation,
    RecurringStatus,
)
from apps.donations.services import generate_donation_number
from apps.projects.models import SponsorshipDonation, WaterProjectDonation
from apps.projects.services import create_project_donation

from .fees import FeeSplit, apportion, split_fees
from .payments import StripePaymentService, WalletCapabilities


logger = logging.getLogger(__name__)

EXPRESS_FIRST_NAME = 'Express'
EXPRESS_LAST_NAME = 'Donor'

DONOR_FIELDS = ('title', 'phone', 'address', 'city', 'postcode', 'country')


def _is_recurring(item: dict) -> bool:
    return item.get('frequency') in (Frequency.MONTHLY, Frequency.YEARLY)


def _validate_items(items: List[dict]) -> None:
    """
    Check each line references exactly one target, consistently.

    Raises:
        EmptyBasketError: If there are no items.
        InvalidOrderItemError: On a missing/ambiguous target, inactive
            appeal, unsupported frequency or a recurring project line.
    """
    if not items:
        raise EmptyBasketError('Your basket is empty.')

    for item in items:
        targets = [
            key for key in ('appeal', 'water_project', 'sponsorship_project')
            if item.get(key) is not None
        ]
        if len(targets) != 1:
            raise InvalidOrderItemError(
                'Each item must reference exactly one appeal, water project or sponsorship.'
            )

        if item.get('water_project') is not None and item.get('water_project_country') is None:
            raise InvalidOrderItemError('Water project item is missing required information')
        if item.get('sponsorship_project') is not None and item.get('sponsorship_country') is None:
            raise InvalidOrderItemError('Sponsorship item is missing required information')

        appeal = item.get('appeal')
        if appeal is not None:
            if not appeal.is_active:
                raise InvalidOrderItemError(f'"{appeal.title}" is no longer accepting donations.')
            if not appeal.allows_frequency(item.get('frequency')):
                raise InvalidOrderItemError(
                    f'"{appeal.title}" does not accept {item["frequency"].lower()} donations.'
                )
        elif _is_recurring(item):
            raise InvalidOrderItemError('Project donations can only be one-off.')


def split_for_items(items: List[dict], cover_fees: bool) -> FeeSplit:
    one_off = sum(item['amount_pence'] for item in items if not _is_recurring(item))
    recurring = sum(item['amount_pence'] for item in items if _is_recurring(item))
    return split_fees(one_off, recurring, cover_fees)


def _upsert_donor(details: dict, *, keep_existing_name: bool = False) -> Donor:
    """Get the donor by email (case-insensitive) and refresh non-empty fields."""
    email = details['email'].strip().lower()
    donor = Donor.objects.filter(email__iexact=email).first()

    if donor is None:
        return Donor.objects.create(
            email=email,
            first_name=details.get('first_name') or EXPRESS_FIRST_NAME,
            last_name=details.get('last_name') or EXPRESS_LAST_NAME,
            **{field: details.get(field) or '' for field in DONOR_FIELDS if field != 'country'},
            country=details.get('country') or 'GB',
        )

    if not keep_existing_name:
        donor.first_name = details.get('first_name') or donor.first_name
        donor.last_name = details.get('last_name') or donor.last_name
    for field in DONOR_FIELDS:
        value = details.get(field)
        if value:
            setattr(donor, field, value)
    donor.save()
    return donor


def create_order(
    *,
    items: List[dict],
    donor_details: dict,
    client_subtotal_pence: Optional[int] = None,
    client_fees_pence: Optional[int] = None,
    client_total_pence: Optional[int] = None,
    is_express: bool = False
) -> Tuple[Order, FeeSplit]:
    """
    Create an order and its pending donation records.

    Args:
        items: Validated basket lines (model instances for appeal,
            fundraiser, projects and countries).
        donor_details: Validated donor fields plus ``gift_aid``,
            ``cover_fees``, ``marketing_email`` and ``marketing_sms``.
        client_subtotal_pence: Subtotal the donor saw; must match the server.
        client_fees_pence: Fees the donor saw; must match the server.
        client_total_pence: Total the donor saw; must match the server.
        is_express: Wallet checkout with only an email address.

    Returns:
        tuple: (Order, FeeSplit)

    Raises:
        EmptyBasketError, InvalidOrderItemError, TotalsMismatchError,
        ProjectsServiceError (country/price mismatch).
    """
    _validate_items(items)

    cover_fees = bool(donor_details.get('cover_fees'))
    split = split_for_items(items, cover_fees)

    for name, client_value, server_value in (
        ('subtotal', client_subtotal_pence, split.subtotal_pence),
        ('fees', client_fees_pence, split.fees_pence),
        ('total', client_total_pence, split.total_pence),
    ):
        if client_value is not None and client_value != server_value:
            raise TotalsMismatchError(
                f'Order {name} does not match: expected {server_value}p, got {client_value}p.'
            )

    order_number = generate_donation_number()
    gift_aid = bool(donor_details.get('gift_aid')) and not is_express

    with transaction.atomic():
        donor = _upsert_donor(donor_details, keep_existing_name=is_express)

        order = Order.objects.create(
            order_number=order_number,
            status=OrderStatus.PENDING,
            subtotal_pence=split.subtotal_pence,
            fees_pence=split.fees_pence,
            total_pence=split.total_pence,
            one_off_total_pence=split.one_off_total_pence,
            recurring_total_pence=split.recurring_total_pence,
            cover_fees=cover_fees,
            gift_aid=gift_aid,
            marketing_email=bool(donor_details.get('marketing_email')),
            marketing_sms=bool(donor_details.get('marketing_sms')),
            is_express=is_express,
            donor=donor,
            donor_title=donor_details.get('title') or '',
            donor_first_name=donor_details.get('first_name') or donor.first_name,
            donor_last_name=donor_details.get('last_name') or donor.last_name,
            donor_email=donor.email,
            donor_phone=donor_details.get('phone') or '',
            donor_address=donor_details.get('address') or '',
            donor_city=donor_details.get('city') or '',
            donor_postcode=donor_details.get('postcode') or '',
            donor_country=donor_details.get('country') or '',
        )

        for item in items:
            _create_item_records(order=order, donor=donor, item=item, gift_aid=gift_aid)

    logger.info(
        'Order %s created: %s items, total %sp (fees %sp)',
        order.order_number, len(items), split.total_pence, split.fees_pence
    )
    return order, split


def _create_item_records(*, order: Order, donor: Donor, item: dict, gift_aid: bool) -> OrderItem:
    order_item = OrderItem(
        order=order,
        appeal=item.get('appeal'),
        fundraiser=item.get('fundraiser'),
        water_project=item.get('water_project'),
        water_project_country=item.get('water_project_country'),
        sponsorship_project=item.get('sponsorship_project'),
        sponsorship_country=item.get('sponsorship_country'),
        appeal_title=item['appeal_title'],
        product_name=item.get('product_name') or '',
        frequency=item['frequency'],
        donation_type=item['donation_type'],
        amount_pence=item['amount_pence'],
        plaque_name=item.get('plaque_name') or '',
    )

    if order_item.appeal is not None:
        order_item.donation = Donation.objects.create(
            donor=donor,
            appeal=order_item.appeal,
            fundraiser=order_item.fundraiser,
            product_name=order_item.product_name,
            amount_pence=order_item.amount_pence,
            donation_type=order_item.donation_type,
            frequency=order_item.frequency,
            payment_method=PaymentMethod.WEBSITE_STRIPE,
            collected_via=CollectionSource.WEBSITE,
            status=DonationStatus.PENDING,
            gift_aid=gift_aid,
            order_number=order.order_number,
        )
        if order_item.is_recurring:
            order_item.recurring_donation = RecurringDonation.objects.create(
                donor=donor,
                appeal=order_item.appeal,
                product_name=order_item.product_name,
                amount_pence=order_item.amount_pence,
                donation_type=order_item.donation_type,
                frequency=order_item.frequency,
                payment_method=PaymentMethod.WEBSITE_STRIPE,
                status=RecurringStatus.PENDING,
                gift_aid=gift_aid,
                order_number=order.order_number,
            )
    elif order_item.water_project is not None:
        create_project_donation(
            model=WaterProjectDonation,
            project=order_item.water_project,
            country=order_item.water_project_country,
            donor=donor,
            amount_pence=order_item.amount_pence,
            donation_type=order_item.donation_type,
            gift_aid=gift_aid,
            donation_number=order.order_number,
            plaque_name=order_item.plaque_name,
            fundraiser=order_item.fundraiser,
        )
    else:
        create_project_donation(
            model=SponsorshipDonation,
            project=order_item.sponsorship_project,
            country=order_item.sponsorship_country,
            donor=donor,
            amount_pence=order_item.amount_pence,
            donation_type=order_item.donation_type,
            gift_aid=gift_aid,
            donation_number=order.order_number,
            fundraiser=order_item.fundraiser,
        )

    order_item.save()
    return order_item


def ensure_express_allowed(*, items: List[dict], wallet: WalletCapabilities) -> None:
    """
    Express (wallet) checkout is one-off only and needs an available wallet.

    Raises:
        ExpressCheckoutUnavailableError
    """
    if any(_is_recurring(item) for item in items):
        raise ExpressCheckoutUnavailableError(
            'Express checkout is only available for one-off donations.'
        )
    if not wallet.any_available:
        raise ExpressCheckoutUnavailableError('No express payment method is available.')


def mark_order_failed(order: Order) -> None:
    """Fail an order and its pending donations (payment could not start or was declined)."""
    with transaction.atomic():
        Order.objects.filter(pk=order.pk, status=OrderStatus.PENDING).update(status=OrderStatus.FAILED)
        Donation.objects.filter(
            order_number=order.order_number,
            status=DonationStatus.PENDING,
        ).update(status=DonationStatus.FAILED)
        RecurringDonation.objects.filter(
            order_number=order.order_number,
            status=RecurringStatus.PENDING,
        ).update(status=RecurringStatus.FAILED)
    order.status = OrderStatus.FAILED
    logger.info('Order %s marked failed', order.order_number)


def start_payment(*, order: Order) -> dict:
    """
    Create the Stripe objects for an order.

    One PaymentIntent covers every one-off line (plus its fee share); each
    recurring line gets its own subscription, with the recurring fee
    apportioned across them.

    Returns:
        dict: ``payment_intent`` ({id, client_secret} or None) and
        ``subscriptions`` (list of {order_item_id, subscription_id,
        client_secret}).

    Raises:
        PaymentProviderError: Stripe failed; the order is marked FAILED.
    """
    result = {'payment_intent': None, 'subscriptions': []}
    recurring_items = [item for item in order.items.all() if item.is_recurring]

    try:
        customer_id = StripePaymentService.get_or_create_customer(
            email=order.donor_email,
            name=order.donor_name,
        )
        order.stripe_customer_id = customer_id

        if order.one_off_total_pence > 0:
            intent = StripePaymentService.create_payment_intent(
                amount_pence=order.one_off_total_pence,
                order_number=order.order_number,
                email=order.donor_email,
                customer_id=customer_id,
            )
            order.payment_intent_id = intent.id
            result['payment_intent'] = {'id': intent.id, 'client_secret': intent.client_secret}

        recurring_fees = order.recurring_total_pence - sum(item.amount_pence for item in recurring_items)
        fee_shares = apportion(recurring_fees, [item.amount_pence for item in recurring_items])

        for item, fee_share in zip(recurring_items, fee_shares):
            subscription = StripePaymentService.create_subscription(
                customer_id=customer_id,
                amount_pence=item.amount_pence + fee_share,
                frequency=item.frequency,
                product_name=item.display_title,
                order_number=order.order_number,
            )
            item.subscription_id = subscription.id
            item.save(update_fields=['subscription_id'])
            if item.recurring_donation_id:
                RecurringDonation.objects.filter(pk=item.recurring_donation_id).update(
                    subscription_id=subscription.id
                )
            result['subscriptions'].append({
                'order_item_id': str(item.id),
                'subscription_id': subscription.id,
                'client_secret': subscription.client_secret,
            })
    except PaymentProviderError:
        mark_order_failed(order)
        raise

    order.save(update_fields=['stripe_customer_id', 'payment_intent_id', 'updated_at'])
    return result
