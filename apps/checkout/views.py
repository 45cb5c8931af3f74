import logging

from django.conf import settings
from django.shortcuts import get_object_or_404
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from apps.donations.services import DonationNumberUnavailableError
from apps.projects.services import ProjectsServiceError

from .exceptions import (
    BasketItemNotFoundError,
    CheckoutServiceError,
    OrderNotFoundError,
)
from .models import Order
from .serializers import (
    BasketAddSerializer,
    BasketItemSerializer,
    BasketQuerySerializer,
    BasketSerializer,
    BasketUpdateSerializer,
    CheckoutInputSerializer,
    CheckoutResponseSerializer,
    ConfirmPaymentInputSerializer,
    ExpressCheckoutInputSerializer,
    FeeQuerySerializer,
    FeeSplitSerializer,
    OrderSerializer,
)
from .services import BasketItem, BasketStore, StripePaymentService, WalletCapabilities, split_fees
from .services.finalize import confirm_payment
from .services.orders import create_order, ensure_express_allowed, start_payment
from .services.webhooks import handle_event


logger = logging.getLogger(__name__)


def _basket_item_from_validated(data: dict) -> BasketItem:
    def pk(key):
        obj = data.get(key)
        return str(obj.pk) if obj is not None else None

    return BasketItem(
        appeal_title=data['appeal_title'],
        amount_pence=data['amount_pence'],
        frequency=data['frequency'],
        donation_type=data['donation_type'],
        product_name=data.get('product_name') or '',
        appeal_id=pk('appeal'),
        fundraiser_id=pk('fundraiser'),
        water_project_id=pk('water_project'),
        water_project_country_id=pk('water_project_country'),
        sponsorship_project_id=pk('sponsorship_project'),
        sponsorship_country_id=pk('sponsorship_country'),
        plaque_name=data.get('plaque_name') or '',
    )


def _basket_payload(basket, cover_fees=None) -> dict:
    return {
        'items': [item.to_dict() for item in basket.items],
        'cover_fees': basket.cover_fees if cover_fees is None else cover_fees,
        'summary': basket.summary(cover_fees=cover_fees).to_dict(),
    }


def _checkout_response(order, split) -> Response:
    """Start payment for a freshly created order."""
    payment = start_payment(order=order)
    data = {
        'order_number': order.order_number,
        'totals': split.to_dict(),
        'payment_intent': payment['payment_intent'],
        'subscriptions': payment['subscriptions'],
        'publishable_key': settings.STRIPE_PUBLISHABLE_KEY,
    }
    return Response(data, status=status.HTTP_201_CREATED)


# =============================================================================
# Basket
# =============================================================================

@extend_schema(
    methods=['GET'],
    tags=['checkout'],
    parameters=[OpenApiParameter('cover_fees', bool, required=False)],
    responses={200: BasketSerializer},
)
@extend_schema(
    methods=['PATCH'],
    tags=['checkout'],
    request=BasketUpdateSerializer,
    responses={200: BasketSerializer},
)
@extend_schema(methods=['DELETE'], tags=['checkout'], responses={204: None})
@api_view(['GET', 'PATCH', 'DELETE'])
@permission_classes([AllowAny])
def basket(request):
    """Get the session basket with its fee summary, save the cover-fees choice, or clear it."""
    if request.method == 'DELETE':
        BasketStore.clear(request.session)
        return Response(status=status.HTTP_204_NO_CONTENT)

    current = BasketStore.load(request.session)

    if request.method == 'PATCH':
        serializer = BasketUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        current.cover_fees = serializer.validated_data['cover_fees']
        BasketStore.save(request.session, current)
        return Response(_basket_payload(current))

    query = BasketQuerySerializer(data=request.query_params)
    query.is_valid(raise_exception=True)

    return Response(_basket_payload(current, query.validated_data.get('cover_fees')))


@extend_schema(
    tags=['checkout'],
    request=BasketAddSerializer,
    responses={201: BasketItemSerializer},
)
@api_view(['POST'])
@permission_classes([AllowAny])
def basket_items(request):
    """Add a line item to the session basket."""
    serializer = BasketAddSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    current = BasketStore.load(request.session)
    item = current.add(_basket_item_from_validated(serializer.validated_data))
    BasketStore.save(request.session, current)

    return Response(item.to_dict(), status=status.HTTP_201_CREATED)


@extend_schema(tags=['checkout'], responses={204: None})
@api_view(['DELETE'])
@permission_classes([AllowAny])
def basket_item_detail(request, item_id):
    """Remove a line item from the session basket."""
    current = BasketStore.load(request.session)
    if not current.remove(item_id):
        raise BasketItemNotFoundError()
    BasketStore.save(request.session, current)
    return Response(status=status.HTTP_204_NO_CONTENT)


@extend_schema(
    tags=['checkout'],
    request=FeeQuerySerializer,
    responses={200: FeeSplitSerializer},
)
@api_view(['POST'])
@permission_classes([AllowAny])
def fees(request):
    """Fee split for the given one-off and recurring subtotals."""
    serializer = FeeQuerySerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    split = split_fees(
        serializer.validated_data['one_off_subtotal_pence'],
        serializer.validated_data['recurring_subtotal_pence'],
        serializer.validated_data['cover_fees'],
    )
    return Response(split.to_dict())


# =============================================================================
# Checkout
# =============================================================================

@extend_schema(
    tags=['checkout'],
    request=CheckoutInputSerializer,
    responses={201: CheckoutResponseSerializer},
)
@api_view(['POST'])
@permission_classes([AllowAny])
def checkout(request):
    """
    Create an order and start payment.

    The server recomputes every total; a client total that differs is
    rejected with 400.
    """
    serializer = CheckoutInputSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    try:
        order, split = create_order(
            items=data['items'],
            donor_details=data['donor'],
            client_subtotal_pence=data['subtotal_pence'],
            client_fees_pence=data['fees_pence'],
            client_total_pence=data['total_pence'],
        )
    except (CheckoutServiceError, ProjectsServiceError) as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    except DonationNumberUnavailableError as e:
        return Response({'error': str(e)}, status=status.HTTP_503_SERVICE_UNAVAILABLE)

    return _checkout_response(order, split)


@extend_schema(
    tags=['checkout'],
    request=ExpressCheckoutInputSerializer,
    responses={201: CheckoutResponseSerializer},
)
@api_view(['POST'])
@permission_classes([AllowAny])
def express_checkout(request):
    """Wallet checkout (Apple Pay, Google Pay, Link) for one-off baskets."""
    serializer = ExpressCheckoutInputSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    try:
        ensure_express_allowed(
            items=data['items'],
            wallet=WalletCapabilities.from_result(data.get('wallet')),
        )
        order, split = create_order(
            items=data['items'],
            donor_details={'email': data['email'], 'cover_fees': data['cover_fees']},
            client_total_pence=data.get('total_pence'),
            is_express=True,
        )
    except (CheckoutServiceError, ProjectsServiceError) as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    except DonationNumberUnavailableError as e:
        return Response({'error': str(e)}, status=status.HTTP_503_SERVICE_UNAVAILABLE)

    return _checkout_response(order, split)


@extend_schema(
    tags=['checkout'],
    request=ConfirmPaymentInputSerializer,
    responses={200: OrderSerializer},
)
@api_view(['POST'])
@permission_classes([AllowAny])
def confirm(request):
    """Confirm a payment after the browser returns from Stripe."""
    serializer = ConfirmPaymentInputSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    try:
        order = confirm_payment(
            order_number=data['order_number'],
            payment_intent_id=data.get('payment_intent_id') or None,
            subscription_id=data.get('subscription_id') or None,
        )
    except OrderNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    except CheckoutServiceError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    BasketStore.clear(request.session)
    return Response(OrderSerializer(order).data)


@extend_schema(tags=['checkout'], responses={200: OrderSerializer})
@api_view(['GET'])
@permission_classes([AllowAny])
def order_status(request, order_number):
    """Order status for the success page."""
    order = get_object_or_404(Order.objects.prefetch_related('items'), order_number=order_number)
    return Response(OrderSerializer(order).data)


@extend_schema(tags=['checkout'], request=None, responses={200: None})
@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
def stripe_webhook(request):
    """Stripe webhook endpoint; the signature is verified before anything else."""
    event = StripePaymentService.construct_event(
        request.body,
        request.META.get('HTTP_STRIPE_SIGNATURE'),
    )
    outcome = handle_event(event)
    return Response({'received': True, 'outcome': outcome})
