from drf_spectacular.utils import extend_schema, extend_schema_view
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.pagination import PageNumberPagination
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from apps.accounts.permissions import CanManageRecords, IsAdminRole, IsBackOfficeUser

from .models import Appeal, Donation, RecurringDonation
from .serializers import (
    AppealSerializer,
    DonationSerializer,
    DonorSerializer,
    FundraiserSerializer,
    RecurringDonationSerializer,
)
from .services import (
    cancel_recurring_donation,
    fundraisers_with_totals,
    refund_donation,
    search_donations,
    search_donors,
    search_recurring,
    # Exceptions
    NotCancellableError,
    NotRefundableError,
)


class DonationPagination(PageNumberPagination):
    """Custom pagination for back-office lists."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


@extend_schema_view(
    list=extend_schema(tags=['donations']),
    retrieve=extend_schema(tags=['donations']),
)
class DonationViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Donations (online and offline).

    list: Filtered, paginated donations
    retrieve: One donation
    refund: Refund a completed donation (admin only)
    """

    queryset = Donation.objects.select_related('donor', 'appeal', 'fundraiser')
    serializer_class = DonationSerializer
    permission_classes = [IsBackOfficeUser]
    pagination_class = DonationPagination

    def get_queryset(self):
        """
        Filter donations based on query parameters.

        Filters:
        - search: Donor name/email, order number, transaction id
        - status, payment_method, donation_type, collected_via, frequency
        - appeal, fundraiser: by id
        - gift_aid: true/false
        - start, end: created_at date range (YYYY-MM-DD)
        """
        params = self.request.query_params
        return search_donations(
            search=params.get('search'),
            status=params.get('status'),
            payment_method=params.get('payment_method'),
            donation_type=params.get('donation_type'),
            collected_via=params.get('collected_via'),
            frequency=params.get('frequency'),
            appeal=params.get('appeal'),
            fundraiser=params.get('fundraiser'),
            gift_aid=params.get('gift_aid'),
            start=params.get('start'),
            end=params.get('end'),
        )

    @extend_schema(tags=['donations'], request=None, responses={200: DonationSerializer})
    @action(detail=True, methods=['post'], permission_classes=[IsAdminRole])
    def refund(self, request, pk=None):
        """Refund a completed donation (through Stripe for website payments)."""
        try:
            donation = refund_donation(donation_id=pk, user=request.user)
        except Donation.DoesNotExist:
            return Response({'error': 'Donation not found'}, status=status.HTTP_404_NOT_FOUND)
        except NotRefundableError as e:
            return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)

        return Response(DonationSerializer(donation).data)


@extend_schema_view(
    list=extend_schema(tags=['donations']),
    retrieve=extend_schema(tags=['donations']),
    create=extend_schema(tags=['donations']),
    update=extend_schema(tags=['donations']),
    partial_update=extend_schema(tags=['donations']),
)
class DonorViewSet(mixins.ListModelMixin,
                   mixins.RetrieveModelMixin,
                   mixins.CreateModelMixin,
                   mixins.UpdateModelMixin,
                   viewsets.GenericViewSet):
    """Donor records. Donors are never deleted (donations protect them)."""

    serializer_class = DonorSerializer
    permission_classes = [CanManageRecords]
    pagination_class = DonationPagination

    def get_queryset(self):
        params = self.request.query_params
        return search_donors(
            search=params.get('search'),
            city=params.get('city'),
            country=params.get('country'),
        )

    @extend_schema(tags=['donations'], responses={200: DonationSerializer(many=True)})
    @action(detail=True, methods=['get'])
    def donations(self, request, pk=None):
        """All donations by this donor."""
        donor = self.get_object()
        queryset = donor.donations.select_related('appeal', 'fundraiser')
        page = self.paginate_queryset(queryset)
        serializer = DonationSerializer(page, many=True)
        return self.get_paginated_response(serializer.data)


@extend_schema_view(
    list=extend_schema(tags=['donations']),
    retrieve=extend_schema(tags=['donations']),
    create=extend_schema(tags=['donations']),
    update=extend_schema(tags=['donations']),
    partial_update=extend_schema(tags=['donations']),
    destroy=extend_schema(tags=['donations']),
)
class AppealViewSet(viewsets.ModelViewSet):
    """
    Appeals.

    Active appeals are readable by anyone (the donation form lists them);
    everything else needs a back-office account.
    """

    serializer_class = AppealSerializer
    pagination_class = DonationPagination

    def get_queryset(self):
        user = self.request.user
        if user and user.is_authenticated:
            return Appeal.objects.all()
        return Appeal.objects.filter(is_active=True)

    def get_permissions(self):
        """Set permissions based on action."""
        if self.action in ['list', 'retrieve']:
            return [AllowAny()]
        return [CanManageRecords()]

    def destroy(self, request, *args, **kwargs):
        """Deactivate instead of deleting; donations keep their appeal."""
        appeal = self.get_object()
        appeal.is_active = False
        appeal.save(update_fields=['is_active', 'updated_at'])
        return Response(status=status.HTTP_204_NO_CONTENT)


@extend_schema_view(
    list=extend_schema(tags=['donations']),
    retrieve=extend_schema(tags=['donations']),
    create=extend_schema(tags=['donations']),
    update=extend_schema(tags=['donations']),
    partial_update=extend_schema(tags=['donations']),
)
class FundraiserViewSet(mixins.ListModelMixin,
                        mixins.RetrieveModelMixin,
                        mixins.CreateModelMixin,
                        mixins.UpdateModelMixin,
                        viewsets.GenericViewSet):
    """Fundraising pages with their progress towards target."""

    serializer_class = FundraiserSerializer
    permission_classes = [CanManageRecords]
    pagination_class = DonationPagination

    def get_queryset(self):
        queryset = fundraisers_with_totals()
        appeal = self.request.query_params.get('appeal')
        if appeal:
            queryset = queryset.filter(appeal_id=appeal)
        return queryset


@extend_schema_view(
    list=extend_schema(tags=['donations']),
    retrieve=extend_schema(tags=['donations']),
)
class RecurringDonationViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Recurring (subscription) donations.

    cancel: Cancel the subscription (admin only)
    """

    serializer_class = RecurringDonationSerializer
    permission_classes = [IsBackOfficeUser]
    pagination_class = DonationPagination
    queryset = RecurringDonation.objects.select_related('donor', 'appeal')

    def get_queryset(self):
        params = self.request.query_params
        return search_recurring(
            search=params.get('search'),
            status=params.get('status'),
            frequency=params.get('frequency'),
            appeal=params.get('appeal'),
        )

    @extend_schema(tags=['donations'], request=None, responses={200: RecurringDonationSerializer})
    @action(detail=True, methods=['post'], permission_classes=[IsAdminRole])
    def cancel(self, request, pk=None):
        """Cancel a recurring donation and its Stripe subscription."""
        try:
            recurring = cancel_recurring_donation(recurring_id=pk, user=request.user)
        except RecurringDonation.DoesNotExist:
            return Response({'error': 'Recurring donation not found'}, status=status.HTTP_404_NOT_FOUND)
        except NotCancellableError as e:
            return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)

        return Response(RecurringDonationSerializer(recurring).data)
