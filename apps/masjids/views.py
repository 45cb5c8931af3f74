from drf_spectacular.utils import extend_schema, extend_schema_view
from rest_framework import status, viewsets
from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response

from apps.accounts.permissions import CanManageRecords
from apps.donations.services import DonationNumberUnavailableError

from .serializers import (
    CollectionFilterSerializer,
    CollectionSerializer,
    MasjidSerializer,
    OfflineIncomeFilterSerializer,
    OfflineIncomeSerializer,
)
from .services import (
    ensure_can_edit,
    record_collection,
    record_offline_income,
    search_collections,
    search_masjids,
    search_offline_income,
    # Exceptions
    NotRecordOwnerError,
)


class MasjidPagination(PageNumberPagination):
    """Custom pagination for masjid records."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class OwnedRecordMixin:
    """Staff may only update or delete records they added; admins may change anything."""

    def update(self, request, *args, **kwargs):
        try:
            ensure_can_edit(self.get_object(), request.user)
        except NotRecordOwnerError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        return super().update(request, *args, **kwargs)

    def destroy(self, request, *args, **kwargs):
        try:
            ensure_can_edit(self.get_object(), request.user)
        except NotRecordOwnerError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        return super().destroy(request, *args, **kwargs)


@extend_schema_view(
    list=extend_schema(tags=['masjids']),
    retrieve=extend_schema(tags=['masjids']),
    create=extend_schema(tags=['masjids']),
    update=extend_schema(tags=['masjids']),
    partial_update=extend_schema(tags=['masjids']),
    destroy=extend_schema(tags=['masjids']),
)
class MasjidViewSet(OwnedRecordMixin, viewsets.ModelViewSet):
    """
    Masjid CRM.

    Filters: search (name, city, postcode, contact), status, city.
    """

    serializer_class = MasjidSerializer
    permission_classes = [CanManageRecords]
    pagination_class = MasjidPagination

    def get_queryset(self):
        params = self.request.query_params
        return search_masjids(
            search=params.get('search'),
            status=params.get('status'),
            city=params.get('city'),
        )

    def perform_create(self, serializer):
        serializer.save(added_by=self.request.user)


@extend_schema_view(
    list=extend_schema(tags=['masjids'], parameters=[CollectionFilterSerializer]),
    retrieve=extend_schema(tags=['masjids']),
    create=extend_schema(tags=['masjids']),
    update=extend_schema(tags=['masjids']),
    partial_update=extend_schema(tags=['masjids']),
    destroy=extend_schema(tags=['masjids']),
)
class CollectionViewSet(OwnedRecordMixin, viewsets.ModelViewSet):
    """Masjid collections (Jummah, Ramadan, Eid...)."""

    serializer_class = CollectionSerializer
    permission_classes = [CanManageRecords]
    pagination_class = MasjidPagination

    def get_queryset(self):
        if self.action != 'list':
            return search_collections()

        filter_serializer = CollectionFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        return search_collections(**filter_serializer.validated_data)

    def perform_create(self, serializer):
        serializer.instance = record_collection(added_by=self.request.user, **serializer.validated_data)


@extend_schema_view(
    list=extend_schema(tags=['masjids'], parameters=[OfflineIncomeFilterSerializer]),
    retrieve=extend_schema(tags=['masjids']),
    create=extend_schema(tags=['masjids']),
    update=extend_schema(tags=['masjids']),
    partial_update=extend_schema(tags=['masjids']),
    destroy=extend_schema(tags=['masjids']),
)
class OfflineIncomeViewSet(OwnedRecordMixin, viewsets.ModelViewSet):
    """Office income (cash, buckets, SumUp, bank transfer) for an appeal."""

    serializer_class = OfflineIncomeSerializer
    permission_classes = [CanManageRecords]
    pagination_class = MasjidPagination

    def get_queryset(self):
        if self.action != 'list':
            return search_offline_income()

        filter_serializer = OfflineIncomeFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        return search_offline_income(**filter_serializer.validated_data)

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            income = record_offline_income(added_by=request.user, **serializer.validated_data)
        except DonationNumberUnavailableError as e:
            return Response({'error': str(e)}, status=status.HTTP_503_SERVICE_UNAVAILABLE)

        return Response(self.get_serializer(income).data, status=status.HTTP_201_CREATED)
