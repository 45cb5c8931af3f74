from drf_spectacular.utils import extend_schema, extend_schema_view
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.pagination import PageNumberPagination
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from apps.accounts.permissions import CanManageRecords

from .models import (
    SponsorshipDonation,
    SponsorshipProject,
    SponsorshipProjectCountry,
    WaterProject,
    WaterProjectCountry,
    WaterProjectDonation,
)
from .serializers import (
    CompleteDonationInputSerializer,
    ProjectDonationFilterSerializer,
    ProjectDonationUpdateSerializer,
    SponsorshipDonationCreateSerializer,
    SponsorshipDonationSerializer,
    SponsorshipProjectCountrySerializer,
    SponsorshipProjectSerializer,
    WaterDonationCreateSerializer,
    WaterProjectCountrySerializer,
    WaterProjectDonationSerializer,
    WaterProjectSerializer,
)
from .services import (
    complete_donation,
    create_project_donation,
    search_project_donations,
    update_donation,
    # Exceptions
    InvalidStatusTransitionError,
    ProjectsServiceError,
)


class ProjectPagination(PageNumberPagination):
    """Custom pagination for project donations."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


# =============================================================================
# Projects and countries
# =============================================================================

class BaseProjectViewSet(viewsets.ModelViewSet):
    """Water or sponsorship project types (one row per type)."""

    permission_classes = [CanManageRecords]

    def destroy(self, request, *args, **kwargs):
        """Deactivate instead of deleting; donations keep their project."""
        project = self.get_object()
        project.is_active = False
        project.save(update_fields=['is_active', 'updated_at'])
        return Response(status=status.HTTP_204_NO_CONTENT)


@extend_schema_view(
    list=extend_schema(tags=['projects']),
    retrieve=extend_schema(tags=['projects']),
    create=extend_schema(tags=['projects']),
    update=extend_schema(tags=['projects']),
    partial_update=extend_schema(tags=['projects']),
    destroy=extend_schema(tags=['projects']),
)
class WaterProjectViewSet(BaseProjectViewSet):
    queryset = WaterProject.objects.all()
    serializer_class = WaterProjectSerializer


@extend_schema_view(
    list=extend_schema(tags=['projects']),
    retrieve=extend_schema(tags=['projects']),
    create=extend_schema(tags=['projects']),
    update=extend_schema(tags=['projects']),
    partial_update=extend_schema(tags=['projects']),
    destroy=extend_schema(tags=['projects']),
)
class SponsorshipProjectViewSet(BaseProjectViewSet):
    queryset = SponsorshipProject.objects.all()
    serializer_class = SponsorshipProjectSerializer


class BaseProjectCountryViewSet(viewsets.ModelViewSet):
    """
    Countries a project can be funded in, with their fixed price.

    list/retrieve are public (the donation form reads prices from them);
    anonymous users only see active countries.
    """

    model = None

    def get_queryset(self):
        queryset = self.model.objects.all()
        user = self.request.user
        if not (user and user.is_authenticated):
            queryset = queryset.filter(is_active=True)

        project_type = self.request.query_params.get('project_type')
        if project_type:
            queryset = queryset.filter(project_type=project_type)
        return queryset

    def get_permissions(self):
        """Set permissions based on action."""
        if self.action in ['list', 'retrieve']:
            return [AllowAny()]
        return [CanManageRecords()]

    def destroy(self, request, *args, **kwargs):
        country = self.get_object()
        country.is_active = False
        country.save(update_fields=['is_active'])
        return Response(status=status.HTTP_204_NO_CONTENT)


@extend_schema_view(
    list=extend_schema(tags=['projects']),
    retrieve=extend_schema(tags=['projects']),
    create=extend_schema(tags=['projects']),
    update=extend_schema(tags=['projects']),
    partial_update=extend_schema(tags=['projects']),
    destroy=extend_schema(tags=['projects']),
)
class WaterProjectCountryViewSet(BaseProjectCountryViewSet):
    model = WaterProjectCountry
    serializer_class = WaterProjectCountrySerializer


@extend_schema_view(
    list=extend_schema(tags=['projects']),
    retrieve=extend_schema(tags=['projects']),
    create=extend_schema(tags=['projects']),
    update=extend_schema(tags=['projects']),
    partial_update=extend_schema(tags=['projects']),
    destroy=extend_schema(tags=['projects']),
)
class SponsorshipProjectCountryViewSet(BaseProjectCountryViewSet):
    model = SponsorshipProjectCountry
    serializer_class = SponsorshipProjectCountrySerializer


# =============================================================================
# Project donations
# =============================================================================

class BaseProjectDonationViewSet(mixins.ListModelMixin,
                                 mixins.RetrieveModelMixin,
                                 viewsets.GenericViewSet):
    """
    Water/sponsorship donations and their fulfillment.

    list: Filtered donations
    create: Record an offline donation (country price is enforced)
    partial_update: Change status and/or notes
    complete: Mark complete with exactly four photos and email the donor
    """

    model = None
    create_serializer_class = None
    permission_classes = [CanManageRecords]
    pagination_class = ProjectPagination
    http_method_names = ['get', 'post', 'patch', 'head', 'options']

    def get_queryset(self):
        if self.action != 'list':
            return search_project_donations(self.model)

        filter_serializer = ProjectDonationFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        return search_project_donations(self.model, **filter_serializer.validated_data)

    def create(self, request):
        serializer = self.create_serializer_class(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)

        try:
            donation = create_project_donation(
                model=self.model,
                project=data.pop('project'),
                country=data.pop('country'),
                added_by=request.user,
                **data
            )
        except ProjectsServiceError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(self.get_serializer(donation).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, pk=None):
        donation = self.get_object()
        serializer = ProjectDonationUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            donation = update_donation(donation=donation, **serializer.validated_data)
        except InvalidStatusTransitionError as e:
            return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)

        return Response(self.get_serializer(donation).data)

    @action(detail=True, methods=['post'])
    def complete(self, request, pk=None):
        """POST .../{id}/complete/ with images, report, report_pdf, drive_link."""
        donation = self.get_object()
        serializer = CompleteDonationInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            donation = complete_donation(
                donation=donation,
                images=data['images'],
                report=data['report'],
                report_pdf=data.get('report_pdf'),
                drive_link=data.get('drive_link'),
            )
        except InvalidStatusTransitionError as e:
            return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)
        except ProjectsServiceError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(self.get_serializer(donation).data)


@extend_schema_view(
    list=extend_schema(tags=['projects']),
    retrieve=extend_schema(tags=['projects']),
    create=extend_schema(tags=['projects'], request=WaterDonationCreateSerializer),
    partial_update=extend_schema(tags=['projects'], request=ProjectDonationUpdateSerializer),
    complete=extend_schema(tags=['projects'], request=CompleteDonationInputSerializer),
)
class WaterProjectDonationViewSet(BaseProjectDonationViewSet):
    model = WaterProjectDonation
    serializer_class = WaterProjectDonationSerializer
    create_serializer_class = WaterDonationCreateSerializer


@extend_schema_view(
    list=extend_schema(tags=['projects']),
    retrieve=extend_schema(tags=['projects']),
    create=extend_schema(tags=['projects'], request=SponsorshipDonationCreateSerializer),
    partial_update=extend_schema(tags=['projects'], request=ProjectDonationUpdateSerializer),
    complete=extend_schema(tags=['projects'], request=CompleteDonationInputSerializer),
)
class SponsorshipDonationViewSet(BaseProjectDonationViewSet):
    model = SponsorshipDonation
    serializer_class = SponsorshipDonationSerializer
    create_serializer_class = SponsorshipDonationCreateSerializer
