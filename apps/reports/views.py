from django.http import HttpResponse
from django.utils import timezone
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from apps.accounts.permissions import CanManageRecords, IsBackOfficeUser

from .exceptions import InvalidColumnError, UnknownExportError, UnknownSectionError
from .exports import SECTION_HEADER, build_export, flatten_section, get_export, render_csv
from .reports import ReportQueries
from .serializers import (
    # Input serializers
    ExportQuerySerializer,
    GiftAidDonorSerializer,
    GiftAidQuerySerializer,
    ReportQuerySerializer,
    # Response serializers
    ErrorSerializer,
    GiftAidScheduleSerializer,
    UpdatedCountSerializer,
)


def csv_response(content, filename):
    response = HttpResponse(content, content_type='text/csv; charset=utf-8')
    response['Content-Disposition'] = f'attachment; filename="{filename}-{timezone.localdate().isoformat()}.csv"'
    return response


@extend_schema(
    parameters=[ReportQuerySerializer],
    responses={200: OpenApiTypes.OBJECT, 400: ErrorSerializer},
    description='Full report for a date range (defaults to the current month).',
    tags=['reports'],
)
@api_view(['GET'])
@permission_classes([IsBackOfficeUser])
def report(request):
    """Full report - thin HTTP handler."""
    query_serializer = ReportQuerySerializer(data=request.query_params)
    query_serializer.is_valid(raise_exception=True)
    params = query_serializer.validated_data

    data = ReportQueries.full_report(params['start'], params['end'], staff=params.get('staff'))
    return Response(data)


@extend_schema(
    parameters=[
        ReportQuerySerializer,
        OpenApiParameter('section', OpenApiTypes.STR, OpenApiParameter.PATH, description='Report section name'),
    ],
    responses={(200, 'text/csv'): OpenApiTypes.STR, 404: ErrorSerializer},
    description='One report section flattened to CSV.',
    tags=['reports'],
)
@api_view(['GET'])
@permission_classes([IsBackOfficeUser])
def section_csv(request, section):
    """Report section as CSV - thin HTTP handler."""
    query_serializer = ReportQuerySerializer(data=request.query_params)
    query_serializer.is_valid(raise_exception=True)
    params = query_serializer.validated_data

    try:
        data = ReportQueries.section(section, params['start'], params['end'], staff=params.get('staff'))
    except UnknownSectionError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

    return csv_response(render_csv(SECTION_HEADER, flatten_section(data)), f'report-{section}')


@extend_schema(
    responses={200: OpenApiTypes.OBJECT},
    description='Dashboard KPIs, payment method split, monthly income and latest donations.',
    tags=['reports'],
)
@api_view(['GET'])
@permission_classes([IsBackOfficeUser])
def dashboard(request):
    """Dashboard summary - thin HTTP handler."""
    return Response(ReportQueries.dashboard())


@extend_schema(
    methods=['GET'],
    parameters=[GiftAidQuerySerializer],
    responses={200: GiftAidScheduleSerializer},
    description='Gift Aid schedule: completed donations split into eligible and ineligible.',
    tags=['reports'],
)
@extend_schema(
    methods=['POST'],
    request=GiftAidQuerySerializer,
    responses={200: UpdatedCountSerializer},
    description='Mark every eligible donation in the range as claimed.',
    tags=['reports'],
)
@extend_schema(
    methods=['PATCH'],
    request=GiftAidDonorSerializer,
    responses={200: UpdatedCountSerializer},
    description="Make a donor's completed donations in the range Gift Aid eligible.",
    tags=['reports'],
)
@api_view(['GET', 'POST', 'PATCH'])
@permission_classes([CanManageRecords])
def gift_aid(request):
    """Gift Aid schedule and claim marking - thin HTTP handler."""
    if request.method == 'GET':
        query_serializer = GiftAidQuerySerializer(data=request.query_params)
        query_serializer.is_valid(raise_exception=True)
        params = query_serializer.validated_data
        return Response(ReportQueries.gift_aid_schedule(params['start'], params['end']))

    if request.method == 'POST':
        serializer = GiftAidQuerySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        params = serializer.validated_data
        updated = ReportQueries.mark_gift_aid_claimed(params['start'], params['end'])
        return Response({'updated': updated})

    serializer = GiftAidDonorSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    params = serializer.validated_data
    updated = ReportQueries.mark_donor_gift_aid(params['donor'], params['start'], params['end'])
    return Response({'updated': updated})


@extend_schema(
    parameters=[
        ExportQuerySerializer,
        OpenApiParameter('variant', OpenApiTypes.STR, OpenApiParameter.PATH, description='Export name'),
    ],
    responses={(200, 'text/csv'): OpenApiTypes.STR, 400: ErrorSerializer, 404: ErrorSerializer},
    description='CSV export of donations, recurring, offline income, collections, fundraisers, donors or masjids.',
    tags=['reports'],
)
@api_view(['GET'])
@permission_classes([IsBackOfficeUser])
def export(request, variant):
    """CSV export - thin HTTP handler."""
    query_serializer = ExportQuerySerializer(data=request.query_params)
    query_serializer.is_valid(raise_exception=True)
    params = dict(query_serializer.validated_data)
    columns = params.pop('columns', None)

    try:
        config = get_export(variant)
        header, rows = build_export(variant, columns=columns, filters=params)
    except UnknownExportError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    except InvalidColumnError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return csv_response(render_csv(header, rows), config.filename)
