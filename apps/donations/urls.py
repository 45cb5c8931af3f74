from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'donations'

# Router for ViewSets (donations list lives at the root)
router = DefaultRouter()
router.include_root_view = False
router.register(r'donors', views.DonorViewSet, basename='donor')
router.register(r'appeals', views.AppealViewSet, basename='appeal')
router.register(r'fundraisers', views.FundraiserViewSet, basename='fundraiser')
router.register(r'recurring', views.RecurringDonationViewSet, basename='recurring')
router.register(r'', views.DonationViewSet, basename='donation')

urlpatterns = [
    # Donation routes
    # GET    /api/donations/                      - List donations (filters)
    # GET    /api/donations/{id}/                 - Donation details
    # POST   /api/donations/{id}/refund/          - Refund (admin)

    # Donor routes
    # GET    /api/donations/donors/               - List donors with totals
    # POST   /api/donations/donors/               - Create donor
    # GET    /api/donations/donors/{id}/          - Donor details
    # PATCH  /api/donations/donors/{id}/          - Update donor
    # GET    /api/donations/donors/{id}/donations/ - Donor's donations

    # Appeal routes (list/retrieve public)
    # GET    /api/donations/appeals/              - List appeals
    # POST   /api/donations/appeals/              - Create appeal
    # DELETE /api/donations/appeals/{id}/         - Deactivate appeal

    # Fundraiser routes
    # GET    /api/donations/fundraisers/          - List with progress

    # Recurring routes
    # GET    /api/donations/recurring/            - List recurring donations
    # POST   /api/donations/recurring/{id}/cancel/ - Cancel subscription (admin)

    # Include router URLs
    path('', include(router.urls)),
]
