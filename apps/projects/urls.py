from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'projects'

# Router for ViewSets
router = DefaultRouter()
router.register(r'water/projects', views.WaterProjectViewSet, basename='water-project')
router.register(r'water/countries', views.WaterProjectCountryViewSet, basename='water-country')
router.register(r'water/donations', views.WaterProjectDonationViewSet, basename='water-donation')
router.register(r'sponsorships/projects', views.SponsorshipProjectViewSet, basename='sponsorship-project')
router.register(r'sponsorships/countries', views.SponsorshipProjectCountryViewSet, basename='sponsorship-country')
router.register(r'sponsorships/donations', views.SponsorshipDonationViewSet, basename='sponsorship-donation')

urlpatterns = [
    # Water routes
    # GET    /api/projects/water/countries/?project_type=  - Countries and prices (public)
    # GET    /api/projects/water/donations/               - List donations (filters)
    # POST   /api/projects/water/donations/               - Record offline donation
    # PATCH  /api/projects/water/donations/{id}/          - Update status/notes
    # POST   /api/projects/water/donations/{id}/complete/ - Complete with report

    # Sponsorship routes (same shape)
    # GET    /api/projects/sponsorships/countries/?project_type=
    # GET    /api/projects/sponsorships/donations/
    # POST   /api/projects/sponsorships/donations/{id}/complete/

    # Include router URLs
    path('', include(router.urls)),
]
