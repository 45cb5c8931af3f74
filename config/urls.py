"""
URL configuration for the donations project.

Public checkout endpoints live under /api/checkout/, the back-office API
under /api/donations/, /api/projects/, /api/masjids/ and /api/reports/.
"""
from django.contrib import admin
from django.urls import path, include
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from config.views import health_check

urlpatterns = [
    # Health check
    path('api/health/', health_check, name='health-check'),

    # Admin
    path('admin/', admin.site.urls),

    # API Documentation
    path('api/schema/', SpectacularAPIView.as_view(), name='api-schema'),
    path('api/docs/', SpectacularSwaggerView.as_view(url_name='api-schema'), name='api-docs'),

    # Authentication
    path('api/auth/token/', TokenObtainPairView.as_view(), name='token_obtain_pair'),
    path('api/auth/token/refresh/', TokenRefreshView.as_view(), name='token_refresh'),

    # Public checkout
    path('api/checkout/', include('apps.checkout.urls')),

    # Back-office + public catalogue
    path('api/donations/', include('apps.donations.urls')),
    path('api/projects/', include('apps.projects.urls')),
    path('api/masjids/', include('apps.masjids.urls')),
    path('api/reports/', include('apps.reports.urls')),
]


# Custom error handlers
handler404 = 'config.views.error_404'
handler500 = 'config.views.error_500'
