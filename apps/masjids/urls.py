from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'masjids'

# Router for ViewSets (masjid list lives at the root)
router = DefaultRouter()
router.include_root_view = False
router.register(r'collections', views.CollectionViewSet, basename='collection')
router.register(r'offline-income', views.OfflineIncomeViewSet, basename='offline-income')
router.register(r'', views.MasjidViewSet, basename='masjid')

urlpatterns = [
    # Masjid routes
    # GET    /api/masjids/                      - List masjids (search, status, city)
    # POST   /api/masjids/                      - Create masjid
    # PATCH  /api/masjids/{id}/                 - Update masjid (staff: own records)

    # Collection routes
    # GET    /api/masjids/collections/          - List collections (filters)
    # POST   /api/masjids/collections/          - Record a collection

    # Offline income routes
    # GET    /api/masjids/offline-income/       - List offline income (filters)
    # POST   /api/masjids/offline-income/       - Record income (generates donation number)

    # Include router URLs
    path('', include(router.urls)),
]
