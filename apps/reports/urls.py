from django.urls import path
from . import views

app_name = 'reports'

urlpatterns = [
    # Full report (JSON)
    path('', views.report, name='report'),

    # Dashboard
    path('dashboard/', views.dashboard, name='dashboard'),

    # Gift Aid schedule (GET), claim (POST), donor declaration (PATCH)
    path('giftaid/', views.gift_aid, name='giftaid'),

    # CSV exports
    path('export/<slug:variant>/', views.export, name='export'),
    path('<slug:section>/csv/', views.section_csv, name='section-csv'),
]
