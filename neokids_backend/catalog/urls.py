"""Catalog URLs.

Prefix: /api/
Routes:
    GET/POST          /api/services/       - List (?active=1) / create
    GET/PATCH/DELETE  /api/services/<pk>/  - Retrieve / update / delete
"""

from django.urls import path

from neokids_backend.catalog.views import ServiceDetailView, ServiceListCreateView

app_name = 'catalog'

urlpatterns = [
    path('services/', ServiceListCreateView.as_view(), name='list'),
    path('services/<int:pk>/', ServiceDetailView.as_view(), name='detail'),
]
