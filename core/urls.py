"""
URL configuration for core project.

The JSON API is mounted under ``/api/``; the Django admin under ``/admin/``.
"""
from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/", include("foodAnalytics.urls")),
]
