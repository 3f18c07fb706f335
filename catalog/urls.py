from django.contrib import admin
from django.urls import path

from catalog.api import api as catalog_api

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/", catalog_api.urls),
]
