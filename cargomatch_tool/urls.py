"""Root URL configuration for cargomatch_tool."""

from django.urls import include, path

urlpatterns = [
    path('', include('cargomatch.urls')),
]
