"""URL configuration for the cargomatch app.

Both endpoints are namespaced under ``cargomatch`` so the throttle
middleware can refer to them by name.
"""

from django.urls import path

from . import views

app_name = 'cargomatch'

urlpatterns = [
    path('match/', views.match_page, name='match_page'),
    path('match/url/', views.match_url, name='match_url'),
]
