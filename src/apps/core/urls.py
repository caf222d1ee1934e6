"""Core app URL configuration."""

from django.urls import path

from . import views

app_name = "core"

urlpatterns = [
    path("live", views.LiveView.as_view(), name="live"),
    path("ready", views.ReadyView.as_view(), name="ready"),
    # Back-compat alias of readiness
    path("health", views.ReadyView.as_view(), name="health"),
]
