"""Submission API URL configuration."""

from django.urls import path

from . import views

app_name = "submissions"

urlpatterns = [
    path("pickup-requests", views.PickupRequestView.as_view(), name="pickup_requests"),
    path("contact-messages", views.ContactMessageView.as_view(), name="contact_messages"),
    path("career-applications", views.CareerApplicationView.as_view(), name="career_applications"),
    path(
        "newsletter-subscriptions",
        views.NewsletterSubscriptionView.as_view(),
        name="newsletter_subscriptions",
    ),
    path("test-notifications", views.SampleNotificationsView.as_view(), name="test_notifications"),
]
