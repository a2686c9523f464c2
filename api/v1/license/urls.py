"""
URL configuration for license API endpoints.
"""

from django.urls import path

from api.v1.license import views

urlpatterns = [
    path(
        "issue",
        views.IssueLicenseView.as_view(),
        name="issue-license",
    ),
    path(
        "validate",
        views.ValidateLicenseView.as_view(),
        name="validate-license",
    ),
    path(
        "lookup",
        views.LookupLicenseView.as_view(),
        name="lookup-license",
    ),
]
