"""
URL configuration for prompt API endpoints.
"""

from django.urls import path

from api.v1.prompt import views

urlpatterns = [
    path(
        "clean",
        views.CleanPromptView.as_view(),
        name="clean-prompt",
    ),
]
