"""
URL configuration for the owner account API.
"""

from django.urls import path

from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from . import views

app_name = "core"

urlpatterns = [
    path("api/auth/register/", views.register_owner, name="register"),
    path("api/auth/token/", TokenObtainPairView.as_view(), name="token_obtain_pair"),
    path("api/auth/token/refresh/", TokenRefreshView.as_view(), name="token_refresh"),
    path("api/auth/me/", views.OwnerProfileView.as_view(), name="me"),
    path("api/auth/logout/", views.logout, name="logout"),
]
