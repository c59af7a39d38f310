"""
Views for the shop owner account.

- One-time owner registration
- Current owner profile
- Logout acknowledgement (tokens are stateless; the client discards them)
"""

import logging

from django.contrib.auth import get_user_model

from rest_framework import generics, permissions, status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from .exceptions import OwnerAlreadyRegistered
from .serializers import OwnerRegistrationSerializer, OwnerSerializer

logger = logging.getLogger(__name__)

User = get_user_model()


@api_view(["POST"])
@permission_classes([permissions.AllowAny])
def register_owner(request):
    """
    Create the shop owner account. Only allowed while no account exists.

    Request body:
    {
        "name": "<owner name>",
        "email": "<login email>",
        "password": "<password>"
    }
    """
    serializer = OwnerRegistrationSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    if User.objects.exists():
        raise OwnerAlreadyRegistered()

    owner = serializer.save()

    logger.info(f"Owner registered: {owner.email}")

    return Response(
        {"detail": "Owner registered successfully.", "owner": OwnerSerializer(owner).data},
        status=status.HTTP_201_CREATED,
    )


class OwnerProfileView(generics.RetrieveAPIView):
    """
    API endpoint for the signed-in owner's profile.
    """

    serializer_class = OwnerSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_object(self):
        return self.request.user


@api_view(["POST"])
@permission_classes([permissions.IsAuthenticated])
def logout(request):
    return Response(
        {"detail": "Logged out successfully. Please remove the token client-side."},
        status=status.HTTP_200_OK,
    )
