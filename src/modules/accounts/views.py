"""Account API views."""

from __future__ import annotations

from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from modules.accounts.repositories import (
    ProfileDjangoRepository,
    RoleGrantDjangoRepository,
)


class MeView(APIView):
    """GET /api/v1/me

    Returns the caller's id, global role grants and owned profile ids so
    the front end can pick the right dashboard.  Requires a valid JWT.
    """

    permission_classes = [IsAuthenticated]

    def get(self, request: Request) -> Response:
        user_id = request.user.pk
        profiles = ProfileDjangoRepository()
        vendor_id = profiles.vendor_profile_id(user_id)
        shopper_id = profiles.shopper_profile_id(user_id)
        return Response(
            {
                "userId": str(user_id),
                "roles": sorted(RoleGrantDjangoRepository().list_roles(user_id)),
                "vendorId": str(vendor_id) if vendor_id else None,
                "shopperId": str(shopper_id) if shopper_id else None,
            }
        )
