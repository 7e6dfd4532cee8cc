from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from projectsync.core.validation import validate_payload
from projectsync.users.credentials import get_credential_store

from .serializers import LoginResponseSerializer
from .serializers import LoginSerializer


class LoginView(APIView):
    """Exchange username/password/role for a bearer token.

    Unknown usernames are registered on the spot.
    """

    authentication_classes: list = []
    permission_classes = [AllowAny]

    def get_authenticate_header(self, request):
        # Keeps credential failures at 401 without any authenticator attached.
        return 'Bearer realm="api"'

    @extend_schema(
        tags=["Authentication"],
        request=LoginSerializer,
        responses={200: LoginResponseSerializer},
    )
    def post(self, request, *args, **kwargs):
        data = validate_payload(request.data, LoginSerializer)
        result = get_credential_store().authenticate(
            data["username"],
            data["password"],
            data["role"],
        )
        return Response(
            {"token": result.token, "user": result.user.to_dict()},
            status=status.HTTP_200_OK,
        )
