"""
Account endpoints: tailor self-registration, login, token verification and
admin approval of tailor accounts.
"""
import logging
from collections import Counter

from django.contrib.auth import authenticate, get_user_model
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.tokens import RefreshToken
from drf_spectacular.utils import extend_schema, OpenApiResponse
from drf_spectacular.types import OpenApiTypes

from apps.core.auth import IsAdminRole
from .serializers import LoginSerializer, RegisterSerializer, TailorStatusSerializer, UserSerializer

logger = logging.getLogger(__name__)

User = get_user_model()


def issue_tokens(user) -> dict:
    """Issue a refresh/access pair carrying the role and approval status."""
    refresh = RefreshToken.for_user(user)
    refresh["email"] = user.email
    refresh["role"] = user.role
    refresh["status"] = user.status
    return {"token": str(refresh.access_token), "refresh": str(refresh)}


class RegisterAPIView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    @extend_schema(
        tags=["auth"],
        summary="Register a tailor account (pending approval)",
        request=RegisterSerializer,
        responses={
            201: OpenApiResponse(OpenApiTypes.OBJECT, description="Account created, awaiting approval"),
            400: OpenApiResponse(OpenApiTypes.OBJECT, description="Validation error or duplicate email"),
        },
    )
    def post(self, request):
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        logger.info(f"Registered tailor account {user.email} (pending approval)")
        return Response({
            "message": "Account created successfully! Your account is pending approval. "
                       "You will be notified once approved.",
            "success": True,
            "account_created": True,
        }, status=status.HTTP_201_CREATED)


class LoginAPIView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    @extend_schema(
        tags=["auth"],
        summary="Log in and obtain JWT tokens",
        request=LoginSerializer,
        responses={
            200: OpenApiResponse(OpenApiTypes.OBJECT, description="Tokens and user profile"),
            401: OpenApiResponse(OpenApiTypes.OBJECT, description="Invalid credentials"),
            403: OpenApiResponse(OpenApiTypes.OBJECT, description="Tailor account not approved"),
        },
    )
    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = authenticate(
            request,
            email=serializer.validated_data["email"],
            password=serializer.validated_data["password"],
        )
        if user is None:
            return Response({"error": "Invalid credentials"}, status=status.HTTP_401_UNAUTHORIZED)

        # Admins can always log in; tailors only once approved.
        if user.role == User.ROLE_TAILOR and user.status != User.STATUS_APPROVED:
            return Response({"error": "Account pending approval", "status": user.status},
                            status=status.HTTP_403_FORBIDDEN)

        payload = issue_tokens(user)
        payload["user"] = UserSerializer(user).data
        return Response(payload, status=status.HTTP_200_OK)


class VerifyAPIView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        tags=["auth"],
        summary="Return the profile behind the bearer token",
        responses={200: UserSerializer},
    )
    def get(self, request):
        return Response(UserSerializer(request.user).data)


class TailorListAPIView(APIView):
    permission_classes = [IsAdminRole]

    @extend_schema(
        tags=["admin"],
        summary="List tailor accounts (newest first)",
        responses={200: OpenApiResponse(OpenApiTypes.OBJECT)},
    )
    def get(self, request):
        tailors = list(User.objects.filter(role=User.ROLE_TAILOR).order_by("-created_at"))
        counts = Counter(t.status for t in tailors)
        return Response({
            "results": UserSerializer(tailors, many=True).data,
            "stats": {
                "total": len(tailors),
                "pending": counts.get(User.STATUS_PENDING, 0),
                "approved": counts.get(User.STATUS_APPROVED, 0),
                "rejected": counts.get(User.STATUS_REJECTED, 0),
            },
        })


class TailorStatusUpdateAPIView(APIView):
    permission_classes = [IsAdminRole]

    @extend_schema(
        tags=["admin"],
        summary="Approve, reject or reset a tailor account",
        request=TailorStatusSerializer,
        responses={
            200: OpenApiResponse(OpenApiTypes.OBJECT, description="Status updated"),
            404: OpenApiResponse(OpenApiTypes.OBJECT, description="Tailor not found"),
        },
    )
    def post(self, request):
        serializer = TailorStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        tailor_id = serializer.validated_data["tailor_id"]
        new_status = serializer.validated_data["status"]

        try:
            tailor = User.objects.get(pk=tailor_id, role=User.ROLE_TAILOR)
        except User.DoesNotExist:
            return Response({"error": "Tailor not found"}, status=status.HTTP_404_NOT_FOUND)

        tailor.status = new_status
        tailor.save(update_fields=["status", "updated_at"])
        logger.info(f"Tailor {tailor.email} status set to {new_status} by {request.user.email}")
        return Response({"message": "Status updated successfully", "tailor": UserSerializer(tailor).data})
