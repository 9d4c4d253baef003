from typing import Optional, Type

from django.core.exceptions import ValidationError
from django.db import models
from rest_framework.permissions import BasePermission


class IsAdminRole(BasePermission):
    """Allows access only to authenticated accounts with the admin role."""
    message = "Access denied"

    def has_permission(self, request, view) -> bool:
        user = request.user
        return bool(user and user.is_authenticated and getattr(user, "is_admin", False))


class IsApprovedTailor(BasePermission):
    """
    Allows access only to tailors an admin has approved.
    Pending or rejected tailors keep a valid token but cannot reach the
    dashboard endpoints.
    """
    message = "Access denied"

    def has_permission(self, request, view) -> bool:
        user = request.user
        return bool(user and user.is_authenticated and getattr(user, "is_approved_tailor", False))


def get_owned_object(model: Type[models.Model], request, **lookup) -> Optional[models.Model]:
    """
    Fetch a row that belongs to the acting tailor.
    Returns None both when the row does not exist and when another tailor
    owns it, so callers answer 404 in either case.
    """
    try:
        return model.objects.get(tailor=request.user, **lookup)
    except (model.DoesNotExist, ValidationError):
        return None
