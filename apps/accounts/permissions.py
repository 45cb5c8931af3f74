"""
Back-office permission classes.

Permission Classes:
    IsBackOfficeUser - Any active back-office user (read access)
    CanManageRecords - ADMIN/STAFF for writes, any back-office user for reads
    IsAdminRole - ADMIN only (refunds, cancellations)

Usage:
    from apps.accounts.permissions import CanManageRecords

    class MasjidViewSet(viewsets.ModelViewSet):
        permission_classes = [IsAuthenticated, CanManageRecords]
"""

from rest_framework.permissions import BasePermission, SAFE_METHODS

from .models import UserRole


class IsBackOfficeUser(BasePermission):
    """Allow any authenticated, active back-office user."""

    message = 'Back-office access required.'

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and user.is_active)


class CanManageRecords(IsBackOfficeUser):
    """
    Viewers may read; admins and staff may also write.

    Used by every back-office ViewSet that records income or edits
    fulfillment state.
    """

    message = 'Your role does not allow changes to this record.'

    def has_permission(self, request, view):
        if not super().has_permission(request, view):
            return False
        if request.method in SAFE_METHODS:
            return True
        return request.user.can_manage


class IsAdminRole(IsBackOfficeUser):
    """Only ADMIN users (refunds, subscription cancellation)."""

    message = 'Only administrators can perform this action.'

    def has_permission(self, request, view):
        if not super().has_permission(request, view):
            return False
        return request.user.role == UserRole.ADMIN or request.user.is_superuser
