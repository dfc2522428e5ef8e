"""
Custom permission classes for role based access control.
"""
from rest_framework.permissions import BasePermission, SAFE_METHODS

ADMIN_ROLES = {"super", "admin"}
FINANCE_ROLES = {"super", "admin", "accountant"}


def _role(request):
    user = getattr(request, "user", None)
    if not (user and user.is_authenticated):
        return None
    return getattr(user, "role", None)


class IsAdminRole(BasePermission):
    """Allow access only to users with an administrative role."""
    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        return _role(request) in ADMIN_ROLES


class IsFinanceRole(BasePermission):
    """Roles allowed to record payments, advances and run monthly batches."""
    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        return _role(request) in FINANCE_ROLES


class IsFinanceOrReadOnly(BasePermission):
    """Any authenticated user may read; writes need a finance role."""
    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        role = _role(request)
        if role is None:
            return False
        return request.method in SAFE_METHODS or role in FINANCE_ROLES


class IsSuper(BasePermission):
    """Only super admin."""
    def has_permission(self, request, view) -> bool:
        return _role(request) == "super"


def is_admin(user) -> bool:
    return bool(user and user.is_authenticated and getattr(user, "role", None) in ADMIN_ROLES)
