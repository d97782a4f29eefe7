# ==================== UTILS/PERMISSIONS.PY ====================
from rest_framework import permissions


class IsParkingOwner(permissions.BasePermission):
    """Permission to check if user lists parking spots (or is an admin)"""
    message = 'Only parking owners can perform this action'

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and (user.is_parking_owner or user.is_platform_admin))


class IsPlatformAdmin(permissions.BasePermission):
    """Permission to check if user is a platform admin"""
    message = 'Admin access required'

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and user.is_platform_admin)


class IsOwner(permissions.BasePermission):
    """Permission to check if user is owner of the parking spot"""

    def has_object_permission(self, request, view, obj):
        if request.method in permissions.SAFE_METHODS:
            return True
        return obj.owner == request.user


class IsBookingUserOrAdmin(permissions.BasePermission):
    """Permission for booking reads - the customer who booked, or an admin"""
    message = 'Not authorized to access this booking'

    def has_object_permission(self, request, view, obj):
        return obj.user_id == request.user.id or request.user.is_platform_admin
