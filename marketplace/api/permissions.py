from rest_framework import permissions


class IsCustomer(permissions.BasePermission):
    message = "Customers only."

    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated and request.user.user_type == 'customer')


class IsArtisan(permissions.BasePermission):
    message = "Artisans only."

    def has_permission(self, request, view):
        return bool(
            request.user and request.user.is_authenticated
            and request.user.user_type == 'artisan'
            and hasattr(request.user, 'artisan_profile')
        )


class IsMarketplaceAdmin(permissions.BasePermission):
    message = "Administrators only."

    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated and request.user.is_marketplace_admin)


class IsJobOwnerOrAdmin(permissions.BasePermission):
    message = "Access denied."

    def has_object_permission(self, request, view, obj):
        return obj.user_id == request.user.pk or request.user.is_marketplace_admin


class IsJobParticipant(permissions.BasePermission):
    """Client du job, artisan assigné, ou admin."""
    message = "Access denied."

    def has_object_permission(self, request, view, obj):
        if obj.user_id == request.user.pk or request.user.is_marketplace_admin:
            return True
        artisan = obj.assigned_artisan
        return artisan is not None and artisan.user_id == request.user.pk
