# marketplace/exceptions.py
from rest_framework import status
from rest_framework.exceptions import APIException


class MarketplaceError(APIException):
    """Base des erreurs métier; rendues par DRF en {"detail": ...}."""


class InvalidInput(MarketplaceError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid input."
    default_code = "invalid_input"


class NotFound(MarketplaceError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found."
    default_code = "not_found"


class AccessDenied(MarketplaceError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Access denied."
    default_code = "access_denied"


class DependencyFailure(MarketplaceError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = "A backing service failed."
    default_code = "dependency_failure"
