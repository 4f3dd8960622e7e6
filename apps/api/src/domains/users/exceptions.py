"""
Domain-specific exceptions for privileged user management.
"""

from src.shared.exceptions import BaseHTTPException


class UserAdminException(BaseHTTPException):
    """Base exception for user management errors."""

    status_code = 400


class CeoRequiredError(UserAdminException):
    """Raised when a non-CEO calls a privileged user endpoint."""

    status_code = 403
    message = "Only the CEO can manage users"


class CeoProtectedError(UserAdminException):
    """Raised when trying to delete the CEO account."""

    status_code = 403
    message = "The CEO account cannot be removed"


class IdentityRejectedError(UserAdminException):
    """Raised when the auth service refuses to create or change an account."""

    status_code = 400


class UserProvisioningError(UserAdminException):
    """Raised when a step of account creation fails and was rolled back."""

    status_code = 503
    message = "Could not create the user, no changes were kept. Try again"
