"""
Domain-specific exceptions for notifications.
"""

from src.shared.exceptions import BaseHTTPException


class NotificationException(BaseHTTPException):
    """Base exception for notification-related errors."""

    status_code = 400


class UnknownChannelError(NotificationException):
    """Raised when a notification channel name is not registered."""

    status_code = 404
    message = "Unknown notification channel"


class NotificationNotFoundError(NotificationException):
    """Raised when a notification does not exist."""

    status_code = 404
    message = "Notification not found"


class NotificationNotAddressedError(NotificationException):
    """Raised when the viewer is not a recipient of the notification."""

    status_code = 403
    message = "This notification is not addressed to you"


class ChallengeFailedError(NotificationException):
    """Raised when the acknowledgment challenge answer is wrong or missing."""

    status_code = 400
    message = "Incorrect answer, try again"


class JustificationRequiredError(NotificationException):
    """Raised when a delay notification is acknowledged without a justification."""

    status_code = 400
    message = "A justification is required"


class ChannelNotCreatableError(NotificationException):
    """Raised when a channel only receives notifications from system scans."""

    status_code = 405
    message = "Notifications on this channel are created automatically"
