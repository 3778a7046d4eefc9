"""
Error taxonomy for the reply pipeline.

Every failure a pipeline run can hit derives from ReplyAssistError so the
pipeline boundary can turn it into a short status string for the user.
Advisory errors (AlreadyInFlight, NoTargetSurface) are reported but do not
mean anything went wrong with the request itself.
"""

from __future__ import annotations


class ReplyAssistError(Exception):
    """Base class for failures surfaced to the user as a status message."""

    advisory: bool = False
    default_message: str = "Something went wrong"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    def user_message(self) -> str:
        """Short human-readable status for the UI."""
        if self.advisory:
            return self.message
        return f"Error: {self.message}"


class LocatorNotFound(ReplyAssistError):
    default_message = "No message element found on page."


class ThreadNotFound(ReplyAssistError):
    default_message = "Message not found"


class EmptyThread(ReplyAssistError):
    default_message = "Thread empty"


class MalformedPayload(ReplyAssistError):
    """Raised when a message body cannot be decoded."""

    default_message = "Failed to decode message body"


class AuthFailure(ReplyAssistError):
    default_message = "Authorization failed"


class NetworkFailure(ReplyAssistError):
    default_message = "Network request failed"

    def __init__(self, message: str | None = None, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class BackendFailure(ReplyAssistError):
    default_message = "Backend error"

    def __init__(self, message: str | None = None, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class AlreadyInFlight(ReplyAssistError):
    advisory = True
    default_message = "Already generating a reply, please wait..."


class NoTargetSurface(ReplyAssistError):
    advisory = True
    default_message = "Reply generated, but no Gmail compose box was found."
