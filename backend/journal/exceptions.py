"""Application error taxonomy.

Every error carries the HTTP status it maps to. The API layer renders any
``JournalError`` as ``{"error": message}`` with that status.
"""
from fastapi import status


class JournalError(Exception):
    """Base exception for all journal errors."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Internal server error"

    def __init__(self, message: str = None):
        """Initialize the exception.

        Args:
            message: Optional client-facing message overriding the class default.
        """
        self.message = message or self.message
        super().__init__(self.message)


class ValidationError(JournalError):
    """Raised when a required field is missing or empty."""

    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid request"


class DuplicateEmail(JournalError):
    """Raised when registering an email that already exists."""

    status_code = status.HTTP_400_BAD_REQUEST
    message = "Email already exists"


class InvalidCredentials(JournalError):
    """Raised for a bad email, password or verification code.

    The cause is never distinguished to the caller.
    """

    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Invalid credentials"


class Unauthorized(JournalError):
    """Raised when no bearer token is presented."""

    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Access denied"


class Forbidden(JournalError):
    """Raised for an invalid token or an insufficient role."""

    status_code = status.HTTP_403_FORBIDDEN
    message = "Forbidden"


class NotFound(JournalError):
    """Raised when an entry does not exist or is not owned by the caller."""

    status_code = status.HTTP_404_NOT_FOUND
    message = "Entry not found"


class EditWindowClosed(JournalError):
    """Raised when editing an owned entry after its creation day."""

    status_code = status.HTTP_403_FORBIDDEN
    message = "Entries can only be edited on the day they were written"


class NoPromptAvailable(JournalError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "No question available"


class NotifierError(JournalError):
    """Raised when a verification code could not be delivered."""

    message = "Failed to send verification code"


class StorageError(JournalError):
    message = "Internal server error"
