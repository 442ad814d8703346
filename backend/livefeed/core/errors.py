# livefeed/core/errors.py
"""
Typed rejections returned to API callers.

Every failure a client can observe is one of the ServiceError subclasses below.
Each carries a stable machine-checkable ``code`` plus a human-readable ``message``;
the API layer renders them as ``{"success": false, "error": {"code", "message"}}``.
"""


class ServiceError(Exception):
    """Base class for all client-visible rejections."""

    code = "service_error"
    status_code = 500
    default_message = "Request failed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message}


class ChallengeFailed(ServiceError):
    code = "challenge_failed"
    status_code = 403
    default_message = "Human verification failed"


class DuplicateIdentity(ServiceError):
    code = "duplicate_identity"
    status_code = 409
    default_message = "User already exists"


class InvalidCredentials(ServiceError):
    # Deliberately identical for unknown address and wrong password
    code = "invalid_credentials"
    status_code = 401
    default_message = "Invalid credentials"


class InvalidInput(ServiceError):
    code = "invalid_input"
    status_code = 400
    default_message = "Invalid input"


class Unauthenticated(ServiceError):
    code = "unauthenticated"
    status_code = 401
    default_message = "Authentication required"


class StorageError(ServiceError):
    code = "storage_error"
    status_code = 500
    default_message = "Storage unavailable"


# -------- collaborator (store) failures, never rendered directly --------
class StoreError(Exception):
    """Raised by the persistence layer when the database call fails."""


class StoreConflict(StoreError):
    """Raised when a uniqueness constraint rejects a write."""
