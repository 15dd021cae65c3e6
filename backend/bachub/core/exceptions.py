"""
Custom Exceptions for Bac-Hub
=============================

Raised by the storage and service layers, translated to JSON responses by
the exception handlers registered in ``bachub.main``.

Usage:
    from bachub.core.exceptions import DocumentNotFoundError

    document = await storage.get_document(document_id)
    if not document:
        raise DocumentNotFoundError(document_id)
"""

from typing import Optional, Any, Dict


class BacHubError(Exception):
    """Base exception for all Bac-Hub errors"""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details
        }


# ============================================
# Authentication & Authorization Errors
# ============================================

class AuthenticationError(BacHubError):
    """User authentication failed"""

    status_code = 401

    def __init__(self, message: str = "Not authenticated"):
        super().__init__(message, code="AUTH_FAILED")


class InvalidCredentialsError(AuthenticationError):
    """Username/password pair rejected"""

    def __init__(self):
        super().__init__("Invalid username or password")
        self.code = "INVALID_CREDENTIALS"


class SessionExpiredError(AuthenticationError):
    """Session cookie refers to a session that no longer exists"""

    def __init__(self):
        super().__init__("Session expired")
        self.code = "SESSION_EXPIRED"


class AuthorizationError(BacHubError):
    """User not authorized for this action"""

    status_code = 403

    def __init__(self, message: str = "Admin access required"):
        super().__init__(message, code="NOT_AUTHORIZED")


# ============================================
# Resource Errors (404-type)
# ============================================

class ResourceNotFoundError(BacHubError):
    """Base class for not found errors"""

    status_code = 404

    def __init__(self, resource_type: str, resource_id: Any):
        super().__init__(
            f"{resource_type} not found",
            code=f"{resource_type.upper()}_NOT_FOUND",
            details={"resource_type": resource_type, "resource_id": resource_id}
        )


class UserNotFoundError(ResourceNotFoundError):
    def __init__(self, user_id: int):
        super().__init__("User", user_id)


class SubjectNotFoundError(ResourceNotFoundError):
    def __init__(self, subject_id: int):
        super().__init__("Subject", subject_id)


class DocumentNotFoundError(ResourceNotFoundError):
    def __init__(self, document_id: int):
        super().__init__("Document", document_id)


class FavoriteNotFoundError(ResourceNotFoundError):
    def __init__(self, document_id: int):
        super().__init__("Favorite", document_id)


class AnnouncementNotFoundError(ResourceNotFoundError):
    def __init__(self, announcement_id: int):
        super().__init__("Announcement", announcement_id)


# ============================================
# Validation Errors (400-type)
# ============================================

class ValidationError(BacHubError):
    """Input validation failed"""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(message, code="VALIDATION_ERROR", details=details)


class DuplicateRecordError(ValidationError):
    """A unique field already holds this value"""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message, field=field)
        self.code = "DUPLICATE_RECORD"


class DuplicateFavoriteError(DuplicateRecordError):
    """(user, document) pair is already a favorite"""

    def __init__(self, user_id: int, document_id: int):
        super().__init__("Document already favorited")
        self.code = "ALREADY_FAVORITED"
        self.details = {"user_id": user_id, "document_id": document_id}


class SelfDeletionError(ValidationError):
    """Admin attempted to delete their own account"""

    def __init__(self):
        super().__init__("Cannot delete your own account")
        self.code = "SELF_DELETION"


# ============================================
# Helper function for API responses
# ============================================

def error_response(error: BacHubError) -> Dict[str, Any]:
    """Convert exception to API error response format"""
    return {
        "detail": error.message,
        "error": error.to_dict()
    }
