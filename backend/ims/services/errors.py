"""Domain errors raised by the business services.

These are synchronous validation failures. They are always raised before the
cache is touched, and the API turns them into ``{"success": false, ...}``.
"""


class DomainError(Exception):
    """Base class for domain validation failures."""

    code = "domain_error"
    status_code = 400
    default_message = "Operation rejected"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"success": False, "code": self.code, "message": self.message}


class NotAuthenticated(DomainError):
    code = "not_authenticated"
    status_code = 401
    default_message = "Not logged in"


class PermissionDenied(DomainError):
    code = "permission_denied"
    status_code = 403
    default_message = "Access denied"


class InvalidCredentials(DomainError):
    code = "invalid_credentials"
    status_code = 401
    default_message = "Invalid credentials. Please check capitalization."


class AccountNotApproved(DomainError):
    code = "account_not_approved"
    status_code = 403
    default_message = "Account not approved yet"


class DuplicateUsername(DomainError):
    code = "duplicate_username"
    status_code = 409
    default_message = "User Name already taken"


class UserNotFound(DomainError):
    code = "user_not_found"
    status_code = 404
    default_message = "User not found"


class InsufficientStock(DomainError):
    code = "insufficient_stock"
    status_code = 409
    default_message = "Insufficient Stock"


class ValidationFailed(DomainError):
    code = "validation_failed"
    status_code = 422
    default_message = "Invalid input"
