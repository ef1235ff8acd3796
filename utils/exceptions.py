"""
Error taxonomy for the credential core.

Client-facing errors carry the HTTP status and envelope code used by
api.errors; everything else is internal and is collapsed at the boundary.
"""


class CredentialError(Exception):
    """Base class for every error raised by the credential core."""

    status = 500
    code = "INTERNAL_ERROR"
    message = "An unexpected error occurred"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)
        self.message = message or self.message


# Client errors

class ValidationError(CredentialError):
    status = 400
    code = "VALIDATION_ERROR"
    message = "Invalid input"


class Conflict(CredentialError):
    status = 409
    code = "CONFLICT"
    message = "Username already exists"


class InvalidCredentials(CredentialError):
    status = 401
    code = "UNAUTHORIZED"
    message = "Invalid credentials"


class Unauthorized(CredentialError):
    status = 401
    code = "UNAUTHORIZED"
    message = "Unauthorized"


# Token state (internal, collapsed into Unauthorized at the boundary)

class TokenError(CredentialError):
    status = 401
    code = "UNAUTHORIZED"
    message = "Invalid token"


class NotFound(TokenError):
    message = "Token not found"


class Expired(TokenError):
    message = "Token expired"


class UserNotFound(TokenError):
    message = "User not found"


class InvalidSignature(TokenError):
    message = "Invalid token signature"


class Malformed(TokenError):
    message = "Malformed token"


# Internal failures

class PersistenceError(CredentialError):
    message = "Credential store unavailable"


class HashingError(CredentialError):
    message = "Password hashing failed"


class EntropyError(CredentialError):
    message = "Secure random source unavailable"
