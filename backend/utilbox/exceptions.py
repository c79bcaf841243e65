"""
Utilbox Backend: Custom Exception Hierarchy
============================================

What:  Application-specific exceptions for the different error scenarios.
How:   Each exception carries a user-facing message and an optional context
       dict. Global exception handlers (registered in main.py) catch these and
       return the `{success: false, message}` envelope with the right status.
Who:   Raised by services and the credential store; caught by global handlers.

Exception Hierarchy:
    UtilboxError (base)
    ├── ValidationError        → 400 Bad Request (client can fix)
    ├── AuthenticationError    → 401 Unauthorized (generic message)
    └── CredentialStoreError   → fatal at startup, 503 if hit during a request
"""

from typing import Any, Dict, Optional


class UtilboxError(Exception):
    """
    Base exception for all Utilbox application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(UtilboxError):
    """
    Raised when client input fails validation.

    When:    Missing required fields, unparseable numbers, unsupported
             operator, division by zero.
    HTTP:    400 Bad Request

    Example response:
        {
            "success": false,
            "message": "Cannot divide by zero",
            "error": "validation_error",
            "requestId": "1f2e3d4c"
        }
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class AuthenticationError(UtilboxError):
    """
    Raised when a username/password pair matches no loaded credential.

    HTTP:    401 Unauthorized

    The message is the same whether the username is unknown or the password
    is wrong, so a caller cannot discover which usernames exist.
    """

    def __init__(
        self,
        message: str = "Invalid username or password",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class CredentialStoreError(UtilboxError):
    """
    Raised when the credential table cannot be loaded.

    When:    File missing, unreadable, not UTF-8, header lacks the
             `username`/`password` columns, or a row is missing a value.
    Effect:  Raised from the application lifespan, which aborts uvicorn
             startup before the listener accepts any connection.
    """

    def __init__(
        self,
        message: str = "Credential store could not be loaded",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
