"""API error classes.

Every error a route can raise on purpose is an APIError. The exception
handlers in main.py render it as ``{"error": {"code", "message", "details"}}``
with the class's HTTP status.

Subclasses declare their status, code and default message as class
attributes; only errors whose message depends on arguments override
``__init__``.
"""


class APIError(Exception):
    """Base class for errors rendered into the error envelope.

    Attributes:
        status_code: HTTP status returned to the client.
        code: Machine-readable error code clients branch on.
        message: Human-readable explanation. Never contains secrets or codes.
        details: Optional structured extras (field errors for validation).
    """

    status_code: int = 500
    code: str = "INTERNAL_ERROR"
    message: str = "An unexpected error occurred"

    def __init__(
        self,
        message: str | None = None,
        *,
        code: str | None = None,
        status_code: int | None = None,
        details: list[dict] | None = None,
    ) -> None:
        if message is not None:
            self.message = message
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class ValidationError(APIError):
    """Request content failed validation (400)."""

    status_code = 400
    code = "VALIDATION_ERROR"
    message = "Request validation failed"

    def __init__(
        self, message: str | None = None, details: list[dict] | None = None
    ) -> None:
        super().__init__(message, details=details)


class UnauthorizedError(APIError):
    """No session cookie resolved to a user (401)."""

    status_code = 401
    code = "UNAUTHORIZED"
    message = "Authentication required"


class NotFoundError(APIError):
    """Resource missing, or owned by someone else (404).

    Ownership failures deliberately look identical to missing rows so note
    ids of other users cannot be probed.
    """

    status_code = 404
    code = "NOT_FOUND"

    def __init__(self, resource: str, resource_id: str | None = None) -> None:
        if resource_id:
            super().__init__(f"{resource} with id '{resource_id}' not found")
        else:
            super().__init__(f"{resource} not found")


# =============================================================================
# Login code redemption
# =============================================================================


class LoginCodeError(APIError):
    """A submitted login code could not be redeemed (400).

    Concrete subclasses name the reason. Messages never echo the code.
    """

    status_code = 400
    code = "LOGIN_CODE_REJECTED"
    message = "Login code rejected"


class UserNotFoundError(LoginCodeError):
    """No user exists for the submitted email."""

    code = "USER_NOT_FOUND"
    message = "No account found for this email"


class InvalidCodeError(LoginCodeError):
    """No stored code digest matches the submission."""

    code = "INVALID_CODE"
    message = "Invalid login code"


class CodeAlreadyUsedError(LoginCodeError):
    """The newest matching code was already redeemed."""

    code = "CODE_ALREADY_USED"
    message = "This login code has already been used"


class CodeExpiredError(LoginCodeError):
    """The newest matching code is past its expiry."""

    code = "CODE_EXPIRED"
    message = "This login code has expired"


# =============================================================================
# Upstream failures
# =============================================================================


class EmailDeliveryError(APIError):
    """The email provider did not accept a message (502).

    Raised after the login code is stored; requesting another code is safe.
    """

    status_code = 502
    code = "EMAIL_DELIVERY_FAILED"
    message = "Could not send email, please try again"


class InternalError(APIError):
    """Unexpected server error (500). Never carries internal details."""
