"""Error types surfaced to API callers."""


class MacroLensError(Exception):
    """Base error carrying the HTTP status and client-visible message."""

    status_code = 500
    message = "Internal server error"

    def __init__(self, message: str | None = None, details: str | None = None) -> None:
        super().__init__(message or self.message)
        self.message = message or self.message
        self.details = details

    def to_payload(self) -> dict[str, str]:
        """Return the JSON error envelope for this error."""
        payload = {"error": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class UnauthorizedError(MacroLensError):
    """Request has no valid session."""

    status_code = 401
    message = "Unauthorized"


class DuplicateAccountError(MacroLensError):
    """Signup email is already registered."""

    status_code = 400
    message = "Email already exists"


class InvalidCredentialsError(MacroLensError):
    """Login email/password pair did not match."""

    status_code = 401
    message = "Invalid credentials"


class BadRequestError(MacroLensError):
    """Request payload is unusable."""

    status_code = 400
    message = "Invalid request"


class NotConfiguredError(MacroLensError):
    """AI provider credential is missing."""

    status_code = 500
    message = "AI provider API key not configured"


class ProviderUnavailableError(MacroLensError):
    """AI provider call failed."""

    status_code = 500
    message = "AI provider request failed"


class UnexpectedProviderResponseError(MacroLensError):
    """AI provider answered with output that could not be normalized."""

    status_code = 500
    message = "Unexpected AI provider response"


class PersistenceError(MacroLensError):
    """Relational store rejected a read or write."""

    status_code = 500
    message = "Failed to save record"


class NoResultsError(MacroLensError):
    """Free-text extraction produced nothing usable."""

    status_code = 404
    message = "No venues found. Try a more specific query."
