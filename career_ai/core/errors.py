"""
Error taxonomy for the guidance API.

Every error is terminal for the current request. main.py maps each class to
an HTTP status; the caller only distinguishes success, quota exceeded and
generic failure.
"""

from typing import Optional


class CareerAIError(Exception):
    """Base class for all domain errors."""

    public_message = "Something went wrong. Please try again."

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.public_message)
        self.message = message or self.public_message


class AuthenticationRequired(CareerAIError):
    """Missing, invalid or expired credential."""

    public_message = "Authentication required"


class RecordNotFound(CareerAIError):
    """No quota record exists for the authenticated user."""

    public_message = "User profile not found"


class InputValidationError(CareerAIError):
    """Required request fields are missing or invalid."""

    public_message = "Missing required fields: query_type and profile_text"


class QuotaExceeded(CareerAIError):
    """Daily query limit reached for the user's plan."""

    public_message = "Daily query limit reached"

    def __init__(self, limit: int, plan: str, upgrade_message: str):
        super().__init__(self.public_message)
        self.limit = limit
        self.plan = plan
        self.upgrade_message = upgrade_message


class GatewayError(CareerAIError):
    """The completion API could not be reached or answered with an error status."""

    public_message = "AI service error. Please try again."

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class MalformedResponse(CareerAIError):
    """The completion API answered, but not with the expected JSON shape."""

    public_message = "AI service error. Please try again."

    def __init__(self, message: Optional[str] = None, raw_content: Optional[str] = None):
        super().__init__(message)
        self.raw_content = raw_content


class StoreUnavailable(CareerAIError):
    """Database read or write failed; the request is denied."""

    public_message = "Service temporarily unavailable. Please try again."
