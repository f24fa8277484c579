# src/chatgate/core/errors.py
from __future__ import annotations


class GatewayError(Exception):
    """
    Base error. Every subclass carries the HTTP status it maps to, so the
    FastAPI boundary can turn any of them into {"error": message}.
    """
    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(GatewayError):
    """Missing or unusable request field. Raised before any provider call."""
    status_code = 400


class CredentialError(GatewayError):
    """No candidate model answered the probe for this API key."""
    status_code = 400


class SessionMissingError(GatewayError):
    """Chat requested for a session id that was never set up."""
    status_code = 400


class ProviderError(GatewayError):
    """The provider call failed: HTTP error, timeout, transport or empty response."""
    status_code = 500

    def __init__(self, message: str, *, model: str | None = None, status: int | None = None) -> None:
        super().__init__(message)
        self.model = model
        self.status = status
