"""Exceptions for Zoom configuration, API calls and app context decryption."""

from typing import Optional


class ZoomError(Exception):
    """Base exception for all Zoom client errors."""

    pass


class ConfigurationError(ZoomError):
    """Zoom App configuration error (missing or invalid configuration)."""

    pass


class SigningError(ZoomError):
    """Could not attach an Authorization header (missing signing key)."""

    pass


class MissingTokenError(SigningError):
    """Bearer forwarding was requested without an access token."""

    pass


class ZoomTransportError(ZoomError):
    """Network, DNS or TLS failure before a response was received."""

    pass


class ZoomAPIError(ZoomError):
    """
    Zoom responded with a non-success status or an error envelope.

    Attributes:
        status_code: HTTP status code of the response
        message: Error message (from the Zoom error envelope when present)
        raw_body: Undecoded response body
    """

    def __init__(
        self, status_code: int, message: str, raw_body: Optional[bytes] = None
    ):
        super().__init__(f"Zoom API error ({status_code}): {message}")
        self.status_code = status_code
        self.message = message
        self.raw_body = raw_body or b""


class ContextError(ZoomError):
    """Base exception for x-zoom-app-context failures."""

    pass


class MalformedContextError(ContextError):
    """Context header is empty, not base64url, or has an unusable IV."""

    pass


class TruncatedContextError(ContextError):
    """Context envelope ends before a declared length boundary."""

    pass


class ContextAuthenticationError(ContextError):
    """
    AEAD authentication failed.

    Raised for a wrong key or a tampered IV, AAD, ciphertext or tag.
    No plaintext is ever attached to this error.
    """

    pass
