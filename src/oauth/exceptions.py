"""
OAuth exception classes for Zoom App integration.

This module defines the exceptions raised by the authorization-code flow.
Each wraps the underlying Zoom client error as its cause so the HTTP layer
can log the detail and answer with a safe message.
"""


class ZoomOAuthError(Exception):
    """Base exception for all Zoom OAuth flow errors."""

    pass


class AuthorizationError(ZoomOAuthError):
    """OAuth authorization flow error (bad or missing authorization code)."""

    pass


class TokenExchangeError(ZoomOAuthError):
    """Failed to exchange authorization code for an access token."""

    pass


class DeepLinkError(ZoomOAuthError):
    """Failed to retrieve a deep link with the access token."""

    pass
