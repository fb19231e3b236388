"""
OAuth 2.0 module for Zoom App integration.

This module implements the Zoom App authorization sequence on the server:
the authorization code received on the ``/auth`` redirect is exchanged
for an access token, which is then used once to fetch the deep link that
re-opens the app inside the Zoom client.

Public API:
    OAuthFlow: Code exchange and deep link retrieval
    create_app: Flask app exposing /install, /auth, /context and /health

Exceptions:
    ZoomOAuthError: Base exception
    AuthorizationError: Bad or missing authorization code
    TokenExchangeError: Token exchange failed
    DeepLinkError: Deep link retrieval failed
"""

from .auth_server import create_app
from .exceptions import (
    AuthorizationError,
    DeepLinkError,
    TokenExchangeError,
    ZoomOAuthError,
)
from .flow import DEEPLINK_ACTION, OAuthFlow

__all__ = [
    # Flow
    "OAuthFlow",
    "DEEPLINK_ACTION",
    # HTTP
    "create_app",
    # Exceptions
    "ZoomOAuthError",
    "AuthorizationError",
    "TokenExchangeError",
    "DeepLinkError",
]
