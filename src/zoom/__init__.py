"""
Zoom App client module.

This module provides integration with the Zoom App platform:

- ZoomAppConfig: Platform credentials resolved from environment/.env file
- ZoomClient: HTTP client for the /v2 REST API and OAuth endpoints
- AuthSigner strategies: BearerForward, SelfSignedAssertion, ClientCredentialsBasic
- decrypt_context / get_app_context: x-zoom-app-context decryption
"""

from .cipher import CONTEXT_HEADER, decrypt_context, get_app_context
from .client import ZoomClient
from .config import ZoomAppConfig
from .exceptions import (
    ConfigurationError,
    ContextAuthenticationError,
    ContextError,
    MalformedContextError,
    MissingTokenError,
    SigningError,
    TruncatedContextError,
    ZoomAPIError,
    ZoomError,
    ZoomTransportError,
)
from .models import AccessToken, ApiResponse, DeepLinkResult, RequestSpec
from .signer import (
    AuthSigner,
    BearerForward,
    ClientCredentialsBasic,
    SelfSignedAssertion,
    build_signer,
)

__all__ = [
    # Configuration
    "ZoomAppConfig",
    # Client
    "ZoomClient",
    "RequestSpec",
    "ApiResponse",
    "AccessToken",
    "DeepLinkResult",
    # Signers
    "AuthSigner",
    "BearerForward",
    "SelfSignedAssertion",
    "ClientCredentialsBasic",
    "build_signer",
    # App context
    "CONTEXT_HEADER",
    "decrypt_context",
    "get_app_context",
    # Exceptions
    "ZoomError",
    "ConfigurationError",
    "SigningError",
    "MissingTokenError",
    "ZoomTransportError",
    "ZoomAPIError",
    "ContextError",
    "MalformedContextError",
    "TruncatedContextError",
    "ContextAuthenticationError",
]
