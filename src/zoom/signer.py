"""
Request signers for Zoom API calls.

Every outbound request gets its Authorization header from an AuthSigner.
Two strategies exist for API calls and one deployment picks exactly one
of them (see build_signer):

- BearerForward: forwards a previously obtained OAuth access token
- SelfSignedAssertion: short-lived HS256 JWT signed with the client secret

ClientCredentialsBasic is used only for the OAuth token endpoint.
"""

import logging
import time
from abc import ABC, abstractmethod
from base64 import b64encode
from typing import Optional

import jwt
import requests

from .config import ZoomAppConfig
from .exceptions import ConfigurationError, MissingTokenError, SigningError

logger = logging.getLogger(__name__)

# Lifetime of self-signed assertions in seconds
ASSERTION_TTL_SECONDS = 5000


class AuthSigner(ABC):
    """Attaches an Authorization header to an outbound request."""

    @abstractmethod
    def sign(
        self, request: requests.PreparedRequest, credentials: ZoomAppConfig
    ) -> requests.PreparedRequest:
        """
        Return the request with an Authorization header attached.

        Args:
            request: Prepared request to sign
            credentials: Platform credentials

        Returns:
            The same request, signed

        Raises:
            SigningError: If the signing material is missing
        """


class BearerForward(AuthSigner):
    """Forward an OAuth access token verbatim as ``Bearer <token>``."""

    def __init__(self, token: Optional[str]):
        self.token = token

    def sign(
        self, request: requests.PreparedRequest, credentials: ZoomAppConfig
    ) -> requests.PreparedRequest:
        if not self.token:
            raise MissingTokenError("No access token available to forward")
        request.headers["Authorization"] = f"Bearer {self.token}"
        return request


class SelfSignedAssertion(AuthSigner):
    """
    Sign requests with a short-lived JWT.

    The assertion carries ``iss`` (client id) and ``exp`` (now + TTL) and
    is signed HS256 with the client secret. A fresh assertion is minted
    for every request.
    """

    def __init__(self, ttl_seconds: int = ASSERTION_TTL_SECONDS):
        self.ttl_seconds = ttl_seconds

    def create_assertion(self, credentials: ZoomAppConfig) -> str:
        try:
            credentials.require_client_credentials()
        except ConfigurationError as e:
            raise SigningError(f"Cannot sign assertion: {e}") from e

        claims = {
            "iss": credentials.client_id,
            "exp": int(time.time()) + self.ttl_seconds,
        }
        return jwt.encode(
            claims,
            credentials.client_secret,
            algorithm="HS256",
            headers={"alg": "HS256", "typ": "JWT"},
        )

    def sign(
        self, request: requests.PreparedRequest, credentials: ZoomAppConfig
    ) -> requests.PreparedRequest:
        assertion = self.create_assertion(credentials)
        request.headers["Authorization"] = f"Bearer {assertion}"
        return request


class ClientCredentialsBasic(AuthSigner):
    """HTTP Basic auth with (client_id, client_secret) for the token endpoint."""

    def sign(
        self, request: requests.PreparedRequest, credentials: ZoomAppConfig
    ) -> requests.PreparedRequest:
        try:
            credentials.require_client_credentials()
        except ConfigurationError as e:
            raise SigningError(f"Cannot build Basic credentials: {e}") from e

        pair = f"{credentials.client_id}:{credentials.client_secret}"
        request.headers["Authorization"] = f"Basic {b64encode(pair.encode()).decode()}"
        return request


def build_signer(
    config: ZoomAppConfig, access_token: Optional[str] = None
) -> AuthSigner:
    """
    Build the signer selected by the deployment's auth_strategy.

    Args:
        config: Platform credentials (auth_strategy is "bearer" or "jwt")
        access_token: Token to forward when the strategy is "bearer"

    Returns:
        AuthSigner instance
    """
    if config.auth_strategy == "jwt":
        return SelfSignedAssertion()
    return BearerForward(access_token)
