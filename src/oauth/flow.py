"""
OAuth flow for Zoom App installation.

This module runs the two-step sequence behind the ``/auth`` redirect:

- Code exchange (authorization code → access token, HTTP Basic auth)
- Deep link retrieval (access token → URL that re-opens the app in Zoom)

Nothing is cached or persisted: each code yields a fresh token that is
used once for the deep link call and then discarded.
"""

import json
import logging
from typing import Optional

from src.zoom import endpoints
from src.zoom.client import ZoomClient
from src.zoom.config import ZoomAppConfig
from src.zoom.exceptions import (
    ConfigurationError,
    SigningError,
    ZoomAPIError,
    ZoomTransportError,
)
from src.zoom.models import AccessToken, DeepLinkResult, RequestSpec
from src.zoom.signer import BearerForward, ClientCredentialsBasic

from .exceptions import AuthorizationError, DeepLinkError, TokenExchangeError

logger = logging.getLogger(__name__)

# Entry role requested for the deep link
DEEPLINK_ACTION = {"url": "/", "role_name": "Owner", "verified": 1, "role_id": 0}


class OAuthFlow:
    """
    Exchanges an authorization code for a deep link.

    Example:
        flow = OAuthFlow(ZoomAppConfig.resolve(".env"))
        redirect_to = flow.handle_auth(code)
    """

    def __init__(self, config: ZoomAppConfig, client: Optional[ZoomClient] = None):
        """
        Initialize OAuth flow.

        Args:
            config: Platform credentials
            client: Zoom API client (creates default if not provided)
        """
        self.config = config
        self.client = client or ZoomClient(config)

    def exchange_code(self, code: str) -> AccessToken:
        """
        Exchange authorization code for an access token.

        Args:
            code: Code received on the OAuth redirect

        Returns:
            AccessToken from the Zoom token endpoint

        Raises:
            AuthorizationError: If the code is empty
            ConfigurationError: If client credentials or redirect URL are missing
            TokenExchangeError: If the exchange fails
        """
        if not code:
            raise AuthorizationError("No authorization code received")

        self.config.require_client_credentials()
        if not self.config.redirect_url:
            raise ConfigurationError("redirect_url cannot be empty")

        logger.info("Exchanging authorization code for access token")

        spec = RequestSpec(
            method="POST",
            path=endpoints.OAUTH_TOKEN,
            body_parameters={
                "code": code,
                "grant_type": "authorization_code",
                "redirect_uri": self.config.redirect_url,
            },
            absolute=True,
            form_encoded=True,
        )

        try:
            response = self.client.execute(spec, ClientCredentialsBasic())
            token = AccessToken.from_dict(response.data)
        except ZoomTransportError as e:
            raise TokenExchangeError(f"Network error during token exchange: {e}") from e
        except ZoomAPIError as e:
            raise TokenExchangeError(
                f"Token exchange failed with status {e.status_code}: {e.message}"
            ) from e
        except SigningError as e:
            raise TokenExchangeError(f"Could not authenticate token request: {e}") from e
        except (KeyError, TypeError, ValueError) as e:
            logger.error(f"Invalid response from token endpoint: {e}")
            raise TokenExchangeError(f"Invalid response from token endpoint: {e}") from e

        logger.info("Successfully obtained access token")
        return token

    def fetch_deeplink(self, access_token: str) -> DeepLinkResult:
        """
        Request a deep link into the app using the access token.

        Args:
            access_token: Token from exchange_code

        Returns:
            DeepLinkResult with the deep link URL

        Raises:
            DeepLinkError: If the request fails or the response has no deeplink
        """
        spec = RequestSpec(
            method="POST",
            path=endpoints.ZOOMAPP_DEEPLINK,
            body_parameters={"action": json.dumps(DEEPLINK_ACTION)},
        )

        try:
            response = self.client.execute(spec, BearerForward(access_token))
            result = DeepLinkResult.from_dict(response.data)
        except SigningError as e:
            raise DeepLinkError(f"Cannot request deep link: {e}") from e
        except ZoomTransportError as e:
            raise DeepLinkError(f"Network error retrieving deep link: {e}") from e
        except ZoomAPIError as e:
            raise DeepLinkError(
                f"Deep link request failed with status {e.status_code}: {e.message}"
            ) from e
        except (KeyError, TypeError, ValueError) as e:
            logger.error(f"Invalid response from deep link endpoint: {e}")
            raise DeepLinkError(f"Invalid response from deep link endpoint: {e}") from e

        logger.info("Successfully retrieved deep link")
        return result

    def handle_auth(self, code: str) -> str:
        """
        Run the complete flow for an authorization code.

        Args:
            code: Code received on the OAuth redirect

        Returns:
            Deep link URL to redirect the browser to

        Raises:
            AuthorizationError, ConfigurationError, TokenExchangeError, DeepLinkError
        """
        token = self.exchange_code(code)
        return self.fetch_deeplink(token.access_token).url
