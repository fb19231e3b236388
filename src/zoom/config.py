"""
Configuration for Zoom App integration.

This module provides configuration management for the Zoom App client.
Configuration can be loaded from environment variables, from a
line-oriented ``key=value`` credentials file, or provided programmatically.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Union
from urllib.parse import urlencode, urlparse

from dotenv import dotenv_values

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

AUTH_STRATEGIES = ("bearer", "jwt")

DEFAULT_HOST = "zoom.us"
DEFAULT_AUTH_STRATEGY = "bearer"
DEFAULT_TIMEOUT = 30.0

API_VERSION = "/v2"


def _normalize_host(host: str) -> str:
    """Strip scheme and trailing path so ``https://zoom.us/`` becomes ``zoom.us``."""
    host = host.strip()
    if "://" in host:
        host = urlparse(host).netloc
    return host.rstrip("/")


@dataclass(frozen=True)
class ZoomAppConfig:
    """
    Configuration for a Zoom App (platform credentials).

    Immutable after resolution; a single instance is shared read-only by
    the API client, the OAuth flow and the context decryption helpers.

    Attributes:
        host: Zoom host without scheme (default: zoom.us)
        client_id: Zoom App client ID from the Marketplace
        client_secret: Zoom App client secret from the Marketplace
        redirect_url: OAuth redirect URL registered for the app
        session_secret: Secret for signing session cookies (kept separate
            from the context decryption key)
        auth_strategy: Signer used for API calls: "bearer" or "jwt"
        timeout: HTTP timeout in seconds (0 disables the explicit timeout)
    """

    host: str = DEFAULT_HOST
    client_id: str = ""
    client_secret: str = ""
    redirect_url: str = ""
    session_secret: str = ""
    auth_strategy: str = DEFAULT_AUTH_STRATEGY
    timeout: float = DEFAULT_TIMEOUT

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        host = _normalize_host(self.host or "")
        if not host:
            raise ConfigurationError("host cannot be empty")
        object.__setattr__(self, "host", host)

        if self.auth_strategy not in AUTH_STRATEGIES:
            raise ConfigurationError(
                f"auth_strategy must be one of {', '.join(AUTH_STRATEGIES)}, "
                f"got {self.auth_strategy!r}"
            )

        if self.timeout < 0:
            raise ConfigurationError("timeout cannot be negative")

    @property
    def oauth_base_url(self) -> str:
        """Root URL of the Zoom host (OAuth endpoints live here)."""
        return f"https://{self.host}"

    @property
    def api_base_url(self) -> str:
        """Versioned REST API base URL (e.g., https://zoom.us/v2)."""
        return f"{self.oauth_base_url}{API_VERSION}"

    @property
    def token_url(self) -> str:
        return f"{self.oauth_base_url}/oauth/token"

    @property
    def authorization_url(self) -> str:
        return f"{self.oauth_base_url}/oauth/authorize"

    def require_client_credentials(self) -> None:
        """
        Ensure client credentials are present before a signed request.

        Raises:
            ConfigurationError: If client_id or client_secret is empty
        """
        if not self.client_id:
            raise ConfigurationError("client_id cannot be empty")
        if not self.client_secret:
            raise ConfigurationError("client_secret cannot be empty")

    def generate_authorization_url(self, state: Optional[str] = None) -> str:
        """
        Generate the Zoom App install/authorization URL.

        Args:
            state: Optional opaque state echoed back on the redirect

        Returns:
            Complete authorization URL with query parameters

        Raises:
            ConfigurationError: If client_id or redirect_url is missing
        """
        if not self.client_id:
            raise ConfigurationError("client_id cannot be empty")
        if not self.redirect_url:
            raise ConfigurationError("redirect_url cannot be empty")

        params = {
            "response_type": "code",
            "client_id": self.client_id,
            "redirect_uri": self.redirect_url,
        }
        if state:
            params["state"] = state
        return f"{self.authorization_url}?{urlencode(params)}"

    def redacted(self) -> Dict[str, str]:
        """Configuration as a dict with secrets masked, for diagnostics."""

        def mask(value: str) -> str:
            return "<set>" if value else "<empty>"

        return {
            "host": self.host,
            "client_id": self.client_id or "<empty>",
            "client_secret": mask(self.client_secret),
            "redirect_url": self.redirect_url or "<empty>",
            "session_secret": mask(self.session_secret),
            "auth_strategy": self.auth_strategy,
            "timeout": str(self.timeout),
        }

    @classmethod
    def from_mapping(cls, values: Dict[str, str]) -> "ZoomAppConfig":
        """
        Build configuration from ZM_* keyed values.

        Missing or empty keys fall back to defaults; credentials default
        to empty strings.
        """

        def get(key: str, default: str = "") -> str:
            value = values.get(key)
            return value if value else default

        timeout_raw = get("ZM_HTTP_TIMEOUT", str(DEFAULT_TIMEOUT))
        try:
            timeout = float(timeout_raw)
        except ValueError as e:
            raise ConfigurationError(
                f"ZM_HTTP_TIMEOUT must be a number, got {timeout_raw!r}"
            ) from e

        return cls(
            host=get("ZM_HOST", DEFAULT_HOST),
            client_id=get("ZM_CLIENT_ID"),
            client_secret=get("ZM_CLIENT_SECRET"),
            redirect_url=get("ZM_REDIRECT_URL"),
            session_secret=get("SESSION_SECRET"),
            auth_strategy=get("ZM_AUTH_STRATEGY", DEFAULT_AUTH_STRATEGY).lower(),
            timeout=timeout,
        )

    @classmethod
    def from_env(cls) -> "ZoomAppConfig":
        """
        Load configuration from environment variables.

        Environment variables:
            ZM_HOST: Zoom host (default: zoom.us)
            ZM_CLIENT_ID: Zoom App client ID
            ZM_CLIENT_SECRET: Zoom App client secret
            ZM_REDIRECT_URL: OAuth redirect URL
            SESSION_SECRET: Session cookie secret
            ZM_AUTH_STRATEGY: "bearer" or "jwt" (default: bearer)
            ZM_HTTP_TIMEOUT: HTTP timeout in seconds (default: 30)

        Returns:
            ZoomAppConfig instance
        """
        return cls.from_mapping(dict(os.environ))

    @classmethod
    def from_file(cls, env_file: Union[str, Path]) -> "ZoomAppConfig":
        """
        Load configuration from a ``key=value`` credentials file only.

        Raises:
            ConfigurationError: If the file is missing or unreadable
        """
        return cls.from_mapping(read_env_file(env_file))

    @classmethod
    def resolve(cls, env_file: Optional[Union[str, Path]] = None) -> "ZoomAppConfig":
        """
        Resolve configuration from environment, credentials file and defaults.

        Environment variables take precedence over values in the file;
        keys missing from both fall back to defaults.

        Args:
            env_file: Optional path to a ``key=value`` credentials file

        Returns:
            ZoomAppConfig instance

        Raises:
            ConfigurationError: If env_file is given but cannot be read
        """
        values: Dict[str, str] = {}
        if env_file is not None:
            values.update(read_env_file(env_file))
        values.update({k: v for k, v in os.environ.items() if v})
        return cls.from_mapping(values)


def read_env_file(env_file: Union[str, Path]) -> Dict[str, str]:
    """
    Read a line-oriented ``key=value`` file.

    The first ``=`` splits key from value and whitespace is trimmed.
    Lines that are not assignments are ignored.

    Raises:
        ConfigurationError: If the file is missing or unreadable
    """
    path = Path(env_file)
    try:
        with open(path, "r", encoding="utf-8") as f:
            parsed = dotenv_values(stream=f, interpolate=False)
    except (IOError, OSError) as e:
        logger.error(f"Could not read credentials file {path}: {e}")
        raise ConfigurationError(f"Could not read credentials file {path}: {e}") from e

    values = {key: value for key, value in parsed.items() if value is not None}
    logger.debug(f"Loaded {len(values)} keys from {path}")
    return values
