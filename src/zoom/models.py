"""
Data models for Zoom API requests and responses.

These are value types: a RequestSpec is built per call and never shared,
and tokens returned by the OAuth flow are consumed immediately rather
than stored.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class RequestSpec:
    """
    Description of a single Zoom API call.

    Attributes:
        method: HTTP method (GET, POST, etc.)
        path: Endpoint path, relative to /v2 unless absolute is set
        url_parameters: Query parameters, encoded in insertion order
        body_parameters: Request body (JSON object, or form fields)
        expects_body: False for calls whose only success is 204 No Content
        absolute: Path is rooted at the host rather than the /v2 prefix
        form_encoded: Send body as application/x-www-form-urlencoded
    """

    method: str
    path: str
    url_parameters: Dict[str, Any] = field(default_factory=dict)
    body_parameters: Optional[Any] = None
    expects_body: bool = True
    absolute: bool = False
    form_encoded: bool = False


@dataclass
class ApiResponse:
    """
    Successful Zoom API response.

    Attributes:
        status_code: HTTP status code
        body: Raw response body (empty for 204)
        data: Decoded JSON body, None when no body was expected
    """

    status_code: int
    body: bytes = b""
    data: Optional[Any] = None


@dataclass
class AccessToken:
    """
    OAuth token returned by the Zoom token endpoint.

    Attributes:
        access_token: Short-lived access token for API calls
        token_type: Token type (typically "bearer")
        expires_in: Token lifetime in seconds
        scope: Granted OAuth scopes
        refresh_token: Refresh token, if Zoom returned one
    """

    access_token: str
    token_type: str = "bearer"
    expires_in: int = 0
    scope: str = ""
    refresh_token: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AccessToken":
        """
        Create AccessToken from a token endpoint response.

        Raises:
            KeyError: If access_token is missing
            ValueError: If access_token is empty or expires_in is not numeric
        """
        access_token = data["access_token"]
        if not access_token:
            raise ValueError("access_token is empty")
        return cls(
            access_token=access_token,
            token_type=data.get("token_type", "bearer"),
            expires_in=int(data.get("expires_in", 0)),
            scope=data.get("scope", ""),
            refresh_token=data.get("refresh_token", ""),
        )


@dataclass
class DeepLinkResult:
    """Deep link that re-opens the app inside the Zoom client."""

    url: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DeepLinkResult":
        url = data["deeplink"]
        if not url:
            raise ValueError("deeplink is empty")
        return cls(url=url)
