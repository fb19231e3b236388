"""
Zoom API client.

This module provides the HTTP client for Zoom's versioned REST API and
OAuth endpoints. It handles:

- Request construction (JSON or form body, ordered query string)
- Authorization via pluggable AuthSigner strategies
- Response classification (204-only calls, Zoom error envelopes)
- Error handling and logging

The client keeps no per-call state and may be shared across requests.
It never retries; retry policy belongs to the caller.
"""

import json
import logging
from typing import Any, Dict, Optional

import requests

from . import endpoints
from .config import ZoomAppConfig
from .exceptions import ZoomAPIError, ZoomTransportError
from .models import ApiResponse, RequestSpec
from .signer import AuthSigner, build_signer

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


def extract_error_message(payload: Any) -> Optional[str]:
    """
    Return the message of a Zoom error envelope, or None.

    Zoom REST errors look like ``{"code": 124, "message": "..."}``; OAuth
    endpoint errors look like ``{"reason": "...", "error": "invalid_grant"}``.
    """
    if not isinstance(payload, dict):
        return None
    if "code" in payload and "message" in payload:
        return str(payload["message"])
    if "error" in payload:
        return str(
            payload.get("reason") or payload.get("error_description") or payload["error"]
        )
    return None


class ZoomClient:
    """
    HTTP client for Zoom APIs.

    Example:
        config = ZoomAppConfig.resolve(".env")
        client = ZoomClient(config)

        response = client.execute(
            RequestSpec(method="POST", path=endpoints.ZOOMAPP_DEEPLINK,
                        body_parameters={"action": "..."}),
            BearerForward(access_token),
        )
        print(response.data["deeplink"])
    """

    def __init__(
        self,
        config: ZoomAppConfig,
        signer: Optional[AuthSigner] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize Zoom API client.

        Args:
            config: Platform credentials
            signer: Default signer for the convenience verbs
                    (built from config.auth_strategy if not provided)
            timeout: HTTP timeout in seconds (defaults to config.timeout;
                     0 means no explicit timeout)
            session: requests session to use (creates one if not provided)
        """
        self.config = config
        self.signer = signer or build_signer(config)
        self.timeout = config.timeout if timeout is None else timeout
        self.session = session or requests.Session()

        logger.debug(f"ZoomClient initialized for {config.host}")

    def _get_full_url(self, spec: RequestSpec) -> str:
        """
        Construct full URL for a request.

        Args:
            spec: Request description

        Returns:
            https://<host>/v2<path>, or https://<host><path> for absolute paths
        """
        path = spec.path if spec.path.startswith("/") else f"/{spec.path}"
        base = self.config.oauth_base_url if spec.absolute else self.config.api_base_url
        return f"{base}{path}"

    def _build_request(self, spec: RequestSpec) -> requests.PreparedRequest:
        """Serialize a RequestSpec into a prepared (unsigned) request."""
        if spec.form_encoded:
            content_type = FORM_CONTENT_TYPE
            data: Any = dict(spec.body_parameters or {})
        else:
            content_type = JSON_CONTENT_TYPE
            data = json.dumps(
                spec.body_parameters if spec.body_parameters is not None else {}
            )

        request = requests.Request(
            method=spec.method.upper(),
            url=self._get_full_url(spec),
            params=dict(spec.url_parameters) if spec.url_parameters else None,
            data=data,
            headers={"Content-Type": content_type, "Accept": JSON_CONTENT_TYPE},
        )
        return self.session.prepare_request(request)

    def execute(self, spec: RequestSpec, signer: AuthSigner) -> ApiResponse:
        """
        Build, sign and send a request, then classify the response.

        Args:
            spec: Request description
            signer: Signer that attaches the Authorization header

        Returns:
            ApiResponse (data holds decoded JSON when a body is expected)

        Raises:
            SigningError: If the signer has no signing material
            ZoomTransportError: On network, DNS or TLS failure
            ZoomAPIError: On a non-success status, an error envelope or
                          an undecodable body
        """
        prepared = signer.sign(self._build_request(spec), self.config)

        # Log request (never the Authorization header or body)
        logger.debug(f"{prepared.method} {prepared.url}")

        try:
            response = self.session.send(prepared, timeout=self.timeout or None)
        except requests.RequestException as e:
            logger.error(f"Network error calling Zoom ({spec.method} {spec.path}): {e}")
            raise ZoomTransportError(f"Network error calling Zoom: {e}") from e

        logger.debug(f"Response: {response.status_code}")

        if not spec.expects_body:
            return self._handle_head_only(response)
        return self._handle_with_body(response)

    def _handle_head_only(self, response: requests.Response) -> ApiResponse:
        """Calls without a response body succeed only with 204 No Content."""
        if response.status_code != 204:
            body = response.content or b""
            message = extract_error_message(_decode_json(body)) or (
                response.reason or "Unexpected status"
            )
            logger.error(f"Zoom API error ({response.status_code}): {message}")
            raise ZoomAPIError(response.status_code, message, body)

        return ApiResponse(status_code=204)

    def _handle_with_body(self, response: requests.Response) -> ApiResponse:
        body = response.content or b""
        payload = _decode_json(body)
        error_message = extract_error_message(payload)

        if not 200 <= response.status_code < 300:
            message = error_message or response.reason or "Request failed"
            logger.error(f"Zoom API error ({response.status_code}): {message}")
            raise ZoomAPIError(response.status_code, message, body)

        if error_message is not None:
            logger.error(
                f"Zoom API error envelope with status {response.status_code}: "
                f"{error_message}"
            )
            raise ZoomAPIError(response.status_code, error_message, body)

        if payload is None:
            logger.error(f"Invalid JSON in Zoom response ({response.status_code})")
            raise ZoomAPIError(
                response.status_code, "Response body is not valid JSON", body
            )

        return ApiResponse(status_code=response.status_code, body=body, data=payload)

    def request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json_data: Optional[Any] = None,
        expects_body: bool = True,
        signer: Optional[AuthSigner] = None,
    ) -> ApiResponse:
        """Execute a /v2 API call signed with the default (or given) signer."""
        spec = RequestSpec(
            method=method,
            path=path,
            url_parameters=params or {},
            body_parameters=json_data,
            expects_body=expects_body,
        )
        return self.execute(spec, signer or self.signer)

    def get(
        self,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        signer: Optional[AuthSigner] = None,
    ) -> Any:
        """
        Make authenticated GET request.

        Returns:
            Decoded JSON response
        """
        return self.request("GET", path, params=params, signer=signer).data

    def post(
        self,
        path: str,
        json_data: Optional[Any] = None,
        params: Optional[Dict[str, Any]] = None,
        signer: Optional[AuthSigner] = None,
    ) -> Any:
        """
        Make authenticated POST request.

        Returns:
            Decoded JSON response
        """
        return self.request(
            "POST", path, params=params, json_data=json_data, signer=signer
        ).data

    def patch(
        self,
        path: str,
        json_data: Optional[Any] = None,
        signer: Optional[AuthSigner] = None,
    ) -> None:
        """Make authenticated PATCH request (Zoom answers 204 No Content)."""
        self.request("PATCH", path, json_data=json_data, expects_body=False, signer=signer)

    def delete(
        self,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        signer: Optional[AuthSigner] = None,
    ) -> None:
        """Make authenticated DELETE request (Zoom answers 204 No Content)."""
        self.request("DELETE", path, params=params, expects_body=False, signer=signer)

    def get_user(self, user_id: str = "me", signer: Optional[AuthSigner] = None) -> Dict[str, Any]:
        """
        Get a Zoom user profile.

        Args:
            user_id: User ID or email, "me" for the token's owner

        Returns:
            User profile dictionary (id, email, first_name, ...)
        """
        return self.get(endpoints.USER.format(userId=user_id), signer=signer)


def _decode_json(body: bytes) -> Optional[Any]:
    """Decode a JSON body, returning None if it is empty or invalid."""
    if not body:
        return None
    try:
        return json.loads(body)
    except ValueError:
        return None
