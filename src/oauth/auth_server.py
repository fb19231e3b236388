"""
HTTP endpoints for Zoom App authorization and app context.

This module provides a small Flask application exposing the routes a
Zoom App needs from its host server:

- GET /install  - redirect to Zoom's authorization page
- GET /auth     - OAuth redirect target; exchanges the code and redirects
                  (303) to the deep link that re-opens the app in Zoom
- GET /context  - decrypts the x-zoom-app-context header
- GET /health   - liveness check

Failures never leave the request hanging: each maps to a status code
with a safe JSON message, while the detail goes to the log.
"""

import json
import logging
from typing import Optional

from flask import Flask, Response, jsonify, redirect, request

from src.zoom.cipher import CONTEXT_HEADER, get_app_context
from src.zoom.config import ZoomAppConfig
from src.zoom.exceptions import (
    ConfigurationError,
    ContextAuthenticationError,
    ContextError,
)

from .exceptions import AuthorizationError, DeepLinkError, TokenExchangeError
from .flow import OAuthFlow

logger = logging.getLogger(__name__)

# Headers required for pages loaded inside the Zoom client
SECURITY_HEADERS = {
    "Strict-Transport-Security": "max-age=31536000",
    "X-Content-Type-Options": "nosniff",
    "Referrer-Policy": "same-origin",
    "X-Frame-Options": "sameorigin",
    "Content-Security-Policy": (
        "default-src 'self'; "
        "style-src 'report-sample' 'self' 'unsafe-inline'; "
        "script-src 'self' https://appssdk.zoom.us 'unsafe-inline'; "
        "object-src 'none'; "
        "base-uri 'self'; "
        "connect-src 'self' wss: https:; "
        "frame-src 'self'; "
        "img-src 'self'; "
        "worker-src 'none'"
    ),
}


def _error(message: str, status: int) -> Response:
    response = jsonify({"error": message})
    response.status_code = status
    return response


def create_app(config: ZoomAppConfig, flow: Optional[OAuthFlow] = None) -> Flask:
    """
    Create the Flask application.

    Args:
        config: Platform credentials
        flow: OAuth flow (creates default if not provided)

    Returns:
        Configured Flask app
    """
    app = Flask(__name__)
    app.config["ZOOM_APP"] = config
    oauth_flow = flow or OAuthFlow(config)

    @app.after_request
    def set_security_headers(response: Response) -> Response:
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        return response

    @app.get("/health")
    def health() -> Response:
        return Response("true", status=200, content_type="text/plain")

    @app.get("/install")
    def install() -> Response:
        """Redirect the browser to Zoom's authorization page."""
        try:
            url = config.generate_authorization_url(state=request.args.get("state"))
        except ConfigurationError as e:
            logger.error(f"Cannot build authorization URL: {e}")
            return _error("Zoom App is not configured", 500)
        return redirect(url, code=302)

    @app.get("/auth")
    def auth() -> Response:
        """Handle the OAuth redirect from Zoom."""
        error = request.args.get("error")
        if error:
            logger.warning(f"OAuth error on redirect: {error}")
            return _error("Authorization was not granted", 400)

        code = request.args.get("code", "")
        logger.info("Received OAuth redirect")

        try:
            deeplink = oauth_flow.handle_auth(code)
        except AuthorizationError as e:
            logger.warning(f"Authorization failed: {e}")
            return _error("Missing authorization code", 400)
        except ConfigurationError as e:
            logger.error(f"Zoom App configuration error: {e}")
            return _error("Zoom App is not configured", 500)
        except TokenExchangeError as e:
            logger.error(f"Retrieving token failed: {e}")
            return _error("Could not complete authorization with Zoom", 502)
        except DeepLinkError as e:
            logger.error(f"Retrieving deep link failed: {e}")
            return _error("Could not retrieve deep link from Zoom", 502)

        return redirect(deeplink, code=303)

    @app.get("/context")
    def context() -> Response:
        """Decrypt and return the app context claims."""
        header = request.headers.get(CONTEXT_HEADER, "")
        if not header:
            return _error(f"Missing {CONTEXT_HEADER} header", 400)

        try:
            claims = get_app_context(header, config)
        except ContextAuthenticationError:
            return _error("Invalid app context", 401)
        except ContextError as e:
            logger.warning(f"Rejected app context: {e}")
            return _error("Malformed app context", 400)
        except ConfigurationError as e:
            logger.error(f"Zoom App configuration error: {e}")
            return _error("Zoom App is not configured", 500)

        try:
            payload = json.loads(claims)
        except ValueError:
            return _error("Malformed app context", 400)

        return jsonify({"context": payload})

    return app
