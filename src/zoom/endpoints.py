"""
Zoom API endpoint definitions.

OAuth endpoints are rooted at the host; REST endpoints are relative to
the /v2 API prefix.

Documentation: https://developers.zoom.us/docs/api/
"""

# OAuth Endpoints (absolute, outside /v2)
OAUTH_TOKEN = "/oauth/token"
OAUTH_AUTHORIZE = "/oauth/authorize"

# Zoom Apps Endpoints
ZOOMAPP_DEEPLINK = "/zoomapp/deeplink"

# User Endpoints
USER = "/users/{userId}"
