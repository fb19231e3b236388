"""Shared pytest fixtures for Zoom App tests.

Provides an encrypt counterpart to the app context decryption (the Zoom
client is the only real producer of envelopes) and helpers for building
HTTP responses returned by a patched ``requests.Session.send``.
"""

import hashlib
import json
import os
import struct
from base64 import urlsafe_b64encode
from typing import Any, Callable, Optional

import pytest
import requests
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from src.zoom.config import ZoomAppConfig


def build_envelope_bytes(
    plaintext: bytes, key: bytes, iv: Optional[bytes] = None, aad: bytes = b""
) -> bytes:
    """Encrypt plaintext into the x-zoom-app-context binary layout."""
    iv = iv if iv is not None else os.urandom(12)
    sealed = AESGCM(hashlib.sha256(key).digest()).encrypt(iv, plaintext, aad)
    cipher_length = len(sealed) - 16
    return (
        bytes([len(iv)])
        + iv
        + struct.pack("<H", len(aad))
        + aad
        + struct.pack("<I", cipher_length)
        + sealed
    )


def encode_envelope(buffer: bytes) -> str:
    """Base64url-encode without padding, as the Zoom client does."""
    return urlsafe_b64encode(buffer).rstrip(b"=").decode()


@pytest.fixture
def envelope_bytes() -> Callable[..., bytes]:
    return build_envelope_bytes


@pytest.fixture
def encode() -> Callable[[bytes], str]:
    return encode_envelope


@pytest.fixture
def make_context() -> Callable[..., str]:
    """Factory producing an encoded context header value."""

    def _make(plaintext: bytes, key: bytes, iv: Optional[bytes] = None, aad: bytes = b"") -> str:
        return encode_envelope(build_envelope_bytes(plaintext, key, iv=iv, aad=aad))

    return _make


@pytest.fixture
def config() -> ZoomAppConfig:
    """Create test Zoom App config."""
    return ZoomAppConfig(
        host="zoom.example.com",
        client_id="test_client_id",
        client_secret="test_client_secret",
        redirect_url="https://app.example.com/auth",
        session_secret="test_session_secret",
    )


@pytest.fixture
def make_response() -> Callable[..., requests.Response]:
    """Factory producing real requests.Response objects."""

    def _make(
        status_code: int,
        json_body: Any = None,
        content: Optional[bytes] = None,
        reason: str = "",
    ) -> requests.Response:
        response = requests.Response()
        response.status_code = status_code
        response.reason = reason
        if content is not None:
            response._content = content
        elif json_body is not None:
            response._content = json.dumps(json_body).encode()
        else:
            response._content = b""
        return response

    return _make
