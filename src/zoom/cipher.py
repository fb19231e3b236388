"""
Decryption of the Zoom App context header.

The Zoom client attaches ``x-zoom-app-context`` to requests made from
inside a Zoom App. The value is a base64url (unpadded) envelope:

    ivLength     1 byte
    iv           ivLength bytes
    aadLength    2 bytes, little-endian
    aad          aadLength bytes
    cipherLength 4 bytes, little-endian
    ciphertext   cipherLength bytes, followed by a 16-byte GCM tag

The payload is AES-256-GCM encrypted under SHA-256(client secret).
Decryption is fail-closed: every parse or authentication failure raises,
and plaintext is only ever returned after the tag has been verified.
"""

import binascii
import hashlib
import logging
import struct
from base64 import b64decode
from dataclasses import dataclass
from typing import Tuple, Union

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from .config import ZoomAppConfig
from .exceptions import (
    ConfigurationError,
    ContextAuthenticationError,
    MalformedContextError,
    TruncatedContextError,
)

logger = logging.getLogger(__name__)

CONTEXT_HEADER = "x-zoom-app-context"

GCM_TAG_LENGTH = 16


@dataclass(frozen=True)
class ContextEnvelope:
    """Parsed context envelope; ciphertext includes the trailing GCM tag."""

    iv: bytes
    aad: bytes
    ciphertext: bytes


def decode_header(header_value: str) -> bytes:
    """
    Base64url-decode a header value (padding optional).

    Raises:
        MalformedContextError: If the value is empty or not base64url
    """
    if not header_value or not header_value.strip():
        raise MalformedContextError("Context header must be a non-empty string")

    value = header_value.strip().rstrip("=")
    padded = value + "=" * (-len(value) % 4)
    try:
        return b64decode(padded, altchars=b"-_", validate=True)
    except (binascii.Error, ValueError) as e:
        raise MalformedContextError(f"Context header is not valid base64url: {e}") from e


def _take(buffer: bytes, offset: int, length: int, field_name: str) -> Tuple[bytes, int]:
    """Read length bytes at offset, or raise if the buffer is too short."""
    end = offset + length
    if end > len(buffer):
        raise TruncatedContextError(
            f"Context truncated reading {field_name}: need {length} bytes "
            f"at offset {offset}, have {max(0, len(buffer) - offset)}"
        )
    return buffer[offset:end], end


def parse_envelope(buffer: bytes) -> ContextEnvelope:
    """
    Parse envelope fields in order, validating every length.

    Bytes after the declared ciphertext and tag are ignored.

    Raises:
        TruncatedContextError: If any field extends past the buffer
    """
    raw, offset = _take(buffer, 0, 1, "iv length")
    iv_length = raw[0]
    iv, offset = _take(buffer, offset, iv_length, "iv")

    raw, offset = _take(buffer, offset, 2, "aad length")
    (aad_length,) = struct.unpack("<H", raw)
    aad, offset = _take(buffer, offset, aad_length, "aad")

    raw, offset = _take(buffer, offset, 4, "cipher length")
    (cipher_length,) = struct.unpack("<I", raw)
    ciphertext, offset = _take(
        buffer, offset, cipher_length + GCM_TAG_LENGTH, "ciphertext"
    )

    if offset < len(buffer):
        logger.debug(f"Ignoring {len(buffer) - offset} trailing bytes in context")

    return ContextEnvelope(iv=iv, aad=aad, ciphertext=ciphertext)


def derive_key(secret: Union[str, bytes]) -> bytes:
    """Derive the 256-bit AES key as SHA-256 of the secret."""
    if isinstance(secret, str):
        secret = secret.encode("utf-8")
    return hashlib.sha256(secret).digest()


def decrypt_context(header_value: str, key: Union[str, bytes]) -> bytes:
    """
    Decrypt an x-zoom-app-context header value.

    Args:
        header_value: Base64url envelope from the header
        key: Secret the context was encrypted for (client secret)

    Returns:
        Plaintext claims bytes (UTF-8 JSON)

    Raises:
        MalformedContextError: Empty/invalid base64url, or unusable IV length
        TruncatedContextError: Envelope shorter than its declared lengths
        ContextAuthenticationError: Wrong key or tampered envelope
    """
    envelope = parse_envelope(decode_header(header_value))

    try:
        aesgcm = AESGCM(derive_key(key))
        plaintext = aesgcm.decrypt(envelope.iv, envelope.ciphertext, envelope.aad)
    except InvalidTag as e:
        logger.warning("App context failed authentication")
        raise ContextAuthenticationError("App context failed authentication") from e
    except ValueError as e:
        # cryptography rejects IVs outside its accepted length range
        raise MalformedContextError(f"Unusable context envelope: {e}") from e

    return plaintext


def get_app_context(header_value: str, config: ZoomAppConfig, secret: str = "") -> str:
    """
    Decrypt the app context with an explicit secret or the client secret.

    Args:
        header_value: Value of the x-zoom-app-context header
        config: Platform credentials (client_secret is the default key)
        secret: Override key; used instead of client_secret when non-empty

    Returns:
        Decrypted claims as text

    Raises:
        ConfigurationError: If no key is available
        ContextError: If decryption fails
    """
    if not header_value:
        raise MalformedContextError("Context header must be a non-empty string")

    key = secret or config.client_secret
    if not key:
        raise ConfigurationError("No secret available to decrypt app context")

    plaintext = decrypt_context(header_value, key)
    try:
        return plaintext.decode("utf-8")
    except UnicodeDecodeError as e:
        raise MalformedContextError("App context is not valid UTF-8") from e
