"""Tests for Zoom App context decryption."""

import json
import struct

import pytest

from src.zoom.cipher import (
    ContextEnvelope,
    decode_header,
    decrypt_context,
    derive_key,
    get_app_context,
    parse_envelope,
)
from src.zoom.config import ZoomAppConfig
from src.zoom.exceptions import (
    ConfigurationError,
    ContextAuthenticationError,
    ContextError,
    MalformedContextError,
    TruncatedContextError,
)

KEY = b"client-secret-A"
IV = bytes(range(12))
AAD = b"zoom-aad"
CLAIMS = json.dumps({"typ": "panel", "uid": "user_1", "mid": "meeting_9"}).encode()


class TestDecryptContext:
    """Tests for decrypt_context."""

    def test_round_trip_returns_plaintext(self, make_context):
        """Decrypting an envelope sealed with the same key yields the plaintext."""
        header = make_context(CLAIMS, KEY, iv=IV, aad=AAD)

        assert decrypt_context(header, KEY) == CLAIMS

    def test_round_trip_with_str_key(self, make_context):
        """A str key is treated as its UTF-8 bytes."""
        header = make_context(CLAIMS, KEY, iv=IV)

        assert decrypt_context(header, KEY.decode()) == CLAIMS

    def test_round_trip_empty_aad_and_plaintext(self, make_context):
        """Empty AAD and empty plaintext are valid envelopes."""
        header = make_context(b"", KEY, iv=IV, aad=b"")

        assert decrypt_context(header, KEY) == b""

    def test_accepts_padded_header(self, envelope_bytes):
        """Base64 padding on the header is tolerated."""
        from base64 import urlsafe_b64encode

        buffer = envelope_bytes(CLAIMS, KEY, iv=IV, aad=b"x")
        header = urlsafe_b64encode(buffer).decode()

        assert decrypt_context(header, KEY) == CLAIMS

    def test_wrong_key_fails_authentication(self, make_context):
        """A different key raises ContextAuthenticationError."""
        header = make_context(CLAIMS, KEY, iv=IV, aad=AAD)

        with pytest.raises(ContextAuthenticationError):
            decrypt_context(header, b"client-secret-B")

    @pytest.mark.parametrize("region", ["aad", "ciphertext", "tag", "iv"])
    def test_flipped_byte_fails_authentication(self, envelope_bytes, encode, region):
        """Flipping one byte of iv, aad, ciphertext or tag never yields plaintext."""
        buffer = bytearray(envelope_bytes(CLAIMS, KEY, iv=IV, aad=AAD))
        aad_start = 1 + len(IV) + 2
        cipher_start = aad_start + len(AAD) + 4
        index = {
            "iv": 1,
            "aad": aad_start,
            "ciphertext": cipher_start,
            "tag": len(buffer) - 1,
        }[region]
        buffer[index] ^= 0x01

        with pytest.raises(ContextAuthenticationError):
            decrypt_context(encode(bytes(buffer)), KEY)

    def test_trailing_bytes_are_ignored(self, envelope_bytes, encode):
        """Bytes past the declared ciphertext do not affect decryption."""
        buffer = envelope_bytes(CLAIMS, KEY, iv=IV, aad=AAD) + b"\x00\x01"

        assert decrypt_context(encode(buffer), KEY) == CLAIMS

    def test_iv_too_short_for_gcm_is_malformed(self, envelope_bytes, encode):
        """An IV length AES-GCM rejects raises MalformedContextError."""
        buffer = bytearray(envelope_bytes(CLAIMS, KEY, iv=IV))
        # Rewrite as a zero-length IV followed by the rest of the fields
        rest = bytes(buffer[1 + len(IV):])
        malformed = bytes([0]) + rest

        with pytest.raises(MalformedContextError):
            decrypt_context(encode(malformed), KEY)

    @pytest.mark.parametrize("header", ["", "   ", "not*base64!", "abcde"])
    def test_invalid_header_is_malformed(self, header):
        """Empty or non-base64url headers raise MalformedContextError."""
        with pytest.raises(MalformedContextError):
            decrypt_context(header, KEY)


class TestParseEnvelope:
    """Tests for envelope parsing and bounds checks."""

    def test_parse_fields(self, envelope_bytes):
        """parse_envelope extracts iv, aad and ciphertext plus tag."""
        envelope = parse_envelope(envelope_bytes(CLAIMS, KEY, iv=IV, aad=AAD))

        assert isinstance(envelope, ContextEnvelope)
        assert envelope.iv == IV
        assert envelope.aad == AAD
        assert len(envelope.ciphertext) == len(CLAIMS) + 16

    def test_empty_buffer_is_truncated(self):
        with pytest.raises(TruncatedContextError, match="iv length"):
            parse_envelope(b"")

    def test_iv_shorter_than_declared(self):
        """ivLength=16 with only 10 bytes following raises TruncatedContextError."""
        with pytest.raises(TruncatedContextError, match="iv"):
            parse_envelope(bytes([16]) + b"\x00" * 10)

    def test_missing_aad_length(self):
        with pytest.raises(TruncatedContextError, match="aad length"):
            parse_envelope(bytes([2]) + b"\xaa\xbb" + b"\x01")

    def test_aad_shorter_than_declared(self):
        buffer = bytes([1]) + b"\xaa" + struct.pack("<H", 300) + b"\x00" * 20
        with pytest.raises(TruncatedContextError, match="aad"):
            parse_envelope(buffer)

    def test_missing_cipher_length(self):
        buffer = bytes([1]) + b"\xaa" + struct.pack("<H", 0) + b"\x00\x00"
        with pytest.raises(TruncatedContextError, match="cipher length"):
            parse_envelope(buffer)

    def test_ciphertext_shorter_than_declared(self):
        """Declared cipher length plus the 16-byte tag must be present."""
        buffer = (
            bytes([1])
            + b"\xaa"
            + struct.pack("<H", 0)
            + struct.pack("<I", 4)
            + b"\x00" * 19
        )
        with pytest.raises(TruncatedContextError, match="ciphertext"):
            parse_envelope(buffer)

    def test_huge_declared_length_does_not_over_read(self):
        buffer = (
            bytes([1])
            + b"\xaa"
            + struct.pack("<H", 0)
            + struct.pack("<I", 0xFFFFFFFF)
            + b"\x00" * 32
        )
        with pytest.raises(TruncatedContextError):
            parse_envelope(buffer)

    def test_truncated_header_surfaces_through_decrypt(self, envelope_bytes, encode):
        """A header cut short raises TruncatedContextError from decrypt_context."""
        buffer = envelope_bytes(CLAIMS, KEY, iv=IV, aad=AAD)

        with pytest.raises(TruncatedContextError):
            decrypt_context(encode(buffer[:-5]), KEY)


class TestHelpers:
    def test_derive_key_is_sha256(self):
        import hashlib

        assert derive_key(b"secret") == hashlib.sha256(b"secret").digest()
        assert derive_key("secret") == derive_key(b"secret")
        assert len(derive_key("")) == 32

    def test_decode_header_without_padding(self):
        assert decode_header("aGk") == b"hi"

    def test_decode_header_urlsafe_alphabet(self):
        assert decode_header("-_8") == b"\xfb\xff"


class TestGetAppContext:
    """Tests for get_app_context."""

    @pytest.fixture
    def platform_config(self):
        return ZoomAppConfig(client_id="id", client_secret="client-secret-B")

    def test_uses_client_secret_by_default(self, make_context, platform_config):
        header = make_context(CLAIMS, b"client-secret-B", iv=IV)

        assert get_app_context(header, platform_config) == CLAIMS.decode()

    def test_override_secret_takes_precedence(self, make_context, platform_config):
        """Encrypted with key A, decrypted with override A while default is B."""
        header = make_context(CLAIMS, KEY, iv=IV)

        assert get_app_context(header, platform_config, KEY.decode()) == CLAIMS.decode()

        with pytest.raises(ContextAuthenticationError):
            get_app_context(header, platform_config)

    def test_empty_header_raises(self, platform_config):
        with pytest.raises(MalformedContextError):
            get_app_context("", platform_config)

    def test_no_secret_available_raises(self, make_context):
        header = make_context(CLAIMS, KEY, iv=IV)

        with pytest.raises(ConfigurationError):
            get_app_context(header, ZoomAppConfig())

    def test_invalid_utf8_plaintext_is_malformed(self, make_context, platform_config):
        header = make_context(b"\xff\xfe\xfd", b"client-secret-B", iv=IV)

        with pytest.raises(MalformedContextError):
            get_app_context(header, platform_config)

    def test_errors_share_context_base(self, platform_config):
        with pytest.raises(ContextError):
            get_app_context("%%%", platform_config)
