"""
Compact JWS structure parsing for signed resolution responses.

A resolver answers with header.payload.signature, each segment base64url
encoded without padding. This module only handles structure and decoding;
signature verification lives in cryptalias.signature.
"""

import base64
import json
from dataclasses import dataclass
from typing import Any

from .exceptions import MalformedResponseError


@dataclass(frozen=True)
class CompactJWS:
    """Compact JWS split into its encoded segments."""
    raw_header: str      # Base64url-encoded header (never inspected)
    raw_payload: str     # Base64url-encoded payload
    raw_signature: str   # Base64url-encoded signature

    @property
    def signing_input(self) -> bytes:
        """Bytes the signature covers: the encoded header and payload as received."""
        return f"{self.raw_header}.{self.raw_payload}".encode("utf-8")


def b64url_decode(segment: str) -> bytes:
    """Decode a base64url segment, restoring the padding it was sent without.

    Raises:
        ValueError: If the segment is not valid base64url.
    """
    b64 = segment.replace("-", "+").replace("_", "/")
    b64 += "=" * (-len(b64) % 4)
    return base64.b64decode(b64, validate=True)


def b64url_encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def parse_compact_jws(signed: str) -> CompactJWS:
    """Split a compact JWS into its three segments.

    Args:
        signed: Response body (header.payload.signature).

    Returns:
        CompactJWS holding the segments exactly as received.

    Raises:
        MalformedResponseError: Not exactly three non-empty segments.
    """
    if not isinstance(signed, str) or not signed.strip():
        raise MalformedResponseError("signed response is empty")

    parts = signed.strip().split(".")
    if len(parts) != 3:
        raise MalformedResponseError(
            f"invalid JWS format: expected 3 segments, got {len(parts)}"
        )
    if not all(parts):
        raise MalformedResponseError("invalid JWS format: empty segment")

    raw_header, raw_payload, raw_signature = parts
    return CompactJWS(
        raw_header=raw_header,
        raw_payload=raw_payload,
        raw_signature=raw_signature,
    )


def decode_payload_segment(jws: CompactJWS) -> dict[str, Any]:
    """Decode the payload segment to a JSON object."""
    try:
        decoded_bytes = b64url_decode(jws.raw_payload)
    except ValueError as e:
        raise MalformedResponseError(f"payload base64url decode failed: {e}")

    try:
        parsed = json.loads(decoded_bytes)
    except ValueError as e:
        # JSONDecodeError and UnicodeDecodeError are both ValueErrors
        raise MalformedResponseError(f"payload JSON parse failed: {e}")

    if not isinstance(parsed, dict):
        raise MalformedResponseError("payload JSON root must be an object")
    return parsed


def decode_jws_payload(signed: str) -> dict[str, Any]:
    """Decode a signed response's payload WITHOUT verifying it.

    For diagnostics only. Never trust the result for resolution; use
    cryptalias.signature.verify_jws instead.
    """
    return decode_payload_segment(parse_compact_jws(signed))
