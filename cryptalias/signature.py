"""Ed25519 verification of signed resolution responses.

Verification is pinned to Ed25519: the JWS header is never read, so a
response cannot select a weaker algorithm.

pysodium is imported inside verify_jws, so alias parsing, payload decoding
and the CLI load on hosts without libsodium.
"""

import logging
from collections.abc import Mapping
from typing import Any, Union

from pydantic import ValidationError

from cryptalias.api_models import JsonWebKey
from cryptalias.core.config import (
    ED25519_PUBLIC_KEY_BYTES,
    ED25519_SIGNATURE_BYTES,
    JWK_CURVE,
    JWK_KEY_TYPE,
)
from .exceptions import SignatureInvalidError
from .jws import b64url_decode, decode_payload_segment, parse_compact_jws

log = logging.getLogger("cryptalias.signature")

TrustKey = Union[JsonWebKey, Mapping, bytes]


def load_trust_key(trust_key: TrustKey) -> bytes:
    """Import a trust key as a raw Ed25519 public key.

    Accepts a JWK ({"kty": "OKP", "crv": "Ed25519", "x": ...}) as a
    JsonWebKey or plain mapping, or the raw 32-byte public key.

    Returns:
        32-byte Ed25519 public key.

    Raises:
        SignatureInvalidError: Key is not a usable Ed25519 public key.
    """
    if isinstance(trust_key, (bytes, bytearray)):
        raw = bytes(trust_key)
    else:
        if isinstance(trust_key, JsonWebKey):
            jwk = trust_key
        elif isinstance(trust_key, Mapping):
            try:
                jwk = JsonWebKey.model_validate(dict(trust_key))
            except ValidationError as e:
                raise SignatureInvalidError(f"trust key is not a valid JWK: {e}")
        else:
            raise SignatureInvalidError(
                f"unsupported trust key type: {type(trust_key).__name__}"
            )

        if jwk.kty != JWK_KEY_TYPE or jwk.crv != JWK_CURVE:
            raise SignatureInvalidError(
                f"trust key must be {JWK_KEY_TYPE}/{JWK_CURVE}, got {jwk.kty}/{jwk.crv}"
            )
        if not jwk.x:
            raise SignatureInvalidError("trust key has no public key material")
        try:
            raw = b64url_decode(jwk.x)
        except ValueError as e:
            raise SignatureInvalidError(f"failed to decode trust key: {e}")

    if len(raw) != ED25519_PUBLIC_KEY_BYTES:
        raise SignatureInvalidError(
            f"invalid public key length: {len(raw)} bytes, "
            f"expected {ED25519_PUBLIC_KEY_BYTES} for Ed25519"
        )
    return raw


def verify_jws(signed: str, trust_key: TrustKey) -> dict[str, Any]:
    """Verify a compact JWS with Ed25519 and return its decoded payload.

    The signing input is the encoded header and payload segments joined by
    '.', exactly as received.

    Args:
        signed: Compact JWS (header.payload.signature).
        trust_key: Key from the domain's configuration document.

    Returns:
        Decoded payload object.

    Raises:
        MalformedResponseError: Wrong segment structure, or payload is not
            base64url-encoded JSON object.
        SignatureInvalidError: Signature does not verify, or the trust key
            or signature cannot be decoded.
    """
    jws = parse_compact_jws(signed)

    try:
        signature = b64url_decode(jws.raw_signature)
    except ValueError:
        raise SignatureInvalidError("signature verification failed: undecodable signature")
    if len(signature) != ED25519_SIGNATURE_BYTES:
        raise SignatureInvalidError(
            f"signature verification failed: {len(signature)} byte signature"
        )

    verkey = load_trust_key(trust_key)

    import pysodium
    try:
        # Bad signatures surface as an exception, not a return value
        pysodium.crypto_sign_verify_detached(signature, jws.signing_input, verkey)
    except Exception:
        log.warning("Ed25519 signature verification failed")
        raise SignatureInvalidError()

    return decode_payload_segment(jws)
