"""Shared helpers for building signed resolution responses in tests."""

import base64
import json
from datetime import datetime, timedelta, timezone
from typing import Optional

import pysodium


def b64url(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def generate_test_keypair():
    """Generate an Ed25519 keypair.

    Returns:
        Tuple of (verkey, sigkey): 32-byte public key and 64-byte secret key.
    """
    seed = pysodium.randombytes(pysodium.crypto_sign_SEEDBYTES)
    verkey, sigkey = pysodium.crypto_sign_seed_keypair(seed)
    return verkey, sigkey


def make_jwk(verkey: bytes) -> dict:
    """JWK for an Ed25519 public key, as served in the configuration document."""
    return {"kty": "OKP", "crv": "Ed25519", "x": b64url(verkey)}


def future_timestamp(seconds: int = 60) -> str:
    return (datetime.now(timezone.utc) + timedelta(seconds=seconds)).isoformat()


def past_timestamp(seconds: int = 60) -> str:
    return (datetime.now(timezone.utc) - timedelta(seconds=seconds)).isoformat()


def sign_jws(payload: dict, sigkey: bytes, header: Optional[dict] = None) -> str:
    """Create a compact JWS signed with Ed25519.

    Args:
        payload: JSON payload to sign.
        sigkey: 64-byte Ed25519 secret key.
        header: Protected header (default {"alg": "EdDSA"}).

    Returns:
        header.payload.signature
    """
    h_b64 = b64url(json.dumps(header or {"alg": "EdDSA"}).encode())
    p_b64 = b64url(json.dumps(payload).encode())
    sig = pysodium.crypto_sign_detached(f"{h_b64}.{p_b64}".encode("ascii"), sigkey)
    return f"{h_b64}.{p_b64}.{b64url(sig)}"


def flip_char(segment: str, index: int = 0) -> str:
    """Replace one base64url character so the decoded bytes change."""
    c = segment[index]
    replacement = "B" if c != "B" else "C"
    return segment[:index] + replacement + segment[index + 1:]


def config_document(verkey: bytes, resolver_endpoint: str = "https://resolver.example") -> dict:
    return {
        "version": 1,
        "resolver_mode": "delegated",
        "domain": "example.com",
        "resolver": {"resolver_endpoint": resolver_endpoint},
        "key": make_jwk(verkey),
    }
