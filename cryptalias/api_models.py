"""
Cryptalias client models.

Wire models for the well-known configuration document and the error
registry shared by the resolver, the CLI and callers that need to map
failures to user-facing diagnostics.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict


# =============================================================================
# Configuration Document
# =============================================================================

class JsonWebKey(BaseModel):
    """Public key in JSON-Web-Key form.

    Only OKP/Ed25519 keys are usable as trust keys. Other members
    (kid, use, alg, ...) are preserved but never consulted.
    """
    model_config = ConfigDict(extra="allow")

    kty: Optional[str] = None
    crv: Optional[str] = None
    x: Optional[str] = None


class ResolverSettings(BaseModel):
    """The `resolver` member of the configuration document."""
    model_config = ConfigDict(extra="allow")

    resolver_endpoint: Optional[str] = None
    keys_endpoint: Optional[str] = None


class WellKnownConfiguration(BaseModel):
    """Document served at https://{domain}/.well-known/cryptalias/configuration

    `key` is kept as received; it is only interpreted when imported as the
    trust key, so an unusable key surfaces as a signature failure.
    """
    model_config = ConfigDict(extra="allow")

    resolver: Optional[ResolverSettings] = None
    key: Optional[Any] = None


# =============================================================================
# Error Models
# =============================================================================

class ErrorDetail(BaseModel):
    """Serializable error description."""
    code: str
    message: str
    recoverable: bool


class ErrorCode:
    """Error code registry (one code per failure kind)."""
    # Input layer
    INVALID_INPUT = "INVALID_INPUT"
    ALIAS_FORMAT_INVALID = "ALIAS_FORMAT_INVALID"
    TICKER_MISMATCH = "TICKER_MISMATCH"

    # Discovery layer
    CONFIG_FETCH_FAILED = "CONFIG_FETCH_FAILED"
    CONFIG_INVALID = "CONFIG_INVALID"
    CONFIG_MISSING_RESOLVER = "CONFIG_MISSING_RESOLVER"
    CONFIG_MISSING_KEY = "CONFIG_MISSING_KEY"

    # Resolver layer
    RESOLVE_FETCH_FAILED = "RESOLVE_FETCH_FAILED"
    TRANSPORT_FAILED = "TRANSPORT_FAILED"

    # Crypto layer
    RESPONSE_MALFORMED = "RESPONSE_MALFORMED"
    SIGNATURE_INVALID = "SIGNATURE_INVALID"

    # Payload layer
    PAYLOAD_MISSING_ADDRESS = "PAYLOAD_MISSING_ADDRESS"
    PAYLOAD_MISSING_EXPIRY = "PAYLOAD_MISSING_EXPIRY"
    PAYLOAD_INVALID_EXPIRY = "PAYLOAD_INVALID_EXPIRY"
    ADDRESS_EXPIRED = "ADDRESS_EXPIRED"


# Recoverability mapping: only fetch/transport failures may succeed on retry
ERROR_RECOVERABILITY: Dict[str, bool] = {
    ErrorCode.INVALID_INPUT: False,
    ErrorCode.ALIAS_FORMAT_INVALID: False,
    ErrorCode.TICKER_MISMATCH: False,
    ErrorCode.CONFIG_FETCH_FAILED: True,     # Recoverable
    ErrorCode.CONFIG_INVALID: False,
    ErrorCode.CONFIG_MISSING_RESOLVER: False,
    ErrorCode.CONFIG_MISSING_KEY: False,
    ErrorCode.RESOLVE_FETCH_FAILED: True,    # Recoverable
    ErrorCode.TRANSPORT_FAILED: True,        # Recoverable
    ErrorCode.RESPONSE_MALFORMED: False,
    ErrorCode.SIGNATURE_INVALID: False,
    ErrorCode.PAYLOAD_MISSING_ADDRESS: False,
    ErrorCode.PAYLOAD_MISSING_EXPIRY: False,
    ErrorCode.PAYLOAD_INVALID_EXPIRY: False,
    ErrorCode.ADDRESS_EXPIRED: False,
}
