"""Cryptalias client: resolve `[ticker:]alias$domain` to a verified address.

Resolution discovers the domain's resolver and Ed25519 trust key from its
well-known configuration, queries the resolver, verifies the signed
response and enforces its expiry.

Usage:
    from cryptalias import resolve_address, resolve_address_sync

    address = await resolve_address("xmr", "donations$example.com")
    address = resolve_address_sync("xmr", "donations$example.com")
"""

from .exceptions import (
    CryptaliasError,
    InvalidInputError,
    AliasFormatError,
    TickerMismatchError,
    FetchFailedError,
    ConfigFetchFailedError,
    ResolveFetchFailedError,
    TransportError,
    ConfigInvalidError,
    MissingResolverError,
    MissingKeyError,
    MalformedResponseError,
    SignatureInvalidError,
    MissingAddressError,
    MissingExpiryError,
    InvalidExpiryError,
    ExpiredError,
)
from .alias import ParsedAlias, normalize_ticker, parse_alias
from .jws import CompactJWS, decode_jws_payload, parse_compact_jws
from .signature import load_trust_key, verify_jws
from .expiry import enforce_expiry, parse_expires
from .resolver import (
    AddressResolver,
    CryptaliasResolver,
    ResolvedAddress,
    resolve_address,
    resolve_address_sync,
)

__all__ = [
    # Exceptions
    "CryptaliasError",
    "InvalidInputError",
    "AliasFormatError",
    "TickerMismatchError",
    "FetchFailedError",
    "ConfigFetchFailedError",
    "ResolveFetchFailedError",
    "TransportError",
    "ConfigInvalidError",
    "MissingResolverError",
    "MissingKeyError",
    "MalformedResponseError",
    "SignatureInvalidError",
    "MissingAddressError",
    "MissingExpiryError",
    "InvalidExpiryError",
    "ExpiredError",
    # Alias parsing
    "ParsedAlias",
    "normalize_ticker",
    "parse_alias",
    # Signed responses
    "CompactJWS",
    "decode_jws_payload",
    "parse_compact_jws",
    "load_trust_key",
    "verify_jws",
    # Expiry
    "enforce_expiry",
    "parse_expires",
    # Resolution
    "AddressResolver",
    "CryptaliasResolver",
    "ResolvedAddress",
    "resolve_address",
    "resolve_address_sync",
]
