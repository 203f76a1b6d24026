"""Alias resolution: discovery, resolver query, verification and expiry.

Resolution of `alias` for `ticker` runs two sequential fetches:

1. https://{domain}/.well-known/cryptalias/configuration yields the resolver
   endpoint and the domain's Ed25519 trust key.
2. {resolver}/_cryptalias/resolve/{ticker}/{alias} yields a compact JWS whose
   payload carries the address and its expiry.

Every failure aborts the call with a CryptaliasError subclass; no partial or
cached result is ever returned.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Optional, Type
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from cryptalias.api_models import WellKnownConfiguration
from cryptalias.core.config import (
    CONFIG_ACCEPT,
    ERROR_BODY_MAX_CHARS,
    HTTP_TIMEOUT_SECONDS,
    JWS_ACCEPT,
    RESOLVE_PATH_PREFIX,
    USER_AGENT,
    WELL_KNOWN_CONFIGURATION_PATH,
)
from .alias import normalize_ticker, parse_alias
from .exceptions import (
    AliasFormatError,
    ConfigFetchFailedError,
    ConfigInvalidError,
    CryptaliasError,
    FetchFailedError,
    InvalidInputError,
    MissingAddressError,
    MissingKeyError,
    MissingResolverError,
    ResolveFetchFailedError,
    TickerMismatchError,
    TransportError,
)
from .expiry import enforce_expiry
from .signature import verify_jws

log = logging.getLogger("cryptalias.resolver")


@dataclass(frozen=True)
class ResolvedAddress:
    """Verified, unexpired resolution result.

    Attributes:
        address: The wallet address.
        expires: Expiry instant from the signed payload.
        resolve_url: Resolver URL the signed response came from.
        ticker: Ticker echoed by the resolver, if any.
        version: Payload version, if any.
        nonce: Resolver nonce, if any.
    """
    address: str
    expires: datetime
    resolve_url: str
    ticker: Optional[str] = None
    version: Optional[int] = None
    nonce: Optional[str] = None


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def configuration_url(domain: str) -> str:
    return f"https://{domain}{WELL_KNOWN_CONFIGURATION_PATH}"


def resolve_url(resolver_endpoint: str, ticker: str, alias: str) -> str:
    """Build the resolver query URL.

    Both path segments are percent-encoded as URL path segments, so
    '$', ':', '/' and spaces in the alias survive the round trip.
    """
    base = resolver_endpoint.rstrip("/")
    return (
        f"{base}{RESOLVE_PATH_PREFIX}/"
        f"{quote(ticker, safe='')}/{quote(alias, safe='')}"
    )


class AddressResolver(ABC):
    """Resolves ticker + alias to a verified address."""

    @abstractmethod
    async def resolve_address(self, ticker: str, alias: str) -> str:
        """Return the verified, unexpired address for `alias`.

        Raises:
            CryptaliasError: On any failure.
        """


class CryptaliasResolver(AddressResolver):
    """AddressResolver over HTTPS discovery and Ed25519-signed responses.

    Collaborators are injected so callers and tests can substitute them:

    Args:
        client: httpx.AsyncClient to borrow. When None, a client is opened
            for each call and closed before it returns. A borrowed client is
            never closed here.
        clock: Returns the current aware UTC instant for expiry checks.
        timeout: Request timeout in seconds for self-opened clients.
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        clock: Optional[Callable[[], datetime]] = None,
        timeout: Optional[float] = None,
    ):
        self._client = client
        self._clock = clock or _utcnow
        self._timeout = HTTP_TIMEOUT_SECONDS if timeout is None else timeout

    async def resolve_address(self, ticker: str, alias: str) -> str:
        resolved = await self.resolve_details(ticker, alias)
        return resolved.address

    async def resolve_details(self, ticker: str, alias: str) -> ResolvedAddress:
        """Resolve and return the full verified result."""
        # Step 1: Reject empty input
        if not ticker or not alias or not ticker.strip() or not alias.strip():
            raise InvalidInputError()

        # Step 2: Parse alias and cross-check any ticker prefix
        ticker_clean = normalize_ticker(ticker)
        parsed = parse_alias(alias)
        if parsed.ticker_prefix and parsed.ticker_prefix != ticker_clean:
            log.warning(
                f"Ticker prefix mismatch: prefix={parsed.ticker_prefix}, ticker={ticker_clean}",
                extra={"ticker": ticker_clean, "domain": parsed.domain},
            )
            raise TickerMismatchError(parsed.ticker_prefix, ticker_clean)

        # The domain must form a valid URL host before anything is fetched
        _check_url(
            configuration_url(parsed.domain),
            AliasFormatError,
            f"alias domain is not a valid host: {parsed.domain!r}",
        )

        if self._client is not None:
            return await self._resolve(self._client, ticker_clean, alias, parsed.domain)

        async with httpx.AsyncClient(
            timeout=self._timeout,
            headers={"User-Agent": USER_AGENT},
        ) as client:
            return await self._resolve(client, ticker_clean, alias, parsed.domain)

    async def _resolve(
        self,
        client: httpx.AsyncClient,
        ticker: str,
        alias: str,
        domain: str,
    ) -> ResolvedAddress:
        # Step 3: Discover resolver endpoint and trust key
        config = await self._fetch_configuration(client, domain)

        resolver = (config.resolver.resolver_endpoint or "") if config.resolver else ""
        # Step 4: Trailing slashes are insignificant
        resolver = resolver.strip().rstrip("/")
        if not resolver:
            raise MissingResolverError()
        if not config.key:
            raise MissingKeyError()

        # Step 5: Query the resolver
        url = _check_url(
            resolve_url(resolver, ticker, alias),
            ConfigInvalidError,
            f"resolver_endpoint is not a valid URL: {resolver!r}",
        )
        response = await _get(client, url, JWS_ACCEPT, ResolveFetchFailedError)

        # Step 6: Verify signature (algorithm pinned to Ed25519)
        payload = verify_jws(response.text, config.key)

        # Step 7: Address must be present
        address = payload.get("address")
        if not isinstance(address, str) or not address:
            raise MissingAddressError()

        # Step 8: Enforce expiry
        expires = enforce_expiry(payload.get("expires"), now=self._clock())

        log.debug(
            f"Resolved alias on {domain} via {resolver} (expires {expires.isoformat()})",
            extra={"ticker": ticker, "domain": domain},
        )

        # Step 9: Return verified address
        return ResolvedAddress(
            address=address,
            expires=expires,
            resolve_url=url,
            ticker=_optional(payload, "ticker", str),
            version=_optional(payload, "version", int),
            nonce=_optional(payload, "nonce", str),
        )

    async def _fetch_configuration(
        self,
        client: httpx.AsyncClient,
        domain: str,
    ) -> WellKnownConfiguration:
        url = configuration_url(domain)
        response = await _get(client, url, CONFIG_ACCEPT, ConfigFetchFailedError)

        try:
            data = response.json()
        except ValueError as e:
            raise ConfigInvalidError(f"configuration is not valid JSON: {e}")
        if not isinstance(data, dict):
            raise ConfigInvalidError("configuration JSON root must be an object")

        try:
            return WellKnownConfiguration.model_validate(data)
        except ValidationError as e:
            raise ConfigInvalidError(f"configuration has unexpected shape: {e}")


def _check_url(url: str, error_cls: Type[CryptaliasError], message: str) -> str:
    """Return `url` unchanged, or raise `error_cls` if httpx cannot parse it."""
    try:
        httpx.URL(url)
    except httpx.InvalidURL as e:
        raise error_cls(f"{message} ({e})") from e
    return url


async def _get(
    client: httpx.AsyncClient,
    url: str,
    accept: str,
    error_cls: Type[FetchFailedError],
) -> httpx.Response:
    """GET `url`, raising `error_cls` on non-2xx and TransportError on network failure."""
    log.debug(f"GET {url} (Accept: {accept})")
    try:
        response = await client.get(url, headers={"Accept": accept})
    except httpx.RequestError as e:
        log.warning(f"Request to {url} failed: {e!r}")
        raise TransportError(url, str(e) or type(e).__name__) from e

    if not 200 <= response.status_code < 300:
        body = response.text.strip()[:ERROR_BODY_MAX_CHARS]
        log.warning(f"GET {url} returned HTTP {response.status_code}")
        raise error_cls(url, response.status_code, body)
    return response


def _optional(payload: dict[str, Any], field: str, kind: type) -> Any:
    value = payload.get(field)
    if isinstance(value, bool) or not isinstance(value, kind):
        return None
    return value


async def resolve_address(
    ticker: str,
    alias: str,
    *,
    client: Optional[httpx.AsyncClient] = None,
    clock: Optional[Callable[[], datetime]] = None,
    timeout: Optional[float] = None,
) -> str:
    """Resolve `alias` for `ticker` to a verified address.

    Example:
        address = await resolve_address("xmr", "donations$example.com")
    """
    resolver = CryptaliasResolver(client=client, clock=clock, timeout=timeout)
    return await resolver.resolve_address(ticker, alias)


def resolve_address_sync(
    ticker: str,
    alias: str,
    *,
    clock: Optional[Callable[[], datetime]] = None,
    timeout: Optional[float] = None,
) -> str:
    """Blocking variant of resolve_address for callers without an event loop."""
    return asyncio.run(resolve_address(ticker, alias, clock=clock, timeout=timeout))
