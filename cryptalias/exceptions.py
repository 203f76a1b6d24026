"""Cryptalias client exceptions mapped to error codes.

Every failure aborts the resolution call. Fetch and transport failures are
recoverable (a later retry may succeed); everything else means the input,
the domain's configuration or the signed response cannot be trusted.
"""

from typing import Optional

from cryptalias.api_models import ERROR_RECOVERABILITY, ErrorCode, ErrorDetail


class CryptaliasError(Exception):
    """Base exception for alias resolution.

    Carries an error code that maps to ErrorCode constants.
    """

    def __init__(self, code: str, message: str):
        self.code = code
        self.message = message
        super().__init__(message)

    @property
    def recoverable(self) -> bool:
        return ERROR_RECOVERABILITY.get(self.code, False)

    def to_detail(self) -> ErrorDetail:
        return ErrorDetail(
            code=self.code,
            message=self.message,
            recoverable=self.recoverable,
        )


# =============================================================================
# Input errors
# =============================================================================

class InvalidInputError(CryptaliasError):
    """Ticker or alias is empty."""

    def __init__(self, message: str = "ticker and alias are required"):
        super().__init__(ErrorCode.INVALID_INPUT, message)


class AliasFormatError(CryptaliasError):
    """Alias does not match [ticker:]local$domain."""

    def __init__(self, message: str = "alias must be in the format [ticker:]alias$domain"):
        super().__init__(ErrorCode.ALIAS_FORMAT_INVALID, message)


class TickerMismatchError(CryptaliasError):
    """Ticker prefix embedded in the alias differs from the requested ticker."""

    def __init__(self, prefix: str, ticker: str):
        self.prefix = prefix
        self.ticker = ticker
        super().__init__(
            ErrorCode.TICKER_MISMATCH,
            f'ticker prefix "{prefix}" does not match "{ticker}"',
        )


# =============================================================================
# Fetch errors
# =============================================================================

class FetchFailedError(CryptaliasError):
    """Non-2xx HTTP response. Carries the status code and response body."""

    def __init__(self, code: str, what: str, url: str, status_code: int, body: str):
        self.url = url
        self.status_code = status_code
        self.body = body
        super().__init__(code, f"{what} request failed {status_code}: {body}")


class ConfigFetchFailedError(FetchFailedError):
    """Configuration document fetch returned a non-2xx status."""

    def __init__(self, url: str, status_code: int, body: str = ""):
        super().__init__(ErrorCode.CONFIG_FETCH_FAILED, "configuration", url, status_code, body)


class ResolveFetchFailedError(FetchFailedError):
    """Resolver query returned a non-2xx status."""

    def __init__(self, url: str, status_code: int, body: str = ""):
        super().__init__(ErrorCode.RESOLVE_FETCH_FAILED, "resolve", url, status_code, body)


class TransportError(CryptaliasError):
    """Network-level failure (connect error, timeout, ...).

    The underlying httpx exception is available as __cause__.
    """

    def __init__(self, url: str, message: str):
        self.url = url
        super().__init__(ErrorCode.TRANSPORT_FAILED, f"request to {url} failed: {message}")


# =============================================================================
# Configuration errors
# =============================================================================

class ConfigInvalidError(CryptaliasError):
    """Configuration document is not a JSON object of the expected shape."""

    def __init__(self, message: str = "configuration document is invalid"):
        super().__init__(ErrorCode.CONFIG_INVALID, message)


class MissingResolverError(CryptaliasError):
    def __init__(self, message: str = "missing resolver_endpoint in configuration"):
        super().__init__(ErrorCode.CONFIG_MISSING_RESOLVER, message)


class MissingKeyError(CryptaliasError):
    def __init__(self, message: str = "missing key in configuration"):
        super().__init__(ErrorCode.CONFIG_MISSING_KEY, message)


# =============================================================================
# Signed response errors
# =============================================================================

class MalformedResponseError(CryptaliasError):
    """Signed response is structurally invalid (segments, base64, JSON)."""

    def __init__(self, message: str = "invalid JWS format"):
        super().__init__(ErrorCode.RESPONSE_MALFORMED, message)


class SignatureInvalidError(CryptaliasError):
    """Signature did not verify against the trust key.

    Also raised when the trust key itself cannot be imported; callers are
    not told which.
    """

    def __init__(self, message: str = "signature verification failed"):
        super().__init__(ErrorCode.SIGNATURE_INVALID, message)


# =============================================================================
# Payload errors
# =============================================================================

class MissingAddressError(CryptaliasError):
    def __init__(self, message: str = "missing address in JWS payload"):
        super().__init__(ErrorCode.PAYLOAD_MISSING_ADDRESS, message)


class MissingExpiryError(CryptaliasError):
    def __init__(self, message: str = "missing expires in JWS payload"):
        super().__init__(ErrorCode.PAYLOAD_MISSING_EXPIRY, message)


class InvalidExpiryError(CryptaliasError):
    def __init__(self, value: Optional[str] = None):
        self.value = value
        super().__init__(
            ErrorCode.PAYLOAD_INVALID_EXPIRY,
            f"invalid expires in JWS payload: {value!r}",
        )


class ExpiredError(CryptaliasError):
    """Resolved address is at or past its expiry instant."""

    def __init__(self, message: str = "resolved address has expired"):
        super().__init__(ErrorCode.ADDRESS_EXPIRED, message)
