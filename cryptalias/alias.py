"""Alias syntax parsing.

An alias has the form ``[ticker:]local[+tag]$domain``. The domain separator
is always the last ``$`` in the string; a ``$`` appearing earlier is kept as
part of the local part. An optional ticker prefix is searched for only in
the text before that separator.
"""

import re
from dataclasses import dataclass
from typing import Optional

from .exceptions import AliasFormatError

# Characters that would move the domain out of the URL authority
_DOMAIN_FORBIDDEN_RE = re.compile(r"[/\\@?#\s]")


@dataclass(frozen=True)
class ParsedAlias:
    """Syntactic parts of an alias.

    Attributes:
        domain: Text after the last '$'. Used for configuration discovery.
        local_with_prefix: Everything before the last '$', including any
            ticker prefix.
        ticker_prefix: Lower-cased ticker prefix, or None when absent.
        local_part: local_with_prefix without the ticker prefix.
        tag: Text after the first '+' in local_part, or None.
    """
    domain: str
    local_with_prefix: str
    ticker_prefix: Optional[str] = None
    local_part: str = ""
    tag: Optional[str] = None


def normalize_ticker(value: Optional[str]) -> str:
    """Trim and lower-case a ticker for comparison and URL building."""
    return (value or "").strip().lower()


def parse_alias(alias: str) -> ParsedAlias:
    """Split an alias into domain, local part and optional ticker prefix.

    Args:
        alias: Raw alias string, e.g. "xmr:donations$example.com".

    Returns:
        ParsedAlias with the extracted parts.

    Raises:
        AliasFormatError: No '$', empty domain, a domain containing
            '/', '@', '?', '#', '\\' or whitespace, empty local part, or a
            malformed ticker prefix (empty ticker, empty local part, or more
            than one ':' before the last '$').
    """
    idx = alias.rfind("$")
    if idx == -1 or idx == len(alias) - 1:
        raise AliasFormatError()

    domain = alias[idx + 1:]
    if _DOMAIN_FORBIDDEN_RE.search(domain):
        raise AliasFormatError(f"alias domain is not a host name: {domain!r}")
    left = alias[:idx]
    if not left:
        raise AliasFormatError("alias must have a local part before '$'")

    ticker_prefix = None
    local_part = left

    colon = left.find(":")
    if colon != -1:
        if colon == 0 or colon == len(left) - 1 or left.find(":", colon + 1) != -1:
            raise AliasFormatError(
                "invalid format (expected [ticker:]alias[+tag]$domain)"
            )
        ticker_prefix = left[:colon].lower()
        local_part = left[colon + 1:]

    _, plus, tag = local_part.partition("+")

    return ParsedAlias(
        domain=domain,
        local_with_prefix=left,
        ticker_prefix=ticker_prefix,
        local_part=local_part,
        tag=tag if plus and tag else None,
    )
