"""Command-line interface for alias resolution.

Commands:
    cryptalias resolve <ticker> <alias>     Resolve and verify an alias
    cryptalias verify <jws> --jwk <key>     Verify a signed response offline
    cryptalias parse <alias>                Show the syntactic parts of an alias
    cryptalias decode <jws>                 Show a signed payload without verifying
"""

import asyncio
import json
import logging
import sys
from dataclasses import asdict
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Optional

import typer

from cryptalias.logging_config import configure_logging
from .alias import parse_alias
from .exceptions import (
    AliasFormatError,
    CryptaliasError,
    InvalidExpiryError,
    InvalidInputError,
    TickerMismatchError,
)
from .expiry import enforce_expiry, parse_expires
from .jws import decode_jws_payload
from .resolver import CryptaliasResolver
from .signature import verify_jws

log = logging.getLogger("cryptalias.cli")

# Exit codes
EXIT_SUCCESS = 0
EXIT_RESOLUTION_FAILURE = 1
EXIT_INPUT_ERROR = 2

_INPUT_ERRORS = (InvalidInputError, AliasFormatError, TickerMismatchError)

app = typer.Typer(
    name="cryptalias",
    help="Resolve cryptalias aliases to verified wallet addresses.",
    no_args_is_help=True,
)


class OutputFormat(str, Enum):
    json = "json"
    text = "text"


# =============================================================================
# Helpers
# =============================================================================

def read_input(source: str) -> str:
    """Read a literal value, a file's contents, or stdin ('-')."""
    if source == "-":
        return sys.stdin.read()
    try:
        path = Path(source)
        if path.is_file():
            return path.read_text(encoding="utf-8")
    except OSError:
        # Long literals (e.g. a JWS) can exceed filename limits
        pass
    return source


def output(result: Any, format: OutputFormat) -> None:
    if format == OutputFormat.text:
        if isinstance(result, dict):
            for key, value in result.items():
                typer.echo(f"{key}: {value}")
        else:
            typer.echo(str(result))
        return
    typer.echo(json.dumps(result, indent=2, default=str))


def output_error(error: CryptaliasError) -> None:
    """Print the error as JSON and exit with the matching code."""
    typer.echo(error.to_detail().model_dump_json(indent=2))
    exit_code = EXIT_INPUT_ERROR if isinstance(error, _INPUT_ERRORS) else EXIT_RESOLUTION_FAILURE
    raise typer.Exit(exit_code)


# =============================================================================
# Commands
# =============================================================================

@app.callback()
def main(
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Log level (default: CRYPTALIAS_LOG_LEVEL or WARNING)",
    ),
) -> None:
    configure_logging(log_level=log_level)


@app.command("resolve")
def resolve_cmd(
    ticker: str = typer.Argument(..., help="Asset ticker, e.g. xmr"),
    alias: str = typer.Argument(..., help="Alias, e.g. donations$example.com"),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        "-t",
        help="Per-request timeout in seconds",
    ),
    format: OutputFormat = typer.Option(
        OutputFormat.text,
        "--format",
        "-f",
        help="Output format",
    ),
) -> None:
    """Resolve an alias to a verified, unexpired address.

    Examples:
        cryptalias resolve xmr 'donations$example.com'
        cryptalias resolve xmr 'xmr:donations$example.com' --format json
    """
    resolver = CryptaliasResolver(timeout=timeout)
    try:
        resolved = asyncio.run(resolver.resolve_details(ticker, alias))
    except CryptaliasError as e:
        log.warning(f"Resolution failed: {e.message}", extra={"code": e.code})
        output_error(e)
        return  # unreachable, but helps type checker

    if format == OutputFormat.text:
        typer.echo(resolved.address)
        return
    output(asdict(resolved), format)


@app.command("verify")
def verify_cmd(
    source: str = typer.Argument(
        ...,
        help="Signed response (JWS), file path, or '-' for stdin",
    ),
    jwk: str = typer.Option(
        ...,
        "--jwk",
        "-k",
        help="Trust key as JWK JSON or a file containing it",
    ),
    now: Optional[str] = typer.Option(
        None,
        "--now",
        help="Override current time (RFC3339) for expiry checks",
    ),
    format: OutputFormat = typer.Option(
        OutputFormat.json,
        "--format",
        "-f",
        help="Output format",
    ),
) -> None:
    """Verify a signed resolution response against a trust key.

    Examples:
        cryptalias verify response.jws --jwk key.json
        curl -s "$URL" | cryptalias verify - --jwk '{"kty":"OKP",...}'
    """
    signed = read_input(source).strip()
    try:
        trust_key = json.loads(read_input(jwk))
    except ValueError as e:
        typer.echo(json.dumps({"error": f"JWK is not valid JSON: {e}"}))
        raise typer.Exit(EXIT_INPUT_ERROR)

    try:
        now_dt: Optional[datetime] = parse_expires(now) if now else None
    except InvalidExpiryError:
        typer.echo(json.dumps({"error": f"--now is not an RFC3339 timestamp: {now}"}))
        raise typer.Exit(EXIT_INPUT_ERROR)

    try:
        payload = verify_jws(signed, trust_key)
        expires = enforce_expiry(payload.get("expires"), now=now_dt)
    except CryptaliasError as e:
        output_error(e)
        return

    output({"valid": True, "expires": expires.isoformat(), "payload": payload}, format)


@app.command("parse")
def parse_cmd(
    alias: str = typer.Argument(..., help="Alias to parse"),
    format: OutputFormat = typer.Option(
        OutputFormat.json,
        "--format",
        "-f",
        help="Output format",
    ),
) -> None:
    """Show the domain, local part, ticker prefix and tag of an alias."""
    try:
        parsed = parse_alias(alias)
    except CryptaliasError as e:
        output_error(e)
        return
    output(asdict(parsed), format)


@app.command("decode")
def decode_cmd(
    source: str = typer.Argument(
        ...,
        help="Signed response (JWS), file path, or '-' for stdin",
    ),
) -> None:
    """Decode a signed response's payload WITHOUT verifying it."""
    try:
        payload = decode_jws_payload(read_input(source).strip())
    except CryptaliasError as e:
        output_error(e)
        return
    output(payload, OutputFormat.json)


if __name__ == "__main__":
    app()
