"""
Cryptalias client configuration constants.

Constants are organized into:
- NORMATIVE: Fixed by the resolution protocol, cannot be changed without
  breaking interoperability with resolver servers
- OPERATIONAL: Deployment-specific settings (env vars)
"""

import os

# =============================================================================
# NORMATIVE CONSTANTS (fixed by protocol)
# =============================================================================

# Discovery document served by every alias domain
# Fetched as https://{domain}{WELL_KNOWN_CONFIGURATION_PATH}
WELL_KNOWN_CONFIGURATION_PATH: str = "/.well-known/cryptalias/configuration"

# Resolver query path, appended to the discovered resolver_endpoint
# Full form: {resolver}/_cryptalias/resolve/{ticker}/{alias}
RESOLVE_PATH_PREFIX: str = "/_cryptalias/resolve"

# Accept headers for the two fetches
CONFIG_ACCEPT: str = "application/json"
JWS_ACCEPT: str = "application/jose"

# Trust key format
# Only OKP/Ed25519 keys are accepted; verification is pinned to Ed25519
# and never driven by the JWS header.
JWK_KEY_TYPE: str = "OKP"
JWK_CURVE: str = "Ed25519"
ED25519_PUBLIC_KEY_BYTES: int = 32
ED25519_SIGNATURE_BYTES: int = 64

# =============================================================================
# OPERATIONAL SETTINGS (deployment-specific, via environment variables)
# =============================================================================

# Per-request timeout applied when the resolver opens its own HTTP client.
# The protocol itself imposes no timeout; this is transport policy.
HTTP_TIMEOUT_SECONDS: float = float(os.getenv("CRYPTALIAS_HTTP_TIMEOUT", "10.0"))

# User-Agent sent on both fetches
USER_AGENT: str = os.getenv("CRYPTALIAS_USER_AGENT", "cryptalias-client-python/0.1")

# Non-2xx response bodies are carried on fetch errors for diagnosis.
# Bodies longer than this are truncated.
ERROR_BODY_MAX_CHARS: int = int(os.getenv("CRYPTALIAS_ERROR_BODY_MAX_CHARS", "512"))
