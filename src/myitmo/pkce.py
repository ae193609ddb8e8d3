"""PKCE (Proof Key for Code Exchange, RFC 7636) helpers."""

import base64
import hashlib
import secrets

from src.myitmo.models import PKCEPair

VERIFIER_BYTES = 32


def _b64url(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def generate_code_verifier() -> str:
    return _b64url(secrets.token_bytes(VERIFIER_BYTES))


def generate_code_challenge(verifier: str) -> str:
    """S256 challenge: base64url(sha256(verifier)) without padding."""
    digest = hashlib.sha256(verifier.encode("utf-8")).digest()
    return _b64url(digest)


def generate_pkce() -> PKCEPair:
    verifier = generate_code_verifier()
    return PKCEPair(verifier=verifier, challenge=generate_code_challenge(verifier))
