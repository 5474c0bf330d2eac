"""
Security helpers for password hashing and session tokens.

Session tokens are compact JSON Web Tokens signed with HMAC‑SHA256:
three base64url encoded segments ``header.payload.signature``.  The
payload carries the subject (``sub``), the issue time (``iat``) and
the expiration time (``exp``) as UNIX timestamps.  The signing key is
always passed in by the caller; nothing here reads the environment.

Passwords are hashed with PBKDF2‑HMAC‑SHA256 using a random 16‑byte
salt and 100 000 iterations, which costs on the order of 100 ms per
hash.  The stored form is ``salthex$hashhex``.
"""

import base64
import hashlib
import hmac
import json
import os
import time
from typing import Any, Dict, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

SUPPORTED_ALGORITHM = "HS256"
DEFAULT_TOKEN_LIFETIME = 24 * 60 * 60
PBKDF2_ITERATIONS = 100_000
SALT_BYTES = 16


def _b64_url_encode(data: bytes) -> str:
    """Base64‑url encode bytes without padding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("utf-8")


def _b64_url_decode(data: str) -> bytes:
    """Decode base64‑url encoded string, adding padding if necessary."""
    padding = "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(data + padding)


def _sign(message: bytes, secret: str) -> bytes:
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).digest()


def create_access_token(
    subject: str,
    secret_key: str,
    expires_delta: Optional[int] = None,
    algorithm: str = SUPPORTED_ALGORITHM,
    now: Optional[int] = None,
) -> str:
    """Create a signed token for ``subject``.

    Parameters
    ----------
    subject : str
        Username stored in the ``sub`` claim.
    secret_key : str
        Symmetric signing key.  Must not be empty.
    expires_delta : Optional[int]
        Lifetime of the token in seconds.  Defaults to 24 hours.
    algorithm : str
        Only ``HS256`` is supported.
    now : Optional[int]
        Issue time as a UNIX timestamp; the current time when omitted.

    Returns
    -------
    str
        The token in ``header.payload.signature`` form.

    Raises
    ------
    ValueError
        If the algorithm is unsupported or the key is empty.
    """
    if algorithm != SUPPORTED_ALGORITHM:
        raise ValueError(f"Unsupported signing algorithm: {algorithm}")
    if not secret_key:
        raise ValueError("Signing key is empty")
    issued_at = int(time.time()) if now is None else int(now)
    lifetime = expires_delta if expires_delta is not None else DEFAULT_TOKEN_LIFETIME
    claims = {"sub": subject, "iat": issued_at, "exp": issued_at + lifetime}
    header = {"alg": algorithm, "typ": "JWT"}
    header_b64 = _b64_url_encode(json.dumps(header, separators=(",", ":")).encode("utf-8"))
    payload_b64 = _b64_url_encode(json.dumps(claims, separators=(",", ":")).encode("utf-8"))
    signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
    signature_b64 = _b64_url_encode(_sign(signing_input, secret_key))
    return f"{header_b64}.{payload_b64}.{signature_b64}"


def decode_access_token(token: str, secret_key: str, now: Optional[int] = None) -> Optional[Dict[str, Any]]:
    """Verify a token and return its claims.

    Returns ``None`` when the token is malformed, the signature does
    not match ``secret_key``, the header names another algorithm, or
    the ``exp`` claim lies in the past relative to ``now``.
    """
    parts = token.split(".")
    if len(parts) != 3:
        return None
    header_b64, payload_b64, signature_b64 = parts
    try:
        header = json.loads(_b64_url_decode(header_b64).decode("utf-8"))
        actual_sig = _b64_url_decode(signature_b64)
        expected_sig = _sign(f"{header_b64}.{payload_b64}".encode("utf-8"), secret_key)
        # Constant‑time comparison to prevent timing attacks
        if not hmac.compare_digest(expected_sig, actual_sig):
            return None
        if not isinstance(header, dict) or header.get("alg") != SUPPORTED_ALGORITHM:
            return None
        claims = json.loads(_b64_url_decode(payload_b64).decode("utf-8"))
    except (ValueError, UnicodeDecodeError):
        return None
    if not isinstance(claims, dict) or not isinstance(claims.get("exp"), (int, float)):
        return None
    current = int(time.time()) if now is None else int(now)
    if claims["exp"] < current:
        return None
    return claims


def hash_password(password: str, iterations: int = PBKDF2_ITERATIONS) -> str:
    """Hash a password with PBKDF2‑HMAC‑SHA256 and a fresh random salt."""
    salt = os.urandom(SALT_BYTES)
    dk = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, iterations)
    return f"{salt.hex()}${dk.hex()}"


def verify_password(plain_password: str, hashed_password: str, iterations: int = PBKDF2_ITERATIONS) -> bool:
    """Check ``plain_password`` against a stored ``salthex$hashhex`` string.

    The digests are compared in constant time.  A stored value that
    cannot be parsed, and a password that is not encodable as UTF-8,
    never verify.
    """
    try:
        salt_hex, hash_hex = hashed_password.split("$", 1)
        salt = bytes.fromhex(salt_hex)
        stored_hash = bytes.fromhex(hash_hex)
        candidate = plain_password.encode("utf-8")
    except (AttributeError, ValueError):
        return False
    dk = hashlib.pbkdf2_hmac("sha256", candidate, salt, iterations)
    return hmac.compare_digest(dk, stored_hash)


security = HTTPBearer(auto_error=False)


def get_current_username(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> str:
    """Dependency that returns the username of the authenticated caller.

    The bearer token is verified with the signing key of the running
    application (``request.app.state.settings``).  A missing, forged or
    expired token results in HTTP 401.
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    settings = request.app.state.settings
    claims = decode_access_token(credentials.credentials, settings.secret_key)
    if not claims or not claims.get("sub"):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return str(claims["sub"])
