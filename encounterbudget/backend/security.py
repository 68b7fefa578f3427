"""GM token handling: only the game master may write journals or award XP."""

from __future__ import annotations

import hashlib
import hmac
import secrets

from encounterbudget.backend.config import load_settings


TOKEN_BYTES = 24


def generate_token() -> str:
    """Generate a URL-safe GM token."""
    return secrets.token_urlsafe(TOKEN_BYTES)


def hash_token(token: str, server_salt: str) -> str:
    """Create deterministic token hash via sha256(token + server_salt)."""
    payload = f"{token}{server_salt}".encode("utf-8")
    return hashlib.sha256(payload).hexdigest()


def verify_token(raw_token: str, expected_hash: str | None, server_salt: str) -> bool:
    if not raw_token or not expected_hash:
        return False
    return hmac.compare_digest(hash_token(raw_token, server_salt), expected_hash)


def main() -> None:
    """Mint a GM token and print the hash to configure on the server."""
    settings = load_settings()
    token = generate_token()
    print(f"GM token: {token}")
    print(f"ENCOUNTERBUDGET_GM_TOKEN_HASH={hash_token(token, settings.server_salt)}")


if __name__ == "__main__":
    main()
