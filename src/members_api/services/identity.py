"""Authenticated identity lookup."""

from typing import Protocol


class IdentityProvider(Protocol):
    """Interface for resolving the acting username from an access token."""

    def resolve_username(self, token: str) -> str | None:
        """Return the username for a valid token, or None."""


def parse_bearer_token(authorization: str | None) -> str | None:
    """Extract the token from an `Authorization: Bearer <token>` header."""
    if not authorization:
        return None
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != "bearer":
        return None
    return token.strip() or None
