"""Supabase Auth-backed identity provider."""

import logging
from dataclasses import dataclass

from supabase import AuthError, Client

from members_api.services.identity import IdentityProvider

logger = logging.getLogger(__name__)


@dataclass
class SupabaseIdentityProvider(IdentityProvider):
    """Resolve usernames from Supabase access tokens."""

    client: Client

    def resolve_username(self, token: str) -> str | None:
        """Return the `username` stored in the token owner's metadata."""
        try:
            response = self.client.auth.get_user(token)
        except AuthError as exc:
            logger.info("Rejected access token", extra={"reason": str(exc)})
            return None
        if response is None or response.user is None:
            return None
        metadata = response.user.user_metadata or {}
        username = metadata.get("username")
        return str(username) if username else None
