"""Keycloak OIDC provider for token validation."""

import logging
from dataclasses import dataclass
from uuid import UUID

from keycloak import KeycloakOpenID
from keycloak.exceptions import KeycloakError

logger = logging.getLogger(__name__)


@dataclass
class OIDCUser:
    """Authenticated user from OIDC token."""

    user_id: UUID
    email: str | None
    username: str | None
    realm_roles: list[str]


class KeycloakProvider:
    """Keycloak OIDC - introspects access tokens and extracts the subject."""

    def __init__(
        self,
        server_url: str,
        realm: str,
        client_id: str,
        client_secret: str = "",
    ) -> None:
        self._keycloak = KeycloakOpenID(
            server_url=server_url,
            realm_name=realm,
            client_id=client_id,
            client_secret_key=client_secret,
        )

    def decode_token(self, token: str) -> OIDCUser | None:
        """Validate token, return user info or None.

        The subject must be a UUID since it doubles as the app_user id.
        """
        try:
            token_info = self._keycloak.introspect(token)
        except KeycloakError as e:
            logger.warning("Token introspection failed: %s", e)
            return None
        if not token_info.get("active"):
            return None
        try:
            user_id = UUID(token_info.get("sub", ""))
        except ValueError:
            logger.warning("Token subject is not a UUID: %r", token_info.get("sub"))
            return None
        return OIDCUser(
            user_id=user_id,
            email=token_info.get("email"),
            username=token_info.get("preferred_username"),
            realm_roles=token_info.get("realm_access", {}).get("roles", []),
        )
