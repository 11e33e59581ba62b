"""Auth middleware - resolves the acting user from the bearer token."""

from dataclasses import dataclass
from uuid import UUID

import falcon.asgi


@dataclass
class RequestUser:
    """User from request context."""

    user_id: UUID
    email: str | None = None
    username: str | None = None


class AuthMiddleware:
    """Middleware that validates the bearer token and sets req.context.user.

    req.context.user is None when the request carries no valid token.
    Without a Keycloak provider and with allow_uuid_tokens set (development
    only), the bearer token itself is taken as the user id.
    """

    def __init__(self, keycloak_provider=None, allow_uuid_tokens: bool = False) -> None:
        self._keycloak = keycloak_provider
        self._allow_uuid_tokens = allow_uuid_tokens

    async def process_request(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response
    ) -> None:
        """Extract user from Authorization header."""
        req.context.user = None
        auth = req.get_header("Authorization")
        if not auth or not auth.startswith("Bearer "):
            return
        token = auth[7:]
        if self._keycloak:
            user = self._keycloak.decode_token(token)
            if user:
                req.context.user = RequestUser(
                    user_id=user.user_id,
                    email=user.email,
                    username=user.username,
                )
        elif self._allow_uuid_tokens:
            try:
                req.context.user = RequestUser(user_id=UUID(token))
            except ValueError:
                pass
