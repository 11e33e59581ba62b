"""Request guards shared by the API resources."""

from uuid import UUID

import falcon.asgi

from gatekeeper.application.services import PermissionAuthorizer
from gatekeeper.interfaces.api.middleware.auth import RequestUser


async def authorize(
    req: falcon.asgi.Request,
    resp: falcon.asgi.Response,
    authorizer: PermissionAuthorizer,
    permission: str,
) -> RequestUser | None:
    """Return the acting user, or set 401/403 on resp and return None."""
    user = getattr(req.context, "user", None)
    if not user:
        resp.status = falcon.HTTP_401
        resp.media = {"error": "Unauthorized"}
        return None
    if not await authorizer.has_permission(user.user_id, permission):
        resp.status = falcon.HTTP_403
        resp.media = {"error": "Permission denied"}
        return None
    return user


def parse_uuid(value: object, label: str, resp: falcon.asgi.Response) -> UUID | None:
    """Parse a path or body id; sets 400 on resp when malformed."""
    try:
        return UUID(str(value))
    except (TypeError, ValueError):
        resp.status = falcon.HTTP_400
        resp.media = {"error": f"Invalid {label}"}
        return None


async def read_body(req: falcon.asgi.Request, resp: falcon.asgi.Response) -> dict | None:
    """JSON object body; sets 400 on resp when it is not an object."""
    body = await req.get_media(default_when_empty=None)
    if not isinstance(body, dict):
        resp.status = falcon.HTTP_400
        resp.media = {"error": "Request body must be a JSON object"}
        return None
    return body
