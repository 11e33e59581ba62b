"""CORS middleware for the permission API."""

import falcon.asgi

_ALLOW_METHODS = "GET, POST, DELETE, OPTIONS"
_ALLOW_HEADERS = "Authorization, Content-Type"


class CORSMiddleware:
    """Echoes allowed origins and answers OPTIONS preflight.

    An origins list containing "*" allows any origin.
    """

    def __init__(self, origins: list[str]) -> None:
        self._origins = set(origins)
        self._any = "*" in self._origins

    def _allowed(self, origin: str | None) -> bool:
        return bool(origin) and (self._any or origin in self._origins)

    async def process_request(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response
    ) -> None:
        """Short-circuit preflight requests."""
        if req.method != "OPTIONS":
            return
        origin = req.get_header("Origin")
        if self._allowed(origin):
            resp.set_header("Access-Control-Allow-Methods", _ALLOW_METHODS)
            resp.set_header("Access-Control-Allow-Headers", _ALLOW_HEADERS)
            resp.set_header("Access-Control-Max-Age", "86400")
        resp.status = falcon.HTTP_204
        resp.complete = True

    async def process_response(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, resource, req_succeeded
    ) -> None:
        origin = req.get_header("Origin")
        if self._allowed(origin):
            resp.set_header("Access-Control-Allow-Origin", origin)
            resp.append_header("Vary", "Origin")
