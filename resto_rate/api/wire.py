"""MessagePack request and response encoding for API routers.

Routers built with ``route_class=MsgPackRoute`` and
``default_response_class=MsgPackResponse`` accept ``application/msgpack``
request bodies and always answer in MessagePack. JSON request bodies keep
working unchanged.
"""

import logging
from collections.abc import Callable, Coroutine
from typing import Any

import msgpack
from fastapi import Request, Response
from fastapi.routing import APIRoute

from resto_rate.exceptions import InvalidInputError

logger = logging.getLogger(__name__)

MSGPACK_MEDIA_TYPE = "application/msgpack"


class MsgPackResponse(Response):
    """Serialize the JSON-compatible value FastAPI produced with msgpack."""

    media_type = MSGPACK_MEDIA_TYPE

    def render(self, content: Any) -> bytes:
        return msgpack.packb(content, use_bin_type=True)


def is_msgpack(content_type: str | None) -> bool:
    if not content_type:
        return False
    return content_type.split(";", 1)[0].strip().lower() in (
        MSGPACK_MEDIA_TYPE,
        "application/x-msgpack",
    )


class MsgPackRequest(Request):
    """Request whose body is decoded from MessagePack instead of JSON."""

    async def json(self) -> Any:
        if not hasattr(self, "_json"):
            body = await self.body()
            if not body:
                self._json = None
            else:
                try:
                    self._json = msgpack.unpackb(body, raw=False)
                except (ValueError, TypeError) as e:
                    logger.debug(f"Undecodable msgpack body: {e}")
                    raise InvalidInputError("Request body is not valid MessagePack") from e
        return self._json


def _as_json_scope(scope: dict) -> dict:
    # FastAPI only calls request.json() for JSON content types
    headers = [
        (key, b"application/json" if key == b"content-type" else value)
        for key, value in scope["headers"]
    ]
    return {**scope, "headers": headers}


class MsgPackRoute(APIRoute):
    """Route that decodes ``application/msgpack`` bodies before validation."""

    def get_route_handler(self) -> Callable[[Request], Coroutine[Any, Any, Response]]:
        original_route_handler = super().get_route_handler()

        async def custom_route_handler(request: Request) -> Response:
            if is_msgpack(request.headers.get("content-type")):
                request = MsgPackRequest(_as_json_scope(request.scope), request.receive)
            return await original_route_handler(request)

        return custom_route_handler
