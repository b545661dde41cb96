"""
Request body size limit.

A declared Content-Length over the limit is refused straight away. Bodies
without one (chunked uploads) are read up front and counted as they
arrive; once the running total passes the limit the request is refused
without reaching a handler. Accepted bodies are replayed to the app
unchanged.
"""

import logging

from fastapi.responses import JSONResponse

from signature_api import config

logger = logging.getLogger(__name__)

TOO_LARGE = "Documento grande demais."


class BodySizeLimitMiddleware:
    def __init__(self, app, max_bytes: int | None = None):
        self.app = app
        self.max_bytes = max_bytes

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        limit = self.max_bytes if self.max_bytes is not None else config.MAX_BODY_BYTES

        length = dict(scope["headers"]).get(b"content-length")
        if length is not None and length.isdigit() and int(length) > limit:
            await self._reject(scope, receive, send, int(length))
            return

        buffered = []
        received = 0
        while True:
            message = await receive()
            buffered.append(message)
            if message["type"] != "http.request":
                break
            received += len(message.get("body", b""))
            if received > limit:
                await self._reject(scope, receive, send, received)
                return
            if not message.get("more_body", False):
                break

        async def replay():
            if buffered:
                return buffered.pop(0)
            return await receive()

        await self.app(scope, replay, send)

    async def _reject(self, scope, receive, send, size: int) -> None:
        logger.info("Rejected %s %s: body of at least %d bytes", scope["method"], scope["path"], size)
        response = JSONResponse(status_code=413, content={"ok": False, "error": TOO_LARGE})
        await response(scope, receive, send)
