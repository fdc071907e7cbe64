from __future__ import annotations
import logging
from typing import Optional

import httpx
from fastapi import Request
from starlette.responses import PlainTextResponse, Response

log = logging.getLogger("uvicorn.error")

# Connection-scoped headers never forwarded in either direction
HOP_BY_HOP = {
    "connection",
    "keep-alive",
    "proxy-authenticate",
    "proxy-authorization",
    "te",
    "trailers",
    "transfer-encoding",
    "upgrade",
}


def _raw_path(request: Request) -> str:
    # Still percent-encoded, so %3F / %23 in a path stay part of the path
    raw = request.scope.get("raw_path")
    if raw:
        return raw.decode("latin-1").split("?", 1)[0]
    return request.url.path


class FrontendProxy:
    """Relays non-API requests to the frontend dev server on localhost:<port>."""

    def __init__(self, port: int, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.port = port
        self.base_url = f"http://localhost:{port}"
        self._transport = transport

    async def forward(self, request: Request) -> Response:
        url = f"{self.base_url}{_raw_path(request)}"
        if request.url.query:
            url = f"{url}?{request.url.query}"

        headers = [
            (k, v) for k, v in request.headers.items()
            if k.lower() not in HOP_BY_HOP and k.lower() != "host"
        ]
        body = await request.body()

        try:
            # Dev-server responses can be slow on first compile; no client-side timeout.
            async with httpx.AsyncClient(timeout=None, transport=self._transport) as client:
                upstream = await client.send(
                    client.build_request(request.method, url, headers=headers, content=body),
                    stream=True,
                )
                try:
                    # Raw bytes: keep any content-encoding the dev server applied
                    content = b"".join([chunk async for chunk in upstream.aiter_raw()])
                finally:
                    await upstream.aclose()
        except httpx.RequestError as e:
            log.warning("Frontend proxy to %s failed: %s", url, e)
            return PlainTextResponse(
                f"Bad Gateway: frontend dev server not running on port {self.port}",
                status_code=502,
            )

        response = Response(content=content, status_code=upstream.status_code)
        for k, v in upstream.headers.multi_items():
            if k.lower() in HOP_BY_HOP or k.lower() == "content-length":
                continue
            response.headers.append(k, v)
        return response
