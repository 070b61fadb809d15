"""
tfverify/utils/http.py

Helpers for faking HTTP endpoints that module scripts talk to. Containers are
started on the host network, so a server bound on the host is reachable from
inside them.
"""

from __future__ import annotations

import json
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Awaitable, Callable, List, Tuple

from aiohttp import web

Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]
Route = Tuple[str, str, Handler]


def json_response(obj: object, status: int = 200) -> web.Response:
    """Serialize `obj` into an application/json response with the given status."""
    return web.Response(
        text=json.dumps(obj),
        status=status,
        content_type="application/json",
    )


@asynccontextmanager
async def fake_api(
    routes: List[Route], host: str = "127.0.0.1", port: int = 0
) -> AsyncGenerator[str, None]:
    """
    Serves an aiohttp application for the duration of the context.

    Args:
        routes (List[Route]): (method, path, handler) triples.
        host (str): Interface to bind. Defaults to loopback.
        port (int): Port to bind; 0 picks a free one.

    Yields:
        str: Base URL of the server, e.g. "http://127.0.0.1:41231".
    """
    app = web.Application()
    for method, path, handler in routes:
        app.router.add_route(method, path, handler)

    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, host, port)
    await site.start()
    try:
        # port 0 is resolved only once the socket is bound
        bound_port = runner.addresses[0][1]
        yield f"http://{host}:{bound_port}"
    finally:
        await runner.cleanup()
