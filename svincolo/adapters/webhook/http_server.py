"""HTTP server adapter for the player release webhook.

Serves the webhook on an aiohttp application running in the same event
loop as the Discord gateway client, so requests interleave without
threads:

- POST /svincolato: player release webhook (Bearer token required)
- GET /health: liveness plus Discord connection state (public)

Unmatched routes and unhandled errors are answered with JSON bodies.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable

from aiohttp import web

from svincolo.adapters.webhook.receiver import ReleaseWebhookReceiver

logger = logging.getLogger(__name__)

RECEIVER_KEY = web.AppKey("receiver", ReleaseWebhookReceiver)

Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]


@web.middleware
async def json_error_middleware(request: web.Request, handler: Handler) -> web.StreamResponse:
    """Answer unmatched routes and unhandled exceptions with JSON."""
    try:
        return await handler(request)
    except (web.HTTPNotFound, web.HTTPMethodNotAllowed):
        return web.json_response(
            {
                "error": "Not Found",
                "message": f"Route {request.method} {request.path} not found",
            },
            status=404,
        )
    except web.HTTPException:
        raise
    except Exception as e:
        # Log full exception server-side; return generic error to client
        logger.error(f"Unhandled error on {request.method} {request.path}: {e}", exc_info=True)
        return web.json_response(
            {"error": "Internal Server Error", "message": "Something went wrong"},
            status=500,
        )


def _reject_constant(name: str) -> Any:
    """Refuse NaN and Infinity, which are not valid JSON."""
    raise ValueError(f"Invalid JSON constant: {name}")


async def handle_player_release(request: web.Request) -> web.Response:
    """POST /svincolato"""
    receiver = request.app[RECEIVER_KEY]

    body = await request.read()
    try:
        data: Any = json.loads(body, parse_constant=_reject_constant) if body else {}
    except ValueError:
        return web.json_response(
            {"error": "Bad Request", "message": "Invalid JSON body"}, status=400
        )

    result = await receiver.handle_player_release(
        request.headers.get("Authorization"), data
    )
    return web.json_response(result.body, status=result.status)


async def handle_health(request: web.Request) -> web.Response:
    """GET /health. Always public."""
    receiver = request.app[RECEIVER_KEY]
    return web.json_response(
        {
            "status": "OK",
            "message": "Svincolo webhook server is running",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "botStatus": "Connected" if receiver.gateway.is_connected else "Disconnected",
        }
    )


def make_webhook_app(receiver: ReleaseWebhookReceiver) -> web.Application:
    """Build the aiohttp application with the receiver injected.

    Args:
        receiver: Receiver for player release webhooks.

    Returns:
        A configured application, not yet bound to a socket.
    """
    app = web.Application(middlewares=[json_error_middleware])
    app[RECEIVER_KEY] = receiver
    app.router.add_post("/svincolato", handle_player_release)
    app.router.add_get("/health", handle_health)
    return app


class WebhookHTTPServer:
    """Webhook HTTP server adapter.

    Always binds to all interfaces; only the port is configurable.
    """

    def __init__(
        self,
        receiver: ReleaseWebhookReceiver,
        host: str = "0.0.0.0",
        port: int = 3000,
    ):
        """Initialize the HTTP server.

        Args:
            receiver: ReleaseWebhookReceiver instance to handle requests.
            host: Host to listen on (default 0.0.0.0).
            port: Port to listen on (default 3000).
        """
        self.receiver = receiver
        self.host = host
        self.port = port
        self._runner: web.AppRunner | None = None

    async def start(self) -> None:
        """Start the HTTP server."""
        logger.info(f"Starting webhook HTTP server on {self.host}:{self.port}")

        self._runner = web.AppRunner(make_webhook_app(self.receiver), access_log=logger)
        await self._runner.setup()
        site = web.TCPSite(self._runner, self.host, self.port)
        await site.start()

        logger.info("Webhook HTTP server started")

    async def stop(self) -> None:
        """Stop the HTTP server."""
        if self._runner is not None:
            await self._runner.cleanup()
            self._runner = None
        logger.info("Webhook HTTP server stopped")
