"""Composition root for the player release notifier.

This module is the ONLY location that imports both core domain logic
and concrete adapter implementations. All wiring of dependencies
happens here.

Startup order:
- Configuration loading via config module (fatal if incomplete)
- Discord gateway login (fatal if the token is rejected)
- HTTP server start
- Wait for SIGINT/SIGTERM, then stop the server and close the gateway
"""

import asyncio
import logging
import signal
import sys

from pydantic import ValidationError

from svincolo.adapters.discord.gateway import DiscordGatewayClient
from svincolo.adapters.webhook.http_server import WebhookHTTPServer
from svincolo.adapters.webhook.receiver import ReleaseWebhookReceiver
from svincolo.config import Settings, load_settings
from svincolo.core.errors import GatewayError
from svincolo.core.ports import MessagingGatewayPort

LISTEN_HOST = "0.0.0.0"


def configure_logging(log_level: str, log_format: str) -> None:
    """Configure application logging.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_format: Log format (json, text).
    """
    level = getattr(logging, log_level, logging.INFO)

    if log_format == "json":
        format_str = '{"time": "%(asctime)s", "level": "%(levelname)s", "message": "%(message)s"}'
    else:
        format_str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=level,
        format=format_str,
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
    )


def build_receiver(settings: Settings, gateway: MessagingGatewayPort) -> ReleaseWebhookReceiver:
    """Wire the webhook receiver from settings and a gateway."""
    return ReleaseWebhookReceiver(
        gateway=gateway,
        channel_id=settings.discord_channel_id,
        api_secret=settings.api_secret,
        display_timezone=settings.display_tzinfo,
        dispatch_timeout_seconds=settings.dispatch_timeout_seconds,
    )


async def serve(
    settings: Settings,
    gateway: MessagingGatewayPort,
    stop_event: asyncio.Event,
) -> None:
    """Log in, serve webhooks until stop_event is set, then shut down.

    Raises:
        GatewayError: If the gateway login fails.
    """
    logger = logging.getLogger(__name__)

    try:
        await gateway.login()

        http_server = WebhookHTTPServer(
            receiver=build_receiver(settings, gateway),
            host=LISTEN_HOST,
            port=settings.port,
        )
        await http_server.start()
        try:
            await stop_event.wait()
            logger.info("Shutdown signal received, stopping...")
        finally:
            await http_server.stop()
    finally:
        await gateway.close()
        logger.info("Discord session closed")


async def bootstrap() -> None:
    """Load configuration, wire adapters, and run until signalled.

    Raises:
        SystemExit: On fatal errors (configuration, gateway login).
    """
    try:
        settings = load_settings()
    except ValidationError as e:
        configure_logging("INFO", "text")
        missing = ", ".join(str(err["loc"][0]).upper() for err in e.errors() if err["loc"])
        logging.getLogger(__name__).error(f"Invalid or missing configuration: {missing}")
        sys.exit(1)

    configure_logging(settings.log_level, settings.log_format)
    logger = logging.getLogger(__name__)
    logger.info("Loading player release notifier...")

    gateway = DiscordGatewayClient(
        bot_token=settings.bot_token,
        api_base_url=settings.discord_api_url,
        timeout_seconds=settings.dispatch_timeout_seconds,
    )

    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, stop_event.set)

    try:
        await serve(settings, gateway, stop_event)
    except GatewayError as e:
        logger.error(f"Failed to log in to Discord: {e}")
        sys.exit(1)


def main() -> None:
    """Application entry point.

    Exit codes:
        0: Successful shutdown
        1: Fatal bootstrap or runtime error
    """
    logger = logging.getLogger(__name__)
    try:
        asyncio.run(bootstrap())
    except asyncio.CancelledError:
        logger.info("Graceful shutdown completed")
        sys.exit(0)
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
