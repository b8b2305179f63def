"""Discord messaging gateway adapter.

Implements MessagingGatewayPort on top of the Discord REST API using a
single long-lived httpx client authenticated with the bot token.
"""

import logging
from typing import Any

import httpx

from svincolo.core.errors import (
    ChannelNotFoundError,
    DispatchError,
    DispatchTimeoutError,
    GatewayAuthenticationError,
    PermissionDeniedError,
)
from svincolo.core.models import BotUser, Channel, ReleaseNotification
from svincolo.core.ports import MessagingGatewayPort

logger = logging.getLogger(__name__)

# Discord JSON error codes
UNKNOWN_CHANNEL = 10003
MISSING_ACCESS = 50001
MISSING_PERMISSIONS = 50013

# Component type/style constants
ACTION_ROW = 1
BUTTON = 2
LINK_BUTTON_STYLE = 5


def to_discord_message(notification: ReleaseNotification) -> dict[str, Any]:
    """Encode a notification as a Discord create-message body."""
    embed = {
        "title": notification.title,
        "color": notification.color,
        "fields": [
            {"name": field.name, "value": field.value, "inline": field.inline}
            for field in notification.fields
        ],
        "footer": {"text": notification.footer},
        "timestamp": notification.sent_at.isoformat(),
    }
    button = {
        "type": BUTTON,
        "style": LINK_BUTTON_STYLE,
        "label": notification.link_label,
        "url": notification.link_url,
    }
    return {
        "embeds": [embed],
        "components": [{"type": ACTION_ROW, "components": [button]}],
    }


def _error_code(response: httpx.Response) -> int | None:
    """Extract Discord's JSON error code from a failed response."""
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict) and isinstance(body.get("code"), int):
        return body["code"]
    return None


def _error_message(response: httpx.Response) -> str:
    """Human-readable description of a failed Discord response."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("message"):
        return f"Discord API error {response.status_code}: {body['message']}"
    return f"Discord API error {response.status_code}"


class DiscordGatewayClient(MessagingGatewayPort):
    """Posts release notifications to Discord channels as a bot."""

    def __init__(
        self,
        bot_token: str,
        api_base_url: str = "https://discord.com/api/v10",
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the Discord gateway client.

        Args:
            bot_token: Discord bot token.
            api_base_url: Base URL for the Discord REST API.
            timeout_seconds: Per-request timeout for API calls.
            transport: Optional httpx transport, used by tests.
        """
        self.api_base_url = api_base_url
        self.timeout_seconds = timeout_seconds
        self._bot_token = bot_token
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self.user: BotUser | None = None

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the shared HTTP client.

        Returns:
            httpx.AsyncClient configured with bot authentication.
        """
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.api_base_url,
                headers={
                    "Authorization": f"Bot {self._bot_token}",
                    "User-Agent": "DiscordBot (https://app.ultimateproclubs.com, 0.1.0)",
                },
                timeout=self.timeout_seconds,
                transport=self._transport,
            )
        return self._client

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """Issue a request, translating transport failures to gateway errors."""
        client = self._get_client()
        try:
            return await client.request(method, url, **kwargs)
        except httpx.TimeoutException as e:
            raise DispatchTimeoutError(f"Discord API timed out: {method} {url}") from e
        except httpx.RequestError as e:
            raise DispatchError(f"Discord API request failed: {e}") from e

    @property
    def is_connected(self) -> bool:
        return self._client is not None and self.user is not None

    async def login(self) -> BotUser:
        """Verify the bot token and remember who we are logged in as."""
        response = await self._request("GET", "/users/@me")
        if response.status_code == 401:
            raise GatewayAuthenticationError("Discord rejected the bot token")
        if response.status_code != 200:
            raise DispatchError(_error_message(response))

        data = response.json()
        self.user = BotUser(id=str(data["id"]), username=data.get("username", ""))
        logger.info(f"Discord bot logged in as {self.user.username}")
        return self.user

    async def fetch_channel(self, channel_id: str) -> Channel | None:
        """Resolve a channel, returning None if it is gone or hidden."""
        response = await self._request("GET", f"/channels/{channel_id}")

        if response.status_code in (403, 404):
            logger.warning(
                f"Discord channel {channel_id} not available",
                extra={
                    "channel_id": channel_id,
                    "status_code": response.status_code,
                    "discord_code": _error_code(response),
                },
            )
            return None
        if response.status_code != 200:
            raise DispatchError(_error_message(response))

        data = response.json()
        return Channel(id=str(data["id"]), name=data.get("name"), type=data.get("type"))

    async def send(self, channel: Channel, notification: ReleaseNotification) -> None:
        """Post a notification as an embed with a link button."""
        response = await self._request(
            "POST",
            f"/channels/{channel.id}/messages",
            json=to_discord_message(notification),
        )

        if response.status_code in (200, 201):
            return

        code = _error_code(response)
        if code == UNKNOWN_CHANNEL or response.status_code == 404:
            raise ChannelNotFoundError(_error_message(response))
        if code in (MISSING_ACCESS, MISSING_PERMISSIONS) or response.status_code == 403:
            raise PermissionDeniedError(_error_message(response))
        raise DispatchError(_error_message(response))

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
        self.user = None
