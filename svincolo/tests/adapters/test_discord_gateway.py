"""Tests for DiscordGatewayClient against a mocked Discord API."""

import json
from datetime import datetime, timezone

import httpx
import pytest

from svincolo.adapters.discord.gateway import DiscordGatewayClient, to_discord_message
from svincolo.core.errors import (
    ChannelNotFoundError,
    DispatchError,
    DispatchTimeoutError,
    GatewayAuthenticationError,
    PermissionDeniedError,
)
from svincolo.core.models import Channel, EmbedField, ReleaseNotification

BOT_TOKEN = "bot-token-xyz"


@pytest.fixture
def notification():
    """A formatted release notification."""
    return ReleaseNotification(
        title="Giocatore svincolato!",
        color=0x00FF00,
        fields=(
            EmbedField(name="Giocatore", value="Mario", inline=True),
            EmbedField(name="Ex Team", value="Rossi FC", inline=True),
            EmbedField(name="Motivo", value="injury", inline=False),
            EmbedField(name="Data", value="15/01/2024 11:30", inline=True),
        ),
        link_label="Visualizza giocatore",
        link_url="https://app.ultimateproclubs.com/player/u1",
        footer="Ultimate Pro Clubs",
        sent_at=datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc),
    )


class RecordingHandler:
    """httpx mock handler returning canned responses and recording requests."""

    def __init__(self, responses: dict[tuple[str, str], httpx.Response | Exception]):
        self.responses = responses
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        result = self.responses[(request.method, request.url.path)]
        if isinstance(result, Exception):
            raise result
        return result


def make_client(handler: RecordingHandler) -> DiscordGatewayClient:
    return DiscordGatewayClient(
        bot_token=BOT_TOKEN,
        api_base_url="https://discord.test/api/v10",
        transport=httpx.MockTransport(handler),
    )


class TestDiscordMessageEncoding:
    def test_embed_and_link_button(self, notification):
        message = to_discord_message(notification)

        embed = message["embeds"][0]
        assert embed["title"] == "Giocatore svincolato!"
        assert embed["color"] == 0x00FF00
        assert embed["footer"] == {"text": "Ultimate Pro Clubs"}
        assert embed["timestamp"] == "2024-01-15T12:00:00+00:00"
        assert embed["fields"][2] == {"name": "Motivo", "value": "injury", "inline": False}

        row = message["components"][0]
        assert row["type"] == 1
        assert row["components"] == [
            {
                "type": 2,
                "style": 5,
                "label": "Visualizza giocatore",
                "url": "https://app.ultimateproclubs.com/player/u1",
            }
        ]


class TestLogin:
    @pytest.mark.asyncio
    async def test_login_sets_user_and_connection(self):
        handler = RecordingHandler(
            {("GET", "/api/v10/users/@me"): httpx.Response(200, json={"id": "99", "username": "svincolo"})}
        )
        client = make_client(handler)

        assert client.is_connected is False
        user = await client.login()

        assert user.username == "svincolo"
        assert client.is_connected is True
        assert handler.requests[0].headers["Authorization"] == f"Bot {BOT_TOKEN}"
        await client.close()
        assert client.is_connected is False

    @pytest.mark.asyncio
    async def test_rejected_token_raises_auth_error_without_leaking_token(self):
        handler = RecordingHandler(
            {("GET", "/api/v10/users/@me"): httpx.Response(401, json={"message": "401: Unauthorized", "code": 0})}
        )
        client = make_client(handler)

        with pytest.raises(GatewayAuthenticationError) as exc_info:
            await client.login()

        assert BOT_TOKEN not in str(exc_info.value)
        assert client.is_connected is False
        await client.close()

    @pytest.mark.asyncio
    async def test_close_is_idempotent(self):
        client = make_client(RecordingHandler({}))

        await client.close()
        await client.close()


class TestFetchChannel:
    @pytest.mark.asyncio
    async def test_resolves_channel(self):
        handler = RecordingHandler(
            {("GET", "/api/v10/channels/123"): httpx.Response(200, json={"id": "123", "name": "svincolati", "type": 0})}
        )
        client = make_client(handler)

        channel = await client.fetch_channel("123")

        assert channel == Channel(id="123", name="svincolati", type=0)
        await client.close()

    @pytest.mark.parametrize(
        "status, code",
        [(404, 10003), (403, 50001)],
    )
    @pytest.mark.asyncio
    async def test_deleted_or_hidden_channel_returns_none(self, status, code):
        handler = RecordingHandler(
            {("GET", "/api/v10/channels/123"): httpx.Response(status, json={"message": "nope", "code": code})}
        )
        client = make_client(handler)

        assert await client.fetch_channel("123") is None
        await client.close()

    @pytest.mark.asyncio
    async def test_server_error_raises_dispatch_error(self):
        handler = RecordingHandler(
            {("GET", "/api/v10/channels/123"): httpx.Response(502, text="Bad Gateway")}
        )
        client = make_client(handler)

        with pytest.raises(DispatchError, match="502"):
            await client.fetch_channel("123")
        await client.close()

    @pytest.mark.asyncio
    async def test_timeout_raises_dispatch_timeout(self):
        handler = RecordingHandler(
            {
                ("GET", "/api/v10/channels/123"): httpx.ReadTimeout("timed out"),
            }
        )
        client = make_client(handler)

        with pytest.raises(DispatchTimeoutError):
            await client.fetch_channel("123")
        await client.close()


class TestSend:
    CHANNEL = Channel(id="123", name="svincolati", type=0)
    PATH = ("POST", "/api/v10/channels/123/messages")

    @pytest.mark.asyncio
    async def test_posts_embed_to_channel(self, notification):
        handler = RecordingHandler({self.PATH: httpx.Response(200, json={"id": "m1"})})
        client = make_client(handler)

        await client.send(self.CHANNEL, notification)

        body = json.loads(handler.requests[0].content)
        assert body == to_discord_message(notification)
        await client.close()

    @pytest.mark.asyncio
    async def test_unknown_channel_raises_channel_not_found(self, notification):
        handler = RecordingHandler(
            {self.PATH: httpx.Response(404, json={"message": "Unknown Channel", "code": 10003})}
        )
        client = make_client(handler)

        with pytest.raises(ChannelNotFoundError):
            await client.send(self.CHANNEL, notification)
        await client.close()

    @pytest.mark.parametrize("code", [50013, 50001])
    @pytest.mark.asyncio
    async def test_missing_permissions_raises_permission_denied(self, notification, code):
        handler = RecordingHandler(
            {self.PATH: httpx.Response(403, json={"message": "Missing Permissions", "code": code})}
        )
        client = make_client(handler)

        with pytest.raises(PermissionDeniedError):
            await client.send(self.CHANNEL, notification)
        await client.close()

    @pytest.mark.asyncio
    async def test_rate_limit_is_unknown_failure(self, notification):
        handler = RecordingHandler(
            {self.PATH: httpx.Response(429, json={"message": "You are being rate limited.", "retry_after": 1.5})}
        )
        client = make_client(handler)

        with pytest.raises(DispatchError, match="rate limited"):
            await client.send(self.CHANNEL, notification)
        # No retry
        assert len(handler.requests) == 1
        await client.close()

    @pytest.mark.asyncio
    async def test_invalid_form_body_is_unknown_failure(self, notification):
        handler = RecordingHandler(
            {self.PATH: httpx.Response(400, json={"message": "Invalid Form Body", "code": 50035})}
        )
        client = make_client(handler)

        with pytest.raises(DispatchError) as exc_info:
            await client.send(self.CHANNEL, notification)

        assert not isinstance(exc_info.value, (ChannelNotFoundError, PermissionDeniedError))
        await client.close()

    @pytest.mark.asyncio
    async def test_network_error_is_unknown_failure(self, notification):
        handler = RecordingHandler({self.PATH: httpx.ConnectError("connection refused")})
        client = make_client(handler)

        with pytest.raises(DispatchError, match="connection refused"):
            await client.send(self.CHANNEL, notification)
        await client.close()
