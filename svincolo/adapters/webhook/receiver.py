"""Player release webhook receiver.

Runs one inbound webhook through the pipeline:

    authenticate -> validate -> format -> fetch channel -> send

and turns every outcome into an HTTP status plus JSON body. Nothing is
retried; a failed dispatch is reported to the caller, who owns retry
policy. Identical requests produce identical, separate notifications.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import tzinfo
from typing import Any

from svincolo.core.auth import authenticate
from svincolo.core.errors import (
    ChannelNotFoundError,
    DispatchTimeoutError,
    PermissionDeniedError,
)
from svincolo.core.formatter import format_release_notification
from svincolo.core.models import (
    AuthResult,
    PlayerReleaseEvent,
    ReleaseNotification,
    ValidationFailureKind,
)
from svincolo.core.ports import MessagingGatewayPort
from svincolo.core.validation import VALID_ACTIONS, validate_release_payload

logger = logging.getLogger(__name__)

_VALIDATION_MESSAGES = {
    ValidationFailureKind.MISSING_FIELDS: "Missing required fields",
    ValidationFailureKind.INVALID_ACTION: (
        "Invalid action. Expected one of: " + ", ".join(sorted(VALID_ACTIONS))
    ),
    ValidationFailureKind.INVALID_TIMESTAMP: (
        "Invalid timestamp format. Expected ISO 8601 format"
    ),
}


@dataclass(frozen=True)
class WebhookResponse:
    """HTTP status and JSON body produced for one webhook."""

    status: int
    body: dict[str, Any] = field(default_factory=dict)


def _error(status: int, error: str, message: str, **extra: Any) -> WebhookResponse:
    return WebhookResponse(status=status, body={"error": error, "message": message, **extra})


class ReleaseWebhookReceiver:
    """Handles player release webhooks for a single destination channel.

    Holds no per-request state; the gateway and configuration are
    shared read-only across concurrent requests.
    """

    def __init__(
        self,
        gateway: MessagingGatewayPort,
        channel_id: str,
        api_secret: str,
        display_timezone: tzinfo,
        dispatch_timeout_seconds: float = 10.0,
    ):
        """Initialize the webhook receiver.

        Args:
            gateway: Logged-in messaging gateway shared by all requests.
            channel_id: Destination channel for every notification.
            api_secret: Shared secret expected as the Bearer token.
            display_timezone: Timezone used for the release date field.
            dispatch_timeout_seconds: Bound on fetching the channel and sending.
        """
        self.gateway = gateway
        self.channel_id = channel_id
        self.display_timezone = display_timezone
        self.dispatch_timeout_seconds = dispatch_timeout_seconds
        self._api_secret = api_secret

    async def handle_player_release(
        self, authorization: str | None, payload: Any
    ) -> WebhookResponse:
        """Handle a POST /svincolato request.

        Args:
            authorization: Raw Authorization header, or None if absent.
            payload: Decoded JSON body.

        Returns:
            The response to send back to the caller.
        """
        auth = authenticate(authorization, self._api_secret)
        if auth in (AuthResult.MISSING, AuthResult.MALFORMED):
            logger.warning("Rejected release webhook: missing or malformed Authorization header")
            return _error(
                401, "Unauthorized", "Authorization header with Bearer token required"
            )
        if auth is AuthResult.MISMATCH:
            logger.warning("Rejected release webhook: invalid API token")
            return _error(403, "Forbidden", "Invalid API token")

        failure = validate_release_payload(payload)
        if failure is not None:
            logger.info(
                f"Rejected release webhook: {failure.kind.value}",
                extra={"missing_fields": list(failure.missing_fields)},
            )
            if failure.kind is ValidationFailureKind.MISSING_FIELDS:
                return _error(
                    400,
                    "Bad Request",
                    _VALIDATION_MESSAGES[failure.kind],
                    missingFields=list(failure.missing_fields),
                )
            return _error(400, "Bad Request", _VALIDATION_MESSAGES[failure.kind])

        event = PlayerReleaseEvent.from_payload(payload)
        notification = format_release_notification(event, self.display_timezone)

        try:
            delivered = await asyncio.wait_for(
                self._dispatch(notification), timeout=self.dispatch_timeout_seconds
            )
        except ChannelNotFoundError as e:
            logger.error(f"Discord channel {self.channel_id} not found at send time: {e}")
            return _error(
                500, "Internal Server Error", "Discord channel not found or bot lacks access"
            )
        except PermissionDeniedError as e:
            logger.error(f"Missing permission to post in {self.channel_id}: {e}")
            return _error(
                500,
                "Internal Server Error",
                "Bot lacks permission to send messages in the specified channel",
            )
        except (DispatchTimeoutError, TimeoutError):
            logger.error(
                f"Timed out after {self.dispatch_timeout_seconds}s sending release "
                f"notification for user {event.user_id}"
            )
            return _error(504, "Gateway Timeout", "Timed out while sending Discord notification")
        except Exception as e:
            logger.error(f"Error processing player release webhook: {e}", exc_info=True)
            return _error(
                500,
                "Internal Server Error",
                "Failed to send Discord notification",
                details=str(e),
            )

        if not delivered:
            logger.error(f"Channel with ID {self.channel_id} not found")
            return _error(500, "Internal Server Error", "Discord channel not found")

        logger.info(
            f"Player release notification sent for {event.username} (ID: {event.user_id})",
            extra={"user_id": event.user_id, "action": event.action.value},
        )
        return WebhookResponse(
            status=200,
            body={
                "success": True,
                "message": "Player release notification sent successfully",
                "data": {
                    "userId": event.user_id,
                    "username": event.username,
                    "channelId": self.channel_id,
                },
            },
        )

    async def _dispatch(self, notification: ReleaseNotification) -> bool:
        """Resolve the destination channel and post to it.

        Returns:
            False if the channel could not be resolved, True once sent.
        """
        channel = await self.gateway.fetch_channel(self.channel_id)
        if channel is None:
            return False
        await self.gateway.send(channel, notification)
        return True
