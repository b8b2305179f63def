"""Port interfaces for the player release notifier.

These abstract base classes define the boundaries between core
domain logic and external adapters. Implementations live in the
adapters/ package.

Driven Ports (core calls out to adapters):
   - MessagingGatewayPort: Resolve channels and post notifications
"""

from abc import ABC, abstractmethod

from .models import BotUser, Channel, ReleaseNotification


class MessagingGatewayPort(ABC):
    """Port for the long-lived session with the chat platform.

    One instance is created per process, logged in before the HTTP
    listener starts, shared by every request and closed on shutdown.
    Request handlers only call fetch_channel() and send().

    Implementations must translate platform failures into the
    exceptions in ``svincolo.core.errors`` and must never include
    credentials in exception messages.
    """

    @abstractmethod
    async def login(self) -> BotUser:
        """Open the session and verify the bot credential.

        Returns:
            The identity the bot is logged in as.

        Raises:
            GatewayAuthenticationError: If the credential is rejected.
            GatewayError: If the platform cannot be reached.
        """

    @abstractmethod
    async def fetch_channel(self, channel_id: str) -> Channel | None:
        """Resolve a channel identifier to a live channel.

        Args:
            channel_id: Platform identifier of the channel.

        Returns:
            The channel, or None if it was deleted or the bot lost access.

        Raises:
            DispatchTimeoutError: If the platform did not answer in time.
            DispatchError: For any other failure.
        """

    @abstractmethod
    async def send(self, channel: Channel, notification: ReleaseNotification) -> None:
        """Post a notification to a channel.

        Raises:
            ChannelNotFoundError: Channel vanished between fetch and send.
            PermissionDeniedError: Bot may not post in the channel.
            DispatchTimeoutError: If the platform did not answer in time.
            DispatchError: For any other failure.
        """

    @property
    @abstractmethod
    def is_connected(self) -> bool:
        """Whether the session is logged in and not yet closed."""

    @abstractmethod
    async def close(self) -> None:
        """Close the session. Safe to call more than once."""
