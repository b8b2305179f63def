"""Core domain logic for the player release notifier.

This package contains zero external dependencies and represents
the pure business logic of the application. All adapters and
external integrations are handled by the adapters package.
"""

from .models import (
    AuthResult,
    BotUser,
    Channel,
    EmbedField,
    PlayerReleaseEvent,
    ReleaseAction,
    ReleaseNotification,
    ValidationFailure,
    ValidationFailureKind,
)

__all__ = [
    "AuthResult",
    "BotUser",
    "Channel",
    "EmbedField",
    "PlayerReleaseEvent",
    "ReleaseAction",
    "ReleaseNotification",
    "ValidationFailure",
    "ValidationFailureKind",
]
