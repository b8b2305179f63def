"""Domain models for the player release notifier.

All models in this module use only Python standard library types,
ensuring zero external dependencies in the core domain.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any


class ReleaseAction(Enum):
    """What caused a player to leave their club."""

    PLAYER_RELEASED = "player_released"
    REMOVED_BY_CAPTAIN = "removed_by_captain"
    VOLUNTARY_LEAVE = "voluntary_leave"


class AuthResult(Enum):
    """Outcome of checking a webhook's bearer credential.

    MISSING and MALFORMED both map to 401; MISMATCH maps to 403.
    """

    MISSING = "missing"
    MALFORMED = "malformed"
    MISMATCH = "mismatch"
    OK = "ok"


class ValidationFailureKind(Enum):
    """Reasons an inbound release payload is rejected."""

    MISSING_FIELDS = "missing_fields"
    INVALID_ACTION = "invalid_action"
    INVALID_TIMESTAMP = "invalid_timestamp"


@dataclass(frozen=True)
class ValidationFailure:
    """A rejected payload and, for MISSING_FIELDS, the absent field names."""

    kind: ValidationFailureKind
    missing_fields: tuple[str, ...] = ()


@dataclass(frozen=True)
class PlayerReleaseEvent:
    """A single player-release notification received from the platform.

    Lives for one request only: it is never stored and never mutated.
    """

    user_id: str
    username: str
    previous_team_id: str
    previous_team_name: str
    timestamp: datetime
    action: ReleaseAction
    reason: str

    def __post_init__(self) -> None:
        """Validate event invariants on creation."""
        if self.timestamp.tzinfo is None:
            raise ValueError("timestamp must be timezone-aware")

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "PlayerReleaseEvent":
        """Build an event from a payload that already passed validation.

        Text fields are coerced with str(): numeric identifiers become
        their decimal form, and any other truthy JSON value (a list or an
        object) is passed on as its Python representation rather than
        rejected.

        Raises:
            ValueError: If the payload is not valid.
        """
        # Imported lazily to keep models free of a cycle with validation.
        from .validation import parse_timestamp

        timestamp = parse_timestamp(payload.get("timestamp"))
        if timestamp is None:
            raise ValueError("timestamp is not a valid instant")

        return cls(
            user_id=str(payload["userId"]),
            username=str(payload["username"]),
            previous_team_id=str(payload["previousTeamId"]),
            previous_team_name=str(payload["previousTeamName"]),
            timestamp=timestamp,
            action=ReleaseAction(payload["action"]),
            reason=str(payload["reason"]),
        )


@dataclass(frozen=True)
class EmbedField:
    """One labelled field of a rich chat message."""

    name: str
    value: str
    inline: bool


@dataclass(frozen=True)
class ReleaseNotification:
    """Platform-neutral rich message announcing a player release."""

    title: str
    color: int
    fields: tuple[EmbedField, ...]  # immutable for frozen dataclass
    link_label: str
    link_url: str
    footer: str
    sent_at: datetime


@dataclass(frozen=True)
class Channel:
    """A resolved destination channel on the messaging platform."""

    id: str
    name: str | None = None
    type: int | None = None


@dataclass(frozen=True)
class BotUser:
    """The identity the gateway session is logged in as."""

    id: str
    username: str
