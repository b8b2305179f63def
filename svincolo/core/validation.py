"""Schema checks for inbound player-release payloads.

Checks run in a fixed order and the first failure wins:

1. Required fields present and truthy
2. Action is one of the known release actions
3. Timestamp parses to a valid instant

The reason field is deliberately free-form; it is interpreted only
when the notification is formatted.
"""

import math
from datetime import datetime, timedelta, timezone
from typing import Any

from .models import ReleaseAction, ValidationFailure, ValidationFailureKind

REQUIRED_FIELDS: tuple[str, ...] = (
    "userId",
    "username",
    "previousTeamId",
    "previousTeamName",
    "timestamp",
    "action",
    "reason",
)

VALID_ACTIONS: frozenset[str] = frozenset(action.value for action in ReleaseAction)

# Widest UTC offset a display timezone can have.
_MAX_OFFSET = timedelta(days=1)


def _is_blank(value: Any) -> bool:
    """Return True for values a JSON producer would consider falsy.

    Matches JavaScript truthiness: null, false, 0, NaN and "" are blank,
    while empty lists and objects are not.
    """
    if value is None or value is False:
        return True
    if isinstance(value, str):
        return value == ""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value == 0 or math.isnan(value)
    return False


def find_missing_fields(payload: dict[str, Any]) -> list[str]:
    """List required fields that are absent or blank, in schema order."""
    return [name for name in REQUIRED_FIELDS if _is_blank(payload.get(name))]


def _displayable(instant: datetime) -> bool:
    """Whether an instant can be shown in any UTC offset without overflow."""
    try:
        utc = instant.astimezone(timezone.utc)
        utc - _MAX_OFFSET
        utc + _MAX_OFFSET
    except OverflowError:
        return False
    return True


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an event timestamp into an aware datetime.

    Accepts ISO 8601 strings (naive values are read as UTC) and numbers
    holding epoch milliseconds. Instants too close to the limits of
    the datetime range to be shown in every timezone are rejected.

    Returns:
        The parsed instant, or None if the value is not a valid instant.
    """
    if isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        try:
            parsed = datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.strip())
        except ValueError:
            return None
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
    else:
        return None

    if not _displayable(parsed):
        return None
    return parsed


def validate_release_payload(payload: Any) -> ValidationFailure | None:
    """Validate a decoded JSON body.

    Args:
        payload: Decoded request body. Anything that is not a JSON object
            is treated as an empty object.

    Returns:
        None if the payload is acceptable, otherwise the first failure.
    """
    if not isinstance(payload, dict):
        payload = {}

    missing = find_missing_fields(payload)
    if missing:
        return ValidationFailure(
            kind=ValidationFailureKind.MISSING_FIELDS,
            missing_fields=tuple(missing),
        )

    action = payload["action"]
    if not isinstance(action, str) or action not in VALID_ACTIONS:
        return ValidationFailure(kind=ValidationFailureKind.INVALID_ACTION)

    if parse_timestamp(payload["timestamp"]) is None:
        return ValidationFailure(kind=ValidationFailureKind.INVALID_TIMESTAMP)

    return None
