"""Turn a release event into a rich chat notification.

Pure mapping with no I/O. The only time-dependent value is the
notification's own sent_at marker, which callers may pin via ``now``.
"""

from datetime import datetime, timezone, tzinfo
from urllib.parse import quote

from .models import EmbedField, PlayerReleaseEvent, ReleaseNotification

TITLE = "Giocatore svincolato!"
FOOTER = "Ultimate Pro Clubs"
EMBED_COLOR = 0x00FF00
LINK_LABEL = "Visualizza giocatore"
PLAYER_URL_TEMPLATE = "https://app.ultimateproclubs.com/player/{user_id}"

REASON_DESCRIPTIONS: dict[str, str] = {
    "voluntary_leave": "Giocatore ha lasciato volontariamente la squadra",
    "removed_by_captain": "Giocatore rimosso dal capitano della squadra",
}


def describe_reason(reason: str) -> str:
    """Localize a known reason code; unknown reasons pass through unchanged."""
    return REASON_DESCRIPTIONS.get(reason, reason)


def format_release_date(timestamp: datetime, display_timezone: tzinfo) -> str:
    """Format an instant the Italian way, e.g. ``15/01/2024 11:30``."""
    return timestamp.astimezone(display_timezone).strftime("%d/%m/%Y %H:%M")


def player_url(user_id: str) -> str:
    """Deep link to a player's profile on the platform."""
    return PLAYER_URL_TEMPLATE.format(user_id=quote(user_id, safe=""))


def format_release_notification(
    event: PlayerReleaseEvent,
    display_timezone: tzinfo,
    now: datetime | None = None,
) -> ReleaseNotification:
    """Build the notification announcing a player release.

    Args:
        event: A validated release event.
        display_timezone: Timezone the release date is shown in.
        now: Sent-at marker for the message; defaults to the current time.

    Returns:
        The notification, ready for a messaging gateway.
    """
    return ReleaseNotification(
        title=TITLE,
        color=EMBED_COLOR,
        fields=(
            EmbedField(name="Giocatore", value=event.username, inline=True),
            EmbedField(name="Ex Team", value=event.previous_team_name, inline=True),
            EmbedField(name="Motivo", value=describe_reason(event.reason), inline=False),
            EmbedField(
                name="Data",
                value=format_release_date(event.timestamp, display_timezone),
                inline=True,
            ),
        ),
        link_label=LINK_LABEL,
        link_url=player_url(event.user_id),
        footer=FOOTER,
        sent_at=now or datetime.now(timezone.utc),
    )
