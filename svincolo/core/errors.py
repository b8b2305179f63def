"""Failures raised by messaging gateway implementations.

The webhook receiver maps each of these to an HTTP status; anything
that is not a GatewayError is treated as an unknown dispatch failure.
"""


class GatewayError(RuntimeError):
    """Base for failures talking to the messaging platform."""


class GatewayAuthenticationError(GatewayError):
    """The bot credential was rejected by the platform."""


class ChannelNotFoundError(GatewayError):
    """The destination channel does not exist or is not visible to the bot."""


class PermissionDeniedError(GatewayError):
    """The bot may see the channel but is not allowed to post in it."""


class DispatchTimeoutError(GatewayError):
    """The platform did not answer within the configured timeout."""


class DispatchError(GatewayError):
    """Any other delivery failure (network, rate limit, rejected payload)."""
