"""Bearer token check for inbound webhooks."""

import hmac

from .models import AuthResult

BEARER_PREFIX = "Bearer "


def authenticate(authorization: str | None, secret: str) -> AuthResult:
    """Check an Authorization header value against the shared secret.

    Args:
        authorization: Raw header value, or None when the header is absent.
        secret: The configured shared secret.

    Returns:
        MISSING when no header was sent, MALFORMED when it does not use
        the Bearer scheme, MISMATCH when the token is wrong, OK otherwise.
    """
    if not authorization:
        return AuthResult.MISSING

    if not authorization.startswith(BEARER_PREFIX):
        return AuthResult.MALFORMED

    provided = authorization[len(BEARER_PREFIX):].strip()
    expected = secret.strip()

    # compare_digest only accepts ASCII str, so compare the encoded bytes.
    if not expected or not hmac.compare_digest(
        provided.encode("utf-8"), expected.encode("utf-8")
    ):
        return AuthResult.MISMATCH

    return AuthResult.OK
