"""Webhook URL tokens.

The plugin can only be given a URL, so the credential rides along as
``?token=<jwt>``. Tokens carry an issuer and audience so a JWT minted for
something else with the same key is not accepted as a webhook token.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt

from dinkhook.config import DEFAULT_TOKEN_SECRET

JWT_ALG = "HS256"
TOKEN_ISSUER = "dinkhook"
TOKEN_AUDIENCE = "dink-webhook"
# the token lives in the plugin's webhook URL, so default to a long lifetime
DEFAULT_TOKEN_TTL = 365 * 24 * 60 * 60


def create_webhook_token(subject: str, ttl_sec: int = DEFAULT_TOKEN_TTL, secret: str = DEFAULT_TOKEN_SECRET) -> str:
    issued = datetime.now(timezone.utc)
    claims = {
        "iss": TOKEN_ISSUER,
        "aud": TOKEN_AUDIENCE,
        "sub": subject,
        "iat": issued,
        "exp": issued + timedelta(seconds=ttl_sec),
    }
    return jwt.encode(claims, secret, algorithm=JWT_ALG)


def verify_webhook_token(token: str, secret: str = DEFAULT_TOKEN_SECRET) -> Optional[str]:
    """Subject of a valid webhook token; None when the signature, expiry, issuer or audience is wrong."""
    try:
        claims = jwt.decode(token, secret, algorithms=[JWT_ALG], audience=TOKEN_AUDIENCE, issuer=TOKEN_ISSUER)
    except JWTError:
        return None
    return claims.get("sub") or None
