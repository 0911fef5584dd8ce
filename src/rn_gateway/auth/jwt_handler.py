"""Bearer-token verification for tenants and owners.

Accounts and login belong to the identity service; RoomNest only checks the
HS256 signature with the shared JWT_SECRET and trusts the ``sub`` claim as
the caller's user id. ``issue_access_token`` mirrors what the identity
service mints, for local tooling and tests.
"""

from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt

from config.settings import settings
from src.rn_common.errors import InvalidCredentialsError

_TOKEN_TYPE = "access"


def issue_access_token(user_id: str, ttl: timedelta | None = None) -> str:
    issued_at = datetime.now(UTC)
    lifetime = ttl if ttl is not None else timedelta(minutes=settings.JWT_EXPIRE_MINUTES)
    claims = {
        "sub": user_id,
        "type": _TOKEN_TYPE,
        "iat": issued_at,
        "exp": issued_at + lifetime,
    }
    return str(jwt.encode(claims, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM))


def verify_access_token(token: str) -> str:
    """Return the user id carried by a valid access token.

    Raises:
        InvalidCredentialsError: bad signature, expired, wrong token type or no subject.
    """
    try:
        claims = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        raise InvalidCredentialsError() from None

    subject = claims.get("sub")
    if claims.get("type") != _TOKEN_TYPE or not subject:
        raise InvalidCredentialsError()
    return str(subject)
