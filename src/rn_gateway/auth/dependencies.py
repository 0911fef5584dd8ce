"""Caller identity for protected routes.

    @router.post("/negotiations")
    async def propose(user_id: Annotated[str, Depends(get_current_user_id)]): ...
"""

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.rn_common.errors import InvalidCredentialsError
from src.rn_gateway.auth.jwt_handler import verify_access_token

# auto_error=False so a missing header gets the same 401 as a bad token
bearer_scheme = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> str:
    if credentials is None:
        raise _unauthorized("Missing bearer token")
    try:
        return verify_access_token(credentials.credentials)
    except InvalidCredentialsError:
        raise _unauthorized("Invalid or expired token") from None
