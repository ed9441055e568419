"""FastAPI dependency: get_current_user_id.

Authentication happens upstream of this service (household gateway). The
gateway forwards the authenticated caller as the X-User-Id header; this
service only trusts and reads it.

Usage in any router:
    from src.hh_gateway.auth.dependencies import get_current_user_id

    @router.get("/protected")
    async def protected(user_id: str = Depends(get_current_user_id)):
        ...
"""

from typing import Annotated

from fastapi import Header

from src.hh_common.errors import UnauthenticatedError


async def get_current_user_id(
    x_user_id: Annotated[str | None, Header()] = None,
) -> str:
    """Return the caller's user id.

    Raises HTTP 401 (UnauthenticatedError) if the gateway did not set it.
    """
    if x_user_id is None or not x_user_id.strip():
        raise UnauthenticatedError()
    return x_user_id.strip()
