"""
FastAPI Dependencies
Current user resolution
"""
from typing import Optional

from fastapi import HTTPException, status, Header


async def get_current_user_id(
    x_user_id: Optional[str] = Header(None, alias="X-User-Id")
) -> str:
    """
    Get the caller's user id

    Authentication happens upstream; the gateway forwards the verified
    user id in the X-User-Id header.

    Usage:
        @router.get("/applications")
        async def list_applications(user_id: str = Depends(get_current_user_id)):
            ...
    """
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing X-User-Id header",
        )
    return x_user_id.strip()
