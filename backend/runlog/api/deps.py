"""Shared request dependencies."""

from datetime import datetime
from typing import Annotated
from zoneinfo import ZoneInfo

from fastapi import Depends, Header, HTTPException, status

from runlog.core.config import Settings, get_settings


def get_timezone(settings: Annotated[Settings, Depends(get_settings)]) -> ZoneInfo:
    """Timezone used for week boundaries and date labels."""
    return ZoneInfo(settings.timezone)


def get_now(tz: Annotated[ZoneInfo, Depends(get_timezone)]) -> datetime:
    """Current time in the configured timezone."""
    return datetime.now(tz)


async def get_current_user_id(
    x_user_id: Annotated[str | None, Header()] = None,
) -> int:
    """Resolve the caller from the ``X-User-Id`` header.

    Raises:
        HTTPException: If the header is missing or not an integer.
    """
    if not x_user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    try:
        return int(x_user_id)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid user id",
        )
