from typing import Optional

from fastapi import Header, HTTPException

from vidshare.features.catalog.service.api import catalog


def get_current_user_id(
    x_user_id: Optional[str] = Header(None),
    x_user_email: Optional[str] = Header(None),
) -> Optional[str]:
    """
    The caller's identity as asserted by the auth proxy in front of us.
    A known header upserts the user so foreign keys always resolve.
    """
    if not x_user_id:
        return None
    catalog.upsert_user(x_user_id, email=x_user_email)
    return x_user_id


def require_user_id(
    x_user_id: Optional[str] = Header(None),
    x_user_email: Optional[str] = Header(None),
) -> str:
    user_id = get_current_user_id(x_user_id, x_user_email)
    if user_id is None:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return user_id
