from typing import Optional

from fastapi import Depends, Header, HTTPException
from loguru import logger

from zawaj.models.user import User
from zawaj.services.profile_store import ProfileStore, get_store


# ------------------------------------------------------------
# Main Dependency
# ------------------------------------------------------------
# Development auth: the caller names itself in X-User-Id. Credential
# and OTP issuance live in a separate service.
def get_current_user(
    x_user_id: Optional[str] = Header(default=None),
    store: ProfileStore = Depends(get_store),
) -> User:
    user_id = (x_user_id or "").strip()
    if not user_id:
        raise HTTPException(status_code=401, detail="Missing X-User-Id header")

    user = store.get_user(user_id)
    if user is None:
        logger.debug(f"[auth] unknown user id {user_id}")
        raise HTTPException(status_code=401, detail="Invalid user")

    return user
