from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from app.core.db import get_db
from app.core.errors import InvalidTokenError
from app.core.security import decode_access_token
from app.models.user import User

bearer = HTTPBearer(auto_error=False)


def get_current_user(
    creds: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
    db: Session = Depends(get_db),
) -> User:
    """Bearer access token -> User. Anything off answers 401."""
    if not creds or (creds.scheme or "").lower() != "bearer":
        raise InvalidTokenError("Unauthorized", code="TOKEN_REQUIRED")

    payload = decode_access_token(creds.credentials)
    try:
        user_id = int(payload["sub"])
    except ValueError:
        raise InvalidTokenError()

    user = db.get(User, user_id)
    if not user:
        raise InvalidTokenError()
    return user
