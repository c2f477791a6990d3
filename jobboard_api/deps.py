# jobboard_api/deps.py
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from .db import SessionLocal
from .errors import InvalidCredential
from .logging_config import get_logger
from .models import UserORM
from .security import decode_access_token

logger = get_logger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> UserORM:
    """Resolve the bearer token to a stored user.

    - Missing header, bad signature or expired token -> 401.
    - Token for a user that no longer exists -> 401.
    """
    if credentials is None:
        raise InvalidCredential("Not authorized, no token")
    user_id = decode_access_token(credentials.credentials)
    if user_id is None:
        raise InvalidCredential("Not authorized, token failed")
    user = db.get(UserORM, user_id)
    if user is None:
        logger.warning("token subject %s has no matching user", user_id)
        raise InvalidCredential("Not authorized, user not found")
    return user
