from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Annotated

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from sharing_api.config import settings
from sharing_api.database import SessionLocal
from sharing_api.errors import Unauthorized
from sharing_api.models.user import User
from sharing_api.services.stores import UserStore


def get_db():
    db = SessionLocal()
    try:
        yield db
        db.commit()
    finally:
        db.close()


DbSession = Annotated[Session, Depends(get_db)]

security = HTTPBearer(auto_error=False)


def create_access_token(user: User) -> str:
    payload = {
        "sub": str(user.id),
        "email": user.email,
        "exp": datetime.now(timezone.utc)
        + timedelta(minutes=settings.access_token_expire_minutes),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


@dataclass(frozen=True)
class RequestContext:
    """Identity a request runs as. ``owner`` is ``None`` for anonymous calls."""

    owner: User | None = None


def get_context(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: DbSession,
) -> RequestContext:
    if credentials is None:
        return RequestContext()

    try:
        payload = jwt.decode(
            credentials.credentials,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
        )
        user_id = int(payload["sub"])
    except (jwt.InvalidTokenError, KeyError, ValueError):
        raise Unauthorized()

    user = UserStore(db).load_by_id(user_id)
    if user is None or not user.is_active:
        raise Unauthorized()
    return RequestContext(owner=user)


Context = Annotated[RequestContext, Depends(get_context)]
