from fastapi import APIRouter
from sqlalchemy import select

from sharing_api.dependencies import DbSession, create_access_token
from sharing_api.errors import Unauthorized
from sharing_api.models.user import User
from sharing_api.schemas.auth import AccessTokenResponse, LoginRequest

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=AccessTokenResponse)
def login(request: LoginRequest, db: DbSession):
    user = db.execute(
        select(User).where(User.email == request.email.strip().lower())
    ).scalar_one_or_none()

    if user is None or not user.is_active:
        raise Unauthorized()

    if not user.check_password(request.password):
        raise Unauthorized()

    return AccessTokenResponse(access_token=create_access_token(user))
