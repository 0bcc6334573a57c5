from fastapi import APIRouter, Response, status

from sharing_api.dependencies import Context, DbSession
from sharing_api.schemas.share import ShareCreate, ShareList, ShareRead
from sharing_api.schemas.share_user import (
    RecipientList,
    ShareUserCreate,
    ShareUserRead,
)
from sharing_api.services.public_links import resolve_public_share
from sharing_api.services.share_manager import ShareManager
from sharing_api.services.share_user_manager import ShareUserManager

router = APIRouter(prefix="/api/shares", tags=["shares"])


@router.post("", response_model=ShareRead, status_code=status.HTTP_201_CREATED)
def create_share(
    request: ShareCreate, response: Response, ctx: Context, db: DbSession
):
    share, created = ShareManager(db).create_share(ctx, request)
    if not created:
        response.status_code = status.HTTP_200_OK
    return share


@router.get("", response_model=ShareList)
def list_shares(ctx: Context, db: DbSession):
    # Pagination is not implemented yet; has_more keeps the response shape stable.
    return {"items": ShareManager(db).list_shares_by_owner(ctx), "has_more": False}


@router.get("/{share_id}", response_model=ShareRead)
def get_share(share_id: str, db: DbSession):
    """Read a public link share. No authentication is involved."""
    return resolve_public_share(db, share_id)


@router.post(
    "/{share_id}/users",
    response_model=ShareUserRead,
    status_code=status.HTTP_201_CREATED,
)
def invite_user(
    share_id: str,
    ctx: Context,
    db: DbSession,
    request: ShareUserCreate | None = None,
):
    return ShareUserManager(db).invite_user(ctx, share_id, request)


@router.get("/{share_id}/users", response_model=RecipientList)
def list_share_users(share_id: str, ctx: Context, db: DbSession):
    items = ShareUserManager(db).list_recipients(ctx, share_id)
    return {"items": items, "has_more": False}
