"""Authorization gate for shares and share invitations.

Every check either returns ``None`` or raises :class:`Forbidden`. Targets
can be loaded rows or drafts that have not been persisted yet; drafts are
judged on their prospective owner, type and item.
"""

import enum
from dataclasses import dataclass

from sqlalchemy.orm import Session

from sharing_api.dependencies import RequestContext
from sharing_api.errors import Forbidden, NotFound, Unauthorized
from sharing_api.models.item import Item
from sharing_api.models.share import FolderShare, Share
from sharing_api.models.user import User


class AclAction(str, enum.Enum):
    CREATE = "create"
    READ = "read"


@dataclass(frozen=True)
class ShareUserDraft:
    """An invitation about to be created.

    ``user_id`` is ``None`` when the recipient has no account yet.
    """

    share_id: str
    user_id: int | None = None


def owner_required(ctx: RequestContext) -> User:
    if ctx.owner is None:
        raise Unauthorized()
    return ctx.owner


def check_if_allowed(
    db: Session,
    actor: User | None,
    action: AclAction,
    target: Share | ShareUserDraft,
) -> None:
    if actor is None:
        raise Forbidden()

    if isinstance(target, Share):
        _check_share(db, actor, action, target)
    elif isinstance(target, ShareUserDraft):
        _check_share_user(db, actor, action, target)
    else:
        raise TypeError(f"Unsupported ACL target: {type(target).__name__}")


def _check_share(db: Session, actor: User, action: AclAction, share: Share) -> None:
    if action == AclAction.CREATE:
        if share.owner_id != actor.id:
            raise Forbidden("Cannot create a share on behalf of another user")
        item = db.get(Item, share.item_id)
        if item is None or item.owner_id != actor.id:
            raise Forbidden("Cannot share an item not owned by the user")
        if isinstance(share, FolderShare) and item.jop_parent_id:
            raise Forbidden("A shared notebook must be at the root")
        return

    if action == AclAction.READ:
        if share.owner_id != actor.id:
            raise Forbidden("No access to this share")
        return

    raise Forbidden()


def _check_share_user(
    db: Session, actor: User, action: AclAction, draft: ShareUserDraft
) -> None:
    if action != AclAction.CREATE:
        raise Forbidden()

    share = db.get(Share, draft.share_id)
    if share is None:
        raise NotFound(f"No such share: {draft.share_id}")
    if share.owner_id != actor.id:
        raise Forbidden("No access to this share")
    if draft.user_id == actor.id:
        raise Forbidden("Cannot share with yourself")
