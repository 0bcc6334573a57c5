import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from sharing_api.acl import AclAction, ShareUserDraft, check_if_allowed, owner_required
from sharing_api.dependencies import RequestContext
from sharing_api.errors import Conflict, NotFound
from sharing_api.models.share_user import ShareUser
from sharing_api.models.user import User
from sharing_api.schemas.share_user import ShareUserCreate
from sharing_api.services.share_manager import ShareManager
from sharing_api.services.stores import UserStore, normalize_email

logger = logging.getLogger(__name__)


class ShareUserManager:
    def __init__(self, db: Session):
        self.db = db
        self.users = UserStore(db)
        self.shares = ShareManager(db)

    def invite_user(
        self,
        ctx: RequestContext,
        share_id: str,
        recipient: ShareUserCreate | None,
    ) -> ShareUser:
        """Invite a recipient, by email, to a share.

        Raises:
            Unauthorized: No authenticated owner.
            NotFound: No recipient email, or the share does not exist.
            Forbidden: The actor may not invite users on this share.
            Conflict: The email was already invited to this share.
        """
        owner = owner_required(ctx)

        # Missing and malformed addresses are both an unknown recipient.
        email = normalize_email(recipient.email if recipient else None)
        if email is None:
            raise NotFound("User not found")

        known_user = self.users.load_by_email(email)
        check_if_allowed(
            self.db,
            owner,
            AclAction.CREATE,
            ShareUserDraft(
                share_id=share_id,
                user_id=known_user.id if known_user else None,
            ),
        )

        if self.by_share_and_email(share_id, email) is not None:
            raise Conflict(f"Already shared with user: {email}")

        return self.add_by_email(share_id, email)

    def add_by_email(self, share_id: str, email: str) -> ShareUser:
        user = self.users.resolve_or_create_by_email(email)
        share_user = ShareUser(share_id=share_id, user_id=user.id, is_accepted=False)
        try:
            with self.db.begin_nested():
                self.db.add(share_user)
        except IntegrityError:
            logger.info("Concurrent invitation of %s to share %s", email, share_id)
            raise Conflict(f"Already shared with user: {email}")

        logger.info("Share %s shared with user %s", share_id, user.id)
        return share_user

    def by_share_and_email(self, share_id: str, email: str) -> ShareUser | None:
        return self.db.execute(
            select(ShareUser)
            .join(User, User.id == ShareUser.user_id)
            .where(
                ShareUser.share_id == share_id,
                User.email == normalize_email(email),
            )
        ).scalar_one_or_none()

    def by_share_id(self, share_id: str) -> list[ShareUser]:
        return list(
            self.db.execute(
                select(ShareUser)
                .where(ShareUser.share_id == share_id)
                .order_by(ShareUser.created_at, ShareUser.id)
            ).scalars().all()
        )

    def list_recipients(self, ctx: RequestContext, share_id: str) -> list[dict]:
        """List who a share was sent to.

        Access is decided on the share itself, not on each invitation. Only
        the acceptance flag and the recipient email are returned.
        """
        share = self.shares.load_share(share_id)
        check_if_allowed(self.db, ctx.owner, AclAction.READ, share)

        share_users = self.by_share_id(share_id)
        users = {
            user.id: user
            for user in self.users.load_by_ids([su.user_id for su in share_users])
        }
        return [
            {
                "is_accepted": su.is_accepted,
                "user": {"email": users[su.user_id].email},
            }
            for su in share_users
        ]
