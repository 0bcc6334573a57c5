import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from sharing_api.acl import AclAction, check_if_allowed, owner_required
from sharing_api.dependencies import RequestContext
from sharing_api.errors import BadRequest, NotFound
from sharing_api.models.share import FolderShare, LinkShare, Share
from sharing_api.schemas.share import ShareCreate
from sharing_api.services.stores import ItemStore

logger = logging.getLogger(__name__)


class ShareManager:
    def __init__(self, db: Session):
        self.db = db
        self.items = ItemStore(db)

    def create_share(
        self, ctx: RequestContext, request: ShareCreate
    ) -> tuple[Share, bool]:
        """Share a folder with users or a note through a public link.

        Parameters:
            ctx: Request context; an authenticated owner is required.
            request: Exactly one of ``folder_id`` or ``note_id``. When both are
                given the folder wins.

        Returns:
            The share and whether it was created by this call. Sharing the
            same folder again returns the existing share.

        Raises:
            Unauthorized: No authenticated owner.
            BadRequest: Neither a folder nor a note was given.
            NotFound: The folder or note does not belong to the owner.
            Forbidden: The gate refused the draft share.
        """
        owner = owner_required(ctx)

        draft: Share
        if request.folder_id:
            folder = self.items.load_by_external_id(owner.id, request.folder_id)
            if folder is None or not folder.is_folder:
                raise NotFound(f"No such folder: {request.folder_id}")

            existing = self.folder_share_for(owner.id, folder.id)
            if existing is not None:
                logger.info(
                    "Folder %s is already shared by user %s as %s",
                    request.folder_id, owner.id, existing.id,
                )
                return existing, False

            draft = FolderShare(
                item_id=folder.id,
                owner_id=owner.id,
                folder_id=request.folder_id,
            )
        elif request.note_id:
            note = self.items.load_by_external_id(owner.id, request.note_id)
            if note is None or not note.is_note:
                raise NotFound(f"No such note: {request.note_id}")

            draft = LinkShare(
                item_id=note.id,
                owner_id=owner.id,
                note_id=request.note_id,
            )
        else:
            raise BadRequest("Either folder_id or note_id must be provided")

        check_if_allowed(self.db, owner, AclAction.CREATE, draft)

        try:
            with self.db.begin_nested():
                self.db.add(draft)
        except IntegrityError:
            if not isinstance(draft, FolderShare):
                raise
            # Lost a race against an identical request; the stored row wins.
            existing = self.folder_share_for(owner.id, draft.item_id, lock=True)
            if existing is None:
                raise
            logger.info(
                "Concurrent share of folder %s by user %s resolved to %s",
                draft.folder_id, owner.id, existing.id,
            )
            return existing, False

        logger.info(
            "User %s created share %s (type %s) for item %s",
            owner.id, draft.id, draft.type, draft.item_id,
        )
        return draft, True

    def folder_share_query(self, owner_id: int, item_id: str, lock: bool = False):
        query = select(FolderShare).where(
            FolderShare.owner_id == owner_id,
            FolderShare.item_id == item_id,
        )
        # A shared lock reads the latest committed row rather than the
        # transaction snapshot, so a row committed by a competing request
        # is visible.
        if lock:
            query = query.with_for_update(read=True)
        return query

    def folder_share_for(
        self, owner_id: int, item_id: str, lock: bool = False
    ) -> FolderShare | None:
        return self.db.execute(
            self.folder_share_query(owner_id, item_id, lock=lock)
        ).scalar_one_or_none()

    def get_share(self, share_id: str) -> Share | None:
        return self.db.get(Share, share_id)

    def load_share(self, share_id: str) -> Share:
        share = self.get_share(share_id)
        if share is None:
            raise NotFound()
        return share

    def list_shares_by_owner(self, ctx: RequestContext) -> list[Share]:
        owner = owner_required(ctx)
        return list(
            self.db.execute(
                select(Share)
                .where(Share.owner_id == owner.id)
                .order_by(Share.created_at, Share.id)
            ).scalars().all()
        )
