import logging
import re

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from sharing_api.models.item import Item
from sharing_api.models.user import User

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def normalize_email(email: str | None) -> str | None:
    """Return the canonical form of ``email``, or ``None`` if it is malformed."""
    if not email:
        return None
    email = email.strip().lower()
    if not EMAIL_PATTERN.match(email):
        return None
    return email


class ItemStore:
    def __init__(self, db: Session):
        self.db = db

    def load_by_external_id(self, owner_id: int, external_id: str) -> Item | None:
        """Resolve a client-side item id within one owner's items only."""
        return self.db.execute(
            select(Item).where(
                Item.owner_id == owner_id,
                Item.jop_id == external_id,
            )
        ).scalar_one_or_none()


class UserStore:
    def __init__(self, db: Session):
        self.db = db

    def load_by_id(self, user_id: int) -> User | None:
        return self.db.get(User, user_id)

    def load_by_ids(self, user_ids: list[int]) -> list[User]:
        if not user_ids:
            return []
        return list(
            self.db.execute(
                select(User).where(User.id.in_(user_ids))
            ).scalars().all()
        )

    def load_by_email(self, email: str, lock: bool = False) -> User | None:
        """Load a user by email.

        With ``lock`` the row is read with a shared lock, which sees rows
        committed after this transaction's snapshot was taken.
        """
        query = select(User).where(User.email == normalize_email(email))
        if lock:
            query = query.with_for_update(read=True)
        return self.db.execute(query).scalar_one_or_none()

    def resolve_or_create_by_email(self, email: str) -> User:
        """Return the account for ``email``, creating a placeholder if needed.

        Placeholder accounts are inactive and have no password until their
        owner registers.
        """
        email = normalize_email(email)
        if email is None:
            raise ValueError("A well-formed email is required")

        user = self.load_by_email(email)
        if user is not None:
            return user

        user = User(
            email=email,
            name=email.split("@", 1)[0],
            password_hash="",
            is_active=False,
        )
        try:
            with self.db.begin_nested():
                self.db.add(user)
        except IntegrityError:
            existing = self.load_by_email(email, lock=True)
            if existing is None:
                raise
            return existing

        logger.info("Created placeholder account %s for %s", user.id, email)
        return user
