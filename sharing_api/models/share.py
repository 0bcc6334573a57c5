import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.dialects import mysql
from sqlalchemy.orm import Mapped, mapped_column

from sharing_api.database import Base


class ShareType(enum.IntEnum):
    LINK = 1
    APP = 2
    JOPLIN_ROOT_FOLDER = 3


class Share(Base):
    """Grant of access to one item, owned by its creator.

    Rows live in a single table discriminated on ``type``; each subclass
    only maps the columns that mean something for its kind of share.
    """

    __tablename__ = "shares"

    id: Mapped[str] = mapped_column(
        String(32), primary_key=True, default=lambda: uuid.uuid4().hex
    )
    type: Mapped[int] = mapped_column(Integer)
    item_id: Mapped[str] = mapped_column(ForeignKey("items.id"), index=True)
    owner_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)
    # Microsecond precision keeps shares created within one second in order.
    created_at: Mapped[datetime] = mapped_column(
        DateTime().with_variant(mysql.DATETIME(fsp=6), "mysql"),
        default=lambda: datetime.now(timezone.utc),
    )

    __mapper_args__ = {"polymorphic_on": "type", "with_polymorphic": "*"}


class FolderShare(Share):
    """Shares a root folder and everything below it with invited users."""

    folder_id: Mapped[str | None] = mapped_column(String(32), default=None)

    __mapper_args__ = {"polymorphic_identity": ShareType.JOPLIN_ROOT_FOLDER}


class LinkShare(Share):
    """Public link to a single note; knowing the id is enough to read it."""

    note_id: Mapped[str | None] = mapped_column(String(32), default=None)

    __mapper_args__ = {"polymorphic_identity": ShareType.LINK}


class AppShare(Share):
    __mapper_args__ = {"polymorphic_identity": ShareType.APP}


# folder_id is only set on folder shares, and NULLs never collide, so this
# allows one folder share per (owner, folder) and leaves link shares alone.
Index(
    "uq_shares_owner_folder",
    Share.owner_id,
    FolderShare.folder_id,
    unique=True,
)
