import uuid
from datetime import datetime

from sqlalchemy import ForeignKey, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from sharing_api.database import Base

ITEM_TYPE_NOTE = "note"
ITEM_TYPE_FOLDER = "folder"


class Item(Base):
    """A synced note or folder, addressed by clients through ``jop_id``."""

    __tablename__ = "items"
    __table_args__ = (
        UniqueConstraint("owner_id", "jop_id", name="uq_items_owner_jop"),
    )

    id: Mapped[str] = mapped_column(
        String(32), primary_key=True, default=lambda: uuid.uuid4().hex
    )
    owner_id: Mapped[int] = mapped_column(ForeignKey("users.id"))
    jop_id: Mapped[str] = mapped_column(String(32), index=True)
    jop_type: Mapped[str] = mapped_column(String(10))
    jop_parent_id: Mapped[str | None] = mapped_column(String(32), default=None)
    name: Mapped[str] = mapped_column(String(255), default="")
    created_at: Mapped[datetime] = mapped_column(server_default=func.now())

    @property
    def is_folder(self) -> bool:
        return self.jop_type == ITEM_TYPE_FOLDER

    @property
    def is_note(self) -> bool:
        return self.jop_type == ITEM_TYPE_NOTE
