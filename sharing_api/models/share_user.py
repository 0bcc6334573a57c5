from datetime import datetime

from sqlalchemy import Boolean, ForeignKey, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from sharing_api.database import Base


class ShareUser(Base):
    __tablename__ = "share_users"
    __table_args__ = (
        UniqueConstraint("share_id", "user_id", name="uq_share_users_share_user"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    share_id: Mapped[str] = mapped_column(String(32), ForeignKey("shares.id"))
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"))
    is_accepted: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(server_default=func.now())
