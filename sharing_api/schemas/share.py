from datetime import datetime

from pydantic import BaseModel

from sharing_api.models.share import ShareType


class ShareCreate(BaseModel):
    folder_id: str | None = None
    note_id: str | None = None


class ShareRead(BaseModel):
    """Public representation of a share.

    ``folder_id`` and ``note_id`` only exist on their own share variant and
    are filled with ``None`` for the others. ``owner_id`` is never exposed.
    """

    id: str
    type: ShareType
    item_id: str
    folder_id: str | None = None
    note_id: str | None = None
    created_at: datetime

    model_config = {"from_attributes": True}


class ShareList(BaseModel):
    items: list[ShareRead]
    has_more: bool = False
