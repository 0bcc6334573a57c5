from datetime import datetime

from pydantic import BaseModel


class ShareUserCreate(BaseModel):
    email: str | None = None


class ShareUserRead(BaseModel):
    id: int
    share_id: str
    user_id: int
    is_accepted: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class RecipientUserRead(BaseModel):
    email: str


class RecipientRead(BaseModel):
    is_accepted: bool
    user: RecipientUserRead


class RecipientList(BaseModel):
    items: list[RecipientRead]
    has_more: bool = False
