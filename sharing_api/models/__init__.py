from sharing_api.models.user import User
from sharing_api.models.item import Item
from sharing_api.models.share import AppShare, FolderShare, LinkShare, Share, ShareType
from sharing_api.models.share_user import ShareUser

__all__ = [
    "User",
    "Item",
    "Share",
    "ShareType",
    "FolderShare",
    "LinkShare",
    "AppShare",
    "ShareUser",
]
