from sqlalchemy.orm import Session

from sharing_api.errors import NotFound
from sharing_api.models.share import LinkShare, Share
from sharing_api.services.share_manager import ShareManager


def resolve_public_share(db: Session, share_id: str) -> Share:
    """Return a link share to anyone who knows its id.

    No identity is checked here. A missing share and a share of another type
    raise the same ``NotFound`` so private shares cannot be probed for.
    """
    share = ShareManager(db).get_share(share_id)
    if not isinstance(share, LinkShare):
        raise NotFound()
    return share
