import pytest

from sharing_api.errors import Conflict, Forbidden, NotFound, Unauthorized
from sharing_api.models.share_user import ShareUser
from sharing_api.models.user import User
from sharing_api.schemas.share_user import ShareUserCreate
from sharing_api.services.share_user_manager import ShareUserManager
from sharing_api.services.stores import UserStore


def test_invite_existing_user(db, owner_ctx, folder_share, other_user):
    share_user = ShareUserManager(db).invite_user(
        owner_ctx, folder_share.id, ShareUserCreate(email="other@test.com")
    )

    assert share_user.share_id == folder_share.id
    assert share_user.user_id == other_user.id
    assert share_user.is_accepted is False


def test_invite_unknown_email_creates_placeholder(db, owner_ctx, folder_share):
    share_user = ShareUserManager(db).invite_user(
        owner_ctx, folder_share.id, ShareUserCreate(email="a@x.com")
    )

    user = UserStore(db).load_by_email("a@x.com")
    assert user is not None
    assert user.is_active is False
    assert share_user.user_id == user.id


def test_invite_twice_conflicts(db, owner_ctx, folder_share):
    manager = ShareUserManager(db)
    manager.invite_user(owner_ctx, folder_share.id, ShareUserCreate(email="a@x.com"))

    with pytest.raises(Conflict) as exc_info:
        manager.invite_user(owner_ctx, folder_share.id, ShareUserCreate(email="a@x.com"))
    assert exc_info.value.detail == "Already shared with user: a@x.com"


def test_concurrent_invite_conflicts(db, owner_ctx, folder_share, other_user, monkeypatch):
    manager = ShareUserManager(db)
    manager.invite_user(owner_ctx, folder_share.id, ShareUserCreate(email="other@test.com"))
    monkeypatch.setattr(manager, "by_share_and_email", lambda share_id, email: None)

    with pytest.raises(Conflict):
        manager.invite_user(
            owner_ctx, folder_share.id, ShareUserCreate(email="other@test.com")
        )

    assert db.query(ShareUser).count() == 1


@pytest.mark.parametrize("recipient", [None, ShareUserCreate(), ShareUserCreate(email="  ")])
def test_invite_without_email(db, owner_ctx, folder_share, recipient):
    with pytest.raises(NotFound):
        ShareUserManager(db).invite_user(owner_ctx, folder_share.id, recipient)


def test_invite_anonymous(db, anonymous_ctx, folder_share):
    with pytest.raises(Unauthorized):
        ShareUserManager(db).invite_user(
            anonymous_ctx, folder_share.id, ShareUserCreate(email="a@x.com")
        )


def test_invite_on_share_not_owned(db, other_ctx, folder_share):
    with pytest.raises(Forbidden):
        ShareUserManager(db).invite_user(
            other_ctx, folder_share.id, ShareUserCreate(email="a@x.com")
        )

    assert UserStore(db).load_by_email("a@x.com") is None


def test_invite_on_missing_share(db, owner_ctx):
    with pytest.raises(NotFound):
        ShareUserManager(db).invite_user(
            owner_ctx, "missing", ShareUserCreate(email="a@x.com")
        )


def test_list_recipients(db, owner_ctx, folder_share, other_user):
    manager = ShareUserManager(db)
    manager.invite_user(owner_ctx, folder_share.id, ShareUserCreate(email="a@x.com"))
    manager.invite_user(owner_ctx, folder_share.id, ShareUserCreate(email="other@test.com"))

    recipients = manager.list_recipients(owner_ctx, folder_share.id)

    assert sorted(recipients, key=lambda r: r["user"]["email"]) == [
        {"is_accepted": False, "user": {"email": "a@x.com"}},
        {"is_accepted": False, "user": {"email": "other@test.com"}},
    ]


def test_list_recipients_shows_acceptance(db, owner_ctx, folder_share, other_user):
    db.add(ShareUser(share_id=folder_share.id, user_id=other_user.id, is_accepted=True))
    db.flush()

    recipients = ShareUserManager(db).list_recipients(owner_ctx, folder_share.id)

    assert recipients == [{"is_accepted": True, "user": {"email": "other@test.com"}}]


def test_list_recipients_not_owner(db, other_ctx, folder_share):
    with pytest.raises(Forbidden):
        ShareUserManager(db).list_recipients(other_ctx, folder_share.id)


def test_list_recipients_anonymous(db, anonymous_ctx, folder_share):
    with pytest.raises(Forbidden):
        ShareUserManager(db).list_recipients(anonymous_ctx, folder_share.id)


def test_list_recipients_missing_share(db, owner_ctx):
    with pytest.raises(NotFound):
        ShareUserManager(db).list_recipients(owner_ctx, "missing")


def test_invite_is_case_insensitive(db, owner_ctx, folder_share):
    manager = ShareUserManager(db)
    manager.invite_user(owner_ctx, folder_share.id, ShareUserCreate(email="a@x.com"))

    with pytest.raises(Conflict) as exc_info:
        manager.invite_user(owner_ctx, folder_share.id, ShareUserCreate(email=" A@X.com "))
    assert exc_info.value.detail == "Already shared with user: a@x.com"

    assert manager.list_recipients(owner_ctx, folder_share.id) == [
        {"is_accepted": False, "user": {"email": "a@x.com"}}
    ]
    assert db.query(User).filter(User.email.in_(["a@x.com", "A@X.com"])).count() == 1


def test_invite_mixed_case_matches_existing_user(db, owner_ctx, folder_share, other_user):
    share_user = ShareUserManager(db).invite_user(
        owner_ctx, folder_share.id, ShareUserCreate(email="Other@Test.com")
    )

    assert share_user.user_id == other_user.id


@pytest.mark.parametrize("email", ["not an email", "missing-at.com", "a@b", "a b@x.com"])
def test_invite_malformed_email(db, owner_ctx, folder_share, email):
    with pytest.raises(NotFound) as exc_info:
        ShareUserManager(db).invite_user(
            owner_ctx, folder_share.id, ShareUserCreate(email=email)
        )
    assert exc_info.value.detail == "User not found"

    assert db.query(User).filter(User.email == email).count() == 0
