import pytest
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient

from sharing_api.config import settings
from sharing_api.database import Base, create_db_engine
from sharing_api.dependencies import RequestContext, get_db, create_access_token
from sharing_api.main import app
from sharing_api.models.item import ITEM_TYPE_FOLDER, ITEM_TYPE_NOTE, Item
from sharing_api.models.user import User

test_engine = create_db_engine(settings.test_database_url)
TestSession = sessionmaker(bind=test_engine)


@pytest.fixture(scope="session", autouse=True)
def setup_test_db():
    Base.metadata.create_all(bind=test_engine)
    yield
    Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def db():
    connection = test_engine.connect()
    transaction = connection.begin()
    session = TestSession(bind=connection)
    yield session
    session.close()
    transaction.rollback()
    connection.close()


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def owner_user(db):
    user = User(email="owner@test.com", name="Owner", password_hash="x")
    user.set_password("owner123")
    db.add(user)
    db.flush()
    return user


@pytest.fixture
def other_user(db):
    user = User(email="other@test.com", name="Other", password_hash="x")
    user.set_password("other123")
    db.add(user)
    db.flush()
    return user


@pytest.fixture
def owner_ctx(owner_user):
    return RequestContext(owner=owner_user)


@pytest.fixture
def other_ctx(other_user):
    return RequestContext(owner=other_user)


@pytest.fixture
def anonymous_ctx():
    return RequestContext()


@pytest.fixture
def owner_headers(owner_user):
    return {"Authorization": f"Bearer {create_access_token(owner_user)}"}


@pytest.fixture
def other_headers(other_user):
    return {"Authorization": f"Bearer {create_access_token(other_user)}"}


@pytest.fixture
def root_folder(db, owner_user):
    folder = Item(
        owner_id=owner_user.id,
        jop_id="F123",
        jop_type=ITEM_TYPE_FOLDER,
        name="Projects",
    )
    db.add(folder)
    db.flush()
    return folder


@pytest.fixture
def sub_folder(db, owner_user, root_folder):
    folder = Item(
        owner_id=owner_user.id,
        jop_id="F456",
        jop_type=ITEM_TYPE_FOLDER,
        jop_parent_id=root_folder.jop_id,
        name="Archive",
    )
    db.add(folder)
    db.flush()
    return folder


@pytest.fixture
def note(db, owner_user, root_folder):
    item = Item(
        owner_id=owner_user.id,
        jop_id="N123",
        jop_type=ITEM_TYPE_NOTE,
        jop_parent_id=root_folder.jop_id,
        name="Meeting notes",
    )
    db.add(item)
    db.flush()
    return item


@pytest.fixture
def other_folder(db, other_user):
    folder = Item(
        owner_id=other_user.id,
        jop_id="F999",
        jop_type=ITEM_TYPE_FOLDER,
        name="Private",
    )
    db.add(folder)
    db.flush()
    return folder


@pytest.fixture
def folder_share(db, owner_user, root_folder):
    from sharing_api.models.share import FolderShare

    share = FolderShare(
        item_id=root_folder.id,
        owner_id=owner_user.id,
        folder_id=root_folder.jop_id,
    )
    db.add(share)
    db.flush()
    return share


@pytest.fixture
def link_share(db, owner_user, note):
    from sharing_api.models.share import LinkShare

    share = LinkShare(
        item_id=note.id,
        owner_id=owner_user.id,
        note_id=note.jop_id,
    )
    db.add(share)
    db.flush()
    return share
