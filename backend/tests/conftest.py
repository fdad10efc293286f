import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from consensus.database import Base, get_db
from consensus.main import app
from consensus.models.user import User
from consensus.schemas.discussion import DiscussionCreate
from consensus.schemas.group import GroupCreate
from consensus.services import discussion_service, group_service

TEST_DB_URL = "sqlite:///./test_consensus.db"

engine = create_engine(TEST_DB_URL, connect_args={"check_same_thread": False})
TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make(username: str | None = None, name: str | None = None) -> User:
        counter["n"] += 1
        username = username or f"user{counter['n']:03d}"
        user = User(username=username, name=name or username.title())
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def seed_users(make_user):
    return {
        "author": make_user("author001", "Author"),
        "member": make_user("member001", "Member"),
        "outsider": make_user("outsider001", "Outsider"),
    }


@pytest.fixture
def group(db, seed_users):
    row = group_service.create_group(
        db,
        GroupCreate(name="Steering", discussion_privacy_options="public_or_private"),
        seed_users["author"],
    )
    group_service.add_member(db, row, seed_users["member"])
    return row


@pytest.fixture
def discussion(db, group, seed_users):
    return discussion_service.create_discussion(
        db,
        DiscussionCreate(group_id=group.group_id, title="Budget 2027", description="first draft"),
        seed_users["author"],
    )


@pytest.fixture
def auth_headers(client):
    def _headers(username: str) -> dict:
        resp = client.post("/api/auth/login", json={"username": username})
        assert resp.status_code == 200, resp.text
        return {"Authorization": f"Bearer {resp.json()['access_token']}"}

    return _headers
