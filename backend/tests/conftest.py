import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from backend.bookdesk.auth import get_password_hash
from backend.bookdesk.database import Base, get_db, make_engine
from backend.bookdesk.errors import TransportError
from backend.bookdesk.mailer import get_mailer
from backend.bookdesk.main import app
from backend.bookdesk.models import Admin, Book


class FakeMailer:
    def __init__(self, fail=False):
        self.fail = fail
        self.sent = []

    def send(self, sender, to, subject, text):
        if self.fail:
            raise TransportError("Failed to send email")
        self.sent.append({"from": sender, "to": to, "subject": subject, "text": text})


@pytest.fixture
def session_factory():
    engine = make_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def mailer():
    return FakeMailer()


@pytest.fixture
def client(session_factory, mailer):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_mailer] = lambda: mailer
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def register(client):
    def _register(**overrides):
        payload = {
            "firstName": "Ada",
            "lastName": "Lovelace",
            "username": "ada",
            "email": "ada@example.com",
            "password": "analytical",
            "address": "12 St James's Square",
            "city": "London",
        }
        payload.update(overrides)
        return client.post("/api/auth/register", json=payload)
    return _register


@pytest.fixture
def admin(db):
    a = Admin(first_name="Root", email="root@example.com", password_hash=get_password_hash("s3cret"))
    db.add(a)
    db.commit()
    return a


@pytest.fixture
def books(db):
    items = [
        Book(title="Dune", description="Desert planet", imgsrc="dune.jpg"),
        Book(title="Emma", description="Matchmaking", imgsrc="emma.jpg"),
    ]
    db.add_all(items)
    db.commit()
    return [b.id for b in items]
