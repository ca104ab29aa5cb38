import os

# argon2 를 테스트용으로 가볍게, 파일 DB 대신 메모리 DB
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("PASSWORD_HASH_TIME_COST", "1")
os.environ.setdefault("PASSWORD_HASH_MEMORY_COST", "1024")
os.environ.setdefault("PASSWORD_HASH_PARALLELISM", "1")
os.environ.setdefault("JWT_ACCESS_SECRET", "test-secret")
os.environ.setdefault("MAIL_HOST", "")

import re

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.db import Base, get_db
from app.core.rate_limit import reset_limiters
from app.core.reset_db import init_db
from app.main import app
from app.routers.auth import get_notifier
from app.services.auth import CredentialService
from app.services.credential_store import CredentialStore
from app.services.mailer import Notifier


class RecordingNotifier(Notifier):
    def __init__(self):
        self.sent = []
        self.fail = False

    def send(self, to_address, subject, body):
        if self.fail:
            raise ConnectionError("smtp down")
        self.sent.append((to_address, subject, body))

    def last_code(self):
        return re.search(r"(\d{6})", self.sent[-1][2]).group(1)

    def last_reset_token(self):
        return re.search(r"token=([0-9a-f]+)", self.sent[-1][2]).group(1)


class FakeClock:
    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture(autouse=True)
def _fresh_limiters():
    reset_limiters()
    yield
    reset_limiters()


@pytest.fixture()
def engine():
    eng = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    init_db(eng)
    yield eng
    Base.metadata.drop_all(bind=eng)
    eng.dispose()


@pytest.fixture()
def db(engine):
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def notifier():
    return RecordingNotifier()


@pytest.fixture()
def store(db):
    return CredentialStore(db)


@pytest.fixture()
def service(store, notifier):
    return CredentialService(store, notifier)


@pytest.fixture()
def client(db, notifier):
    def _get_db():
        yield db

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_notifier] = lambda: notifier
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
