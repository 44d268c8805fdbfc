# tests/conftest.py
import os
import sys

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

sys.path.append(os.path.abspath("."))

from contactbook.database import Base, get_db
from contactbook import crud
from contactbook.auth import get_password_hash
from main import app


# DB (SQLite in-memory for tests)
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

PASSWORD = "secret123"


@pytest.fixture(autouse=True)
def prepare_database():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db_session():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def user(db_session):
    return crud.create_user(db_session, "admin", get_password_hash(PASSWORD))


@pytest.fixture()
def other_user(db_session):
    return crud.create_user(db_session, "intruder", get_password_hash(PASSWORD))


# Client fixture: override DB dependency per test
@pytest.fixture()
def client(db_session):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    c = TestClient(app)
    try:
        yield c
    finally:
        app.dependency_overrides.clear()
        c.close()


@pytest.fixture()
def signed_in_client(client, user):
    response = client.post(
        "/contacts/sign-in",
        data={"username": user.username, "password": PASSWORD},
        follow_redirects=False,
    )
    assert response.status_code == 303
    return client
