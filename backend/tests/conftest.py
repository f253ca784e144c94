"""
Shared fixtures: an in-memory SQLite database per test and a TestClient
wired to it through dependency overrides.
"""
import os

# settings are read at import time
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["OPENAI_API_KEY"] = ""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import event
from sqlalchemy.orm import sessionmaker

from fitness_api.auth import get_password_hash
from fitness_api.database import Base, build_engine, get_db
from fitness_api.llm.planner import PlanGenerator, get_plan_generator
from fitness_api.main import app
from fitness_api.repositories import UserRepository

engine = build_engine("sqlite://")
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class FakeCompletions:
    def __init__(self, text=None, error=None):
        self.text = text
        self.error = error
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error:
            raise self.error
        message = type("Message", (), {"content": self.text})()
        choice = type("Choice", (), {"message": message})()
        return type("Response", (), {"choices": [choice]})()


class FakeOpenAI:
    """Stands in for openai.OpenAI: only chat.completions.create is used."""

    def __init__(self, text=None, error=None):
        self.completions = FakeCompletions(text, error)
        self.chat = type("Chat", (), {"completions": self.completions})()


@pytest.fixture()
def db_session():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def client(db_session):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_plan_generator] = lambda: PlanGenerator(client=None)
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def user(db_session):
    return UserRepository(db_session).create(
        name="Alex",
        email="alex@example.com",
        password_hash=get_password_hash("s3cret-pw"),
    )


@pytest.fixture()
def two_sessions(tmp_path):
    """Two independent sessions on one file database, for interleaving writes."""
    file_engine = build_engine(f"sqlite:///{tmp_path / 'shared.db'}")
    Base.metadata.create_all(bind=file_engine)
    FileSession = sessionmaker(autocommit=False, autoflush=False, bind=file_engine)
    first, second = FileSession(), FileSession()
    try:
        yield first, second
    finally:
        first.close()
        second.close()
        file_engine.dispose()


def run_before_next_insert(session, action):
    """Run ``action`` once, right before ``session`` executes its next INSERT."""
    fired = []

    @event.listens_for(session, "do_orm_execute")
    def _interleave(orm_execute_state):
        if orm_execute_state.is_insert and not fired:
            fired.append(True)
            action()

    return fired
