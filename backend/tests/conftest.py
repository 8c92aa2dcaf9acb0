import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))

from nutriplan import main
from nutriplan.knowledge.seed import seed_knowledge_base
from nutriplan.storage import db as db_module
from nutriplan.storage.models import User, UserAllergen


@pytest.fixture(name="engine")
def engine_fixture():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    return engine


@pytest.fixture(name="session")
def session_fixture(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture(name="kb")
def kb_fixture(session):
    """The seeded knowledge base: 8 allergens, 48 ingredients, 6 menu cases."""
    return seed_knowledge_base(session)


@pytest.fixture(name="student")
def student_fixture(session):
    user = User(name="Sari", email="sari@example.com", custom_allergies="Fish, susu")
    session.add(user)
    session.commit()
    session.refresh(user)
    session.add(UserAllergen(user_id=user.id, allergen="Peanut"))
    session.commit()
    return user


@pytest.fixture(name="client")
def client_fixture(monkeypatch, engine):
    def _get_session_override():
        return Session(engine)

    monkeypatch.setattr(db_module, "engine", engine)
    monkeypatch.setattr(db_module, "get_session", _get_session_override)

    client = TestClient(main.app)
    return client
