import os
import sys
from pathlib import Path

os.environ.setdefault("CUALPROFE_DATABASE_URL", "sqlite://")
sys.path.append(str(Path(__file__).resolve().parents[1]))

import pytest
from fastapi.testclient import TestClient

from cualprofe.database import Base, build_engine, build_session_factory, get_db
from cualprofe.main import app
from cualprofe.models import Professor, Tag


@pytest.fixture
def session_factory():
    engine = build_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    yield build_session_factory(engine)
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
def client(session_factory):
    def _get_test_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_test_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def professor(db) -> Professor:
    prof = Professor(
        name="María Pérez",
        university="Universidad Católica Andrés Bello",
        department="Ingeniería",
        courses="Cálculo I, Física II",
    )
    db.add(prof)
    db.commit()
    db.refresh(prof)
    return prof


@pytest.fixture
def tag_vocabulary(db) -> list:
    tags = [
        Tag(name="Exigente", is_active=True),
        Tag(name="Divertido", is_active=True),
        Tag(name="Aburrido", is_active=False),
    ]
    db.add_all(tags)
    db.commit()
    return tags
