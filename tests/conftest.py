import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from string_analyzer.crud.analysis import RecordStore
from string_analyzer.database import build_engine, get_db, init_db
from string_analyzer.main import app


@pytest.fixture
def session_factory():
    """A fresh in-memory database for every test."""
    engine = build_engine("sqlite://")
    init_db(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def store(db):
    return RecordStore(db)


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()
