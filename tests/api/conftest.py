# tests/api/conftest.py
import pytest
from fastapi.testclient import TestClient

from inkwell.api.main import app
from inkwell.core.security import create_access_token
from inkwell.db.session import get_db


@pytest.fixture
def client(db_session_factory):
    """TestClient bound to the per-test database. Lifespan is not run."""
    def override_get_db():
        db = db_session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    def _auth_headers(user) -> dict:
        return {"Authorization": f"Bearer {create_access_token(user.id)}"}
    return _auth_headers
