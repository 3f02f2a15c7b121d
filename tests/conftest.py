import uuid
from datetime import timedelta

import pytest
from flask_jwt_extended import create_access_token

from biblioteca import create_app
from biblioteca.config import TestConfig
from biblioteca.extensions import db
from biblioteca.services.lifecycle import PollLifecycleManager
from biblioteca.utils.principal import Principal
from biblioteca.utils.time import utcnow

# ---------- App / DB ----------


@pytest.fixture
def app():
    app = create_app(TestConfig)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


# ---------- Principals ----------


@pytest.fixture
def admin():
    return Principal(id=uuid.uuid4(), role="admin")


@pytest.fixture
def voter():
    return Principal(id=uuid.uuid4(), role="user")


@pytest.fixture
def other_voter():
    return Principal(id=uuid.uuid4(), role="user")


def auth_headers(principal):
    token = create_access_token(identity=str(principal.id), additional_claims={"role": principal.role})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(app, admin):
    return auth_headers(admin)


@pytest.fixture
def voter_headers(app, voter):
    return auth_headers(voter)


# ---------- Poll services ----------


@pytest.fixture
def now():
    return utcnow().replace(microsecond=0)


@pytest.fixture
def manager(app, now):
    """Manager with a frozen clock so window checks are deterministic."""
    return PollLifecycleManager(lambda: db.session, logger=app.logger, clock=lambda: now)


@pytest.fixture
def poll_fields(now):
    def _make(**overrides):
        fields = {
            "title": "Mejor Libro",
            "description": "Votación para elegir el mejor libro",
            "options": ["X", "Y"],
            "end_time": (now + timedelta(hours=1)).isoformat(),
        }
        fields.update(overrides)
        return fields
    return _make


@pytest.fixture
def headers_for(app):
    return auth_headers
