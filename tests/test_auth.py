import pytest

from biblioteca.extensions import db
from biblioteca.models.user import User


@pytest.fixture
def registered(client):
    res = client.post("/api/auth/register", json={
        "email": "Lector@Example.com",
        "password": "secreto123",
        "name": "Ana Lectora",
    })
    assert res.status_code == 201
    return res.get_json()["user"]


def _login(client, email="lector@example.com", password="secreto123"):
    return client.post("/api/auth/login", json={"email": email, "password": password})


class TestRegister:
    def test_register_normalizes_email_and_defaults_role(self, registered):
        assert registered["email"] == "lector@example.com"
        assert registered["role"] == "user"
        assert "password_hash" not in registered

    def test_duplicate_email(self, client, registered):
        res = client.post("/api/auth/register", json={
            "email": "lector@example.com",
            "password": "otraclave",
            "name": "Otra Persona",
        })
        assert res.status_code == 409

    def test_short_password(self, client):
        res = client.post("/api/auth/register", json={"email": "a@b.com", "password": "123", "name": "Ana"})
        assert res.status_code == 400
        assert "password" in res.get_json()["error"]["details"]


class TestLogin:
    def test_login_returns_token_with_role(self, client, registered):
        res = _login(client)
        assert res.status_code == 200

        token = res.get_json()["access_token"]
        me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert me.status_code == 200
        assert me.get_json()["user"]["id"] == registered["id"]

    def test_wrong_password(self, client, registered):
        assert _login(client, password="incorrecta").status_code == 401

    def test_unknown_user(self, client):
        assert _login(client, email="nadie@example.com").status_code == 401

    def test_invalid_token(self, client):
        res = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
        assert res.status_code == 401
        assert res.get_json()["error"]["code"] == "INVALID_TOKEN"

    def test_admin_token_can_create_polls(self, app, client):
        runner = app.test_cli_runner()
        result = runner.invoke(args=["create-admin", "--email", "admin@example.com", "--password", "adminpass"])
        assert result.exit_code == 0, result.output
        assert db.session.query(User).filter_by(email="admin@example.com").one().is_admin

        token = _login(client, email="admin@example.com", password="adminpass").get_json()["access_token"]
        res = client.post("/api/polls/", headers={"Authorization": f"Bearer {token}"}, json={
            "title": "Mejor Libro",
            "options": ["X", "Y"],
            "end_time": "2099-01-01T00:00:00Z",
        })
        assert res.status_code == 201


class TestUserListing:
    def test_admin_lists_users_newest_first(self, client, registered, admin_headers):
        client.post("/api/auth/register", json={
            "email": "segundo@example.com",
            "password": "secreto456",
            "name": "Segundo Lector",
        })

        res = client.get("/api/auth/users", headers=admin_headers)
        assert res.status_code == 200

        body = res.get_json()
        assert body["total"] == 2
        assert [u["email"] for u in body["users"]] == ["segundo@example.com", "lector@example.com"]
        assert all("password_hash" not in u for u in body["users"])

    def test_requires_admin(self, client, voter_headers):
        res = client.get("/api/auth/users", headers=voter_headers)
        assert res.status_code == 403
        assert res.get_json()["error"]["code"] == "FORBIDDEN"

    def test_requires_token(self, client):
        assert client.get("/api/auth/users").status_code == 401


class TestCli:
    def test_create_admin_promotes_existing_user(self, app, registered):
        runner = app.test_cli_runner()
        result = runner.invoke(args=["create-admin", "--email", "lector@example.com", "--password", "ignored1"])

        assert "promoted" in result.output
        user = db.session.query(User).filter_by(email="lector@example.com").one()
        assert user.role == "admin"
        assert user.check_password("secreto123")

    def test_create_db(self, app):
        result = app.test_cli_runner().invoke(args=["create-db"])
        assert result.exit_code == 0
        assert "Tables created" in result.output

    def test_promoting_does_not_ask_for_a_password(self, app, registered):
        result = app.test_cli_runner().invoke(args=["create-admin", "--email", "lector@example.com"])

        assert result.exit_code == 0, result.output
        assert "Password" not in result.output
        assert "promoted" in result.output

    def test_new_admin_is_prompted_for_a_password(self, app, client):
        result = app.test_cli_runner().invoke(
            args=["create-admin", "--email", "nueva@example.com"],
            input="clave123\nclave123\n",
        )

        assert result.exit_code == 0, result.output
        assert "created" in result.output
        assert _login(client, email="nueva@example.com", password="clave123").status_code == 200
