import uuid

from app.core.security import verify_password
from app.models.group import Group
from app.models.user import User
from tests.conftest import headers_for


class TestListUsers:
    """Tests for GET /api/admin/users"""

    def test_lists_users_across_groups(self, client, admin_headers, admin_user, regular_user):
        response = client.get("/api/admin/users", headers=admin_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 2
        emails = {u["email"] for u in data["results"]}
        assert emails == {"alice@example.test", "bob@example.test"}

    def test_password_never_returned(self, client, admin_headers):
        response = client.get("/api/admin/users", headers=admin_headers)

        for user in response.json()["results"]:
            assert "password" not in user


class TestCreateUser:
    """Tests for POST /api/admin/users"""

    def test_create_defaults_to_caller_group(self, client, db_session, admin_headers, admin_user):
        response = client.post(
            "/api/admin/users",
            headers=admin_headers,
            json={"name": "Carol", "email": "carol@example.test", "password": "hunter22"},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["group_id"] == str(admin_user.group_id)
        assert data["is_owner"] is False
        assert data["is_superuser"] is False

    def test_nil_group_id_means_caller_group(self, client, admin_headers, admin_user):
        response = client.post(
            "/api/admin/users",
            headers=admin_headers,
            json={
                "name": "Dave",
                "email": "dave@example.test",
                "password": "pw",
                "group_id": "00000000-0000-0000-0000-000000000000",
            },
        )

        assert response.status_code == 201
        assert response.json()["group_id"] == str(admin_user.group_id)

    def test_create_in_explicit_group(self, client, admin_headers, other_group):
        response = client.post(
            "/api/admin/users",
            headers=admin_headers,
            json={
                "name": "Erin",
                "email": "erin@example.test",
                "password": "pw",
                "group_id": str(other_group.id),
                "is_superuser": True,
            },
        )

        assert response.status_code == 201
        data = response.json()
        assert data["group_id"] == str(other_group.id)
        assert data["is_superuser"] is True
        assert data["is_owner"] is False

    def test_create_in_unknown_group(self, client, admin_headers):
        response = client.post(
            "/api/admin/users",
            headers=admin_headers,
            json={
                "name": "Frank",
                "email": "frank@example.test",
                "password": "pw",
                "group_id": str(uuid.uuid4()),
            },
        )

        assert response.status_code == 404

    def test_stored_credential_is_hashed(self, client, db_session, admin_headers):
        response = client.post(
            "/api/admin/users",
            headers=admin_headers,
            json={"name": "Gina", "email": "Gina@Example.TEST", "password": "plain-secret"},
        )
        user_id = uuid.UUID(response.json()["id"])

        stored = db_session.query(User).filter(User.id == user_id).first()
        assert stored.name == "Gina"
        assert stored.email == "gina@example.test"
        assert stored.password != "plain-secret"
        assert verify_password("plain-secret", stored.password)

    def test_duplicate_email_is_store_error(self, client, admin_headers, regular_user):
        response = client.post(
            "/api/admin/users",
            headers=admin_headers,
            json={"name": "Bob Again", "email": "BOB@example.test", "password": "pw"},
        )

        assert response.status_code == 500
        assert response.json()["code"] == "store_error"

    def test_empty_fields_rejected(self, client, admin_headers):
        response = client.post(
            "/api/admin/users",
            headers=admin_headers,
            json={"name": "", "email": "x@example.test", "password": ""},
        )

        assert response.status_code == 400

    def test_oversized_password_is_hashing_error(self, client, admin_headers):
        response = client.post(
            "/api/admin/users",
            headers=admin_headers,
            json={"name": "Long", "email": "long@example.test", "password": "x" * 100},
        )

        assert response.status_code == 500
        assert response.json()["code"] == "hashing_error"


class TestUpdateUser:
    """Tests for PUT /api/admin/users/{id}"""

    def test_update_and_promote(self, client, admin_headers, regular_user):
        response = client.put(
            f"/api/admin/users/{regular_user.id}",
            headers=admin_headers,
            json={"name": "Robert", "email": "robert@example.test", "is_superuser": True},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Robert"
        assert data["email"] == "robert@example.test"
        assert data["is_superuser"] is True

    def test_promoted_user_passes_gate(self, client, admin_headers, regular_user):
        client.put(
            f"/api/admin/users/{regular_user.id}/superuser",
            headers=admin_headers,
            json={"is_superuser": True},
        )

        response = client.get("/api/admin/users", headers=headers_for(regular_user))
        assert response.status_code == 200

    def test_demoted_user_loses_access(self, client, admin_headers, regular_user):
        client.put(
            f"/api/admin/users/{regular_user.id}/superuser",
            headers=admin_headers,
            json={"is_superuser": True},
        )
        client.put(
            f"/api/admin/users/{regular_user.id}/superuser",
            headers=admin_headers,
            json={"is_superuser": False},
        )

        response = client.get("/api/admin/users", headers=headers_for(regular_user))
        assert response.status_code == 403

    def test_self_demotion_forbidden(self, client, admin_headers, admin_user):
        response = client.put(
            f"/api/admin/users/{admin_user.id}",
            headers=admin_headers,
            json={"name": "Alice", "email": "alice@example.test", "is_superuser": False},
        )

        assert response.status_code == 403

    def test_self_demotion_via_flag_endpoint_forbidden(self, client, admin_headers, admin_user):
        response = client.put(
            f"/api/admin/users/{admin_user.id}/superuser",
            headers=admin_headers,
            json={"is_superuser": False},
        )

        assert response.status_code == 403

    def test_self_update_keeping_privilege_allowed(self, client, admin_headers, admin_user):
        response = client.put(
            f"/api/admin/users/{admin_user.id}",
            headers=admin_headers,
            json={"name": "Alice A.", "email": "alice@example.test", "is_superuser": True},
        )

        assert response.status_code == 200
        assert response.json()["name"] == "Alice A."

    def test_malformed_id_is_client_error(self, client, admin_headers):
        response = client.put(
            "/api/admin/users/not-a-uuid",
            headers=admin_headers,
            json={"name": "X", "email": "x@example.test", "is_superuser": False},
        )

        assert response.status_code == 400

    def test_unknown_id_not_found(self, client, admin_headers):
        response = client.put(
            f"/api/admin/users/{uuid.uuid4()}",
            headers=admin_headers,
            json={"name": "X", "email": "x@example.test", "is_superuser": False},
        )

        assert response.status_code == 404


class TestDeleteUser:
    """Tests for DELETE /api/admin/users/{id}"""

    def test_delete_other_user(self, client, db_session, admin_headers, regular_user):
        user_id = regular_user.id
        response = client.delete(f"/api/admin/users/{user_id}", headers=admin_headers)

        assert response.status_code == 204
        assert response.content == b""
        db_session.expire_all()
        assert db_session.query(User).filter(User.id == user_id).first() is None

    def test_delete_keeps_group(self, client, db_session, admin_headers, regular_user, other_group):
        client.delete(f"/api/admin/users/{regular_user.id}", headers=admin_headers)

        db_session.expire_all()
        assert db_session.query(Group).filter(Group.id == other_group.id).first() is not None

    def test_self_delete_forbidden(self, client, db_session, admin_headers, admin_user):
        response = client.delete(f"/api/admin/users/{admin_user.id}", headers=admin_headers)

        assert response.status_code == 403
        assert db_session.query(User).filter(User.id == admin_user.id).first() is not None

    def test_malformed_id_is_client_error(self, client, admin_headers):
        response = client.delete("/api/admin/users/12345", headers=admin_headers)
        assert response.status_code == 400

    def test_unknown_id_not_found(self, client, admin_headers):
        response = client.delete(f"/api/admin/users/{uuid.uuid4()}", headers=admin_headers)
        assert response.status_code == 404

    def test_demo_mode_blocks_delete(self, client, admin_headers, regular_user, monkeypatch):
        from app.config import settings

        monkeypatch.setattr(settings, "DEMO_MODE", True)
        response = client.delete(f"/api/admin/users/{regular_user.id}", headers=admin_headers)

        assert response.status_code == 403


class TestPartialUpdate:
    """The name/email-then-flag sequence reports a half-applied update"""

    def test_flag_failure_surfaces_distinct_code(self, client, admin_headers, regular_user):
        from unittest.mock import patch

        from app.core.exceptions import StoreException
        from app.repositories.user_repository import UserRepository

        with patch.object(UserRepository, "set_superuser", side_effect=StoreException("down")):
            response = client.put(
                f"/api/admin/users/{regular_user.id}",
                headers=admin_headers,
                json={"name": "Bobby", "email": "bobby@example.test", "is_superuser": True},
            )

        assert response.status_code == 500
        data = response.json()
        assert data["code"] == "privilege_update_incomplete"
        assert data["user_id"] == str(regular_user.id)

        retry = client.put(
            f"/api/admin/users/{regular_user.id}/superuser",
            headers=admin_headers,
            json={"is_superuser": True},
        )
        assert retry.status_code == 200
        assert retry.json()["is_superuser"] is True
        assert retry.json()["name"] == "Bobby"

    def test_field_failure_is_plain_store_error(self, client, db_session, admin_headers, regular_user):
        from unittest.mock import patch

        from app.core.exceptions import StoreException
        from app.repositories.user_repository import UserRepository

        with patch.object(UserRepository, "update", side_effect=StoreException("down")):
            response = client.put(
                f"/api/admin/users/{regular_user.id}",
                headers=admin_headers,
                json={"name": "Bobby", "email": "bobby@example.test", "is_superuser": True},
            )

        assert response.status_code == 500
        assert response.json()["code"] == "store_error"
        db_session.expire_all()
        assert db_session.get(User, regular_user.id).is_superuser is False

    def test_flag_step_read_failure_surfaces_distinct_code(
        self, client, db_session, admin_headers, regular_user
    ):
        from unittest.mock import patch

        from sqlalchemy.exc import OperationalError

        from app.repositories.user_repository import UserRepository

        original = UserRepository.get_by_id
        target_reads = []

        def drop_connection_on_second_read(repo, user_id):
            if user_id == regular_user.id:
                target_reads.append(user_id)
                if len(target_reads) == 2:
                    raise OperationalError("SELECT", {}, Exception("connection reset"))
            return original(repo, user_id)

        with patch.object(UserRepository, "get_by_id", drop_connection_on_second_read):
            response = client.put(
                f"/api/admin/users/{regular_user.id}",
                headers=admin_headers,
                json={"name": "Bobby", "email": "bobby@example.test", "is_superuser": True},
            )

        assert response.status_code == 500
        data = response.json()
        assert data["code"] == "privilege_update_incomplete"
        assert data["user_id"] == str(regular_user.id)
        db_session.expire_all()
        assert db_session.get(User, regular_user.id).name == "Bobby"
