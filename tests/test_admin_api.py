"""End-to-end tests for the admin service with the identity service mounted in-process."""

import unittest
from unittest.mock import MagicMock, patch

import httpx
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from smartcity.admin_main import create_app as create_admin_app
from smartcity.models import AdminLog, Base
from support import bearer, make_admin_app, make_identity_app, make_settings, register


class AdminApiTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.identity_app = make_identity_app()
        self.identity = TestClient(self.identity_app)
        self.admin_app = make_admin_app(self.identity_app)
        self.client = TestClient(self.admin_app)
        self.admin = register(self.identity, "admin@x.com", "Ada", "Admin", role="Admin")
        self.citizen = register(self.identity, "citizen@x.com", "Carl", "Citizen")

    def _audit_entries(self) -> list[AdminLog]:
        with self.admin_app.state.session_factory() as db:
            return db.query(AdminLog).order_by(AdminLog.id).all()


class TestUserProxy(AdminApiTestCase):
    """GET /admin/users forwards the caller's token and audits the access."""

    def test_admin_gets_users_and_action_is_audited(self) -> None:
        response = self.client.get("/api/admin/users", headers=bearer(self.admin["token"]))
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertTrue(body["success"])
        self.assertEqual([u["email"] for u in body["data"]], ["admin@x.com", "citizen@x.com"])

        logs = self.client.get("/api/admin/logs", headers=bearer(self.admin["token"]))
        self.assertEqual(logs.status_code, 200)
        latest = logs.json()["data"][0]
        self.assertEqual(latest["action"], "Retrieved user list")
        self.assertEqual(latest["user_id"], self.admin["user_id"])
        self.assertEqual(latest["ip_address"], "testclient")

    def test_missing_token_is_401(self) -> None:
        response = self.client.get("/api/admin/users")
        self.assertEqual(response.status_code, 401)
        self.assertEqual(self._audit_entries(), [])

    def test_non_admin_is_403_and_nothing_is_audited(self) -> None:
        response = self.client.get("/api/admin/users", headers=bearer(self.citizen["token"]))
        self.assertEqual(response.status_code, 403)
        self.assertEqual(self._audit_entries(), [])

    def test_token_signed_with_other_secret_is_401(self) -> None:
        other = make_admin_app(self.identity_app, JWT_SECRET="a-completely-different-secret-of-32-bytes")
        response = TestClient(other).get("/api/admin/users", headers=bearer(self.admin["token"]))
        self.assertEqual(response.status_code, 401)

    def test_deactivated_admin_is_refused_downstream(self) -> None:
        second = register(self.identity, "second@x.com", "Sam", "Second", role="Admin")
        self.identity.delete(f"/api/auth/users/{second['user_id']}", headers=bearer(self.admin["token"]))

        response = self.client.get("/api/admin/users", headers=bearer(second["token"]))
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["error"], "User not found or inactive")
        self.assertEqual(self._audit_entries(), [])

    def test_demoted_admin_is_refused_downstream(self) -> None:
        second = register(self.identity, "second@x.com", "Sam", "Second", role="Admin")
        self.identity.put(
            f"/api/auth/users/{second['user_id']}",
            json={"role": "Citizen"},
            headers=bearer(self.admin["token"]),
        )
        response = self.client.get("/api/admin/users", headers=bearer(second["token"]))
        self.assertEqual(response.status_code, 403)
        self.assertEqual(self._audit_entries(), [])

    def test_identity_service_unreachable_is_503(self) -> None:
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        app = create_admin_app(make_settings(), identity_transport=httpx.MockTransport(refuse))
        Base.metadata.create_all(app.state.engine)
        response = TestClient(app).get("/api/admin/users", headers=bearer(self.admin["token"]))
        self.assertEqual(response.status_code, 503)
        body = response.json()
        self.assertFalse(body["success"])
        self.assertEqual(body["message"], "Service communication failed")
        self.assertIn("identity service", body["error"])

    def test_audit_failure_does_not_change_response(self) -> None:
        audit = self.admin_app.state.audit_logger
        audit._session_factory = MagicMock(side_effect=OperationalError("INSERT", {}, Exception("locked")))
        with self.assertLogs("smartcity.services.audit", level="ERROR"):
            response = self.client.get("/api/admin/users", headers=bearer(self.admin["token"]))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.json()["data"]), 2)


class TestAdminLogs(AdminApiTestCase):
    def test_logs_require_admin(self) -> None:
        self.assertEqual(self.client.get("/api/admin/logs").status_code, 401)
        response = self.client.get("/api/admin/logs", headers=bearer(self.citizen["token"]))
        self.assertEqual(response.status_code, 403)

    def test_logs_are_newest_first(self) -> None:
        headers = bearer(self.admin["token"])
        self.client.get("/api/admin/users", headers=headers)
        self.client.post("/api/admin/settings", json={"key": "theme", "value": "dark"}, headers=headers)
        actions = [e["action"] for e in self.client.get("/api/admin/logs", headers=headers).json()["data"]]
        self.assertEqual(actions, ["Updated system setting", "Retrieved user list"])


class TestSystemSettings(AdminApiTestCase):
    def test_upsert_and_list(self) -> None:
        headers = bearer(self.admin["token"])
        created = self.client.post(
            "/api/admin/settings",
            json={"key": "max_upload_mb", "value": "10", "description": "Upload cap"},
            headers=headers,
        )
        self.assertEqual(created.status_code, 200)
        self.assertEqual(created.json()["data"]["updated_by"], self.admin["user_id"])

        updated = self.client.post(
            "/api/admin/settings", json={"key": "max_upload_mb", "value": "25"}, headers=headers
        )
        self.assertEqual(updated.json()["data"]["value"], "25")

        listed = self.client.get("/api/admin/settings", headers=headers).json()["data"]
        self.assertEqual([(s["key"], s["value"]) for s in listed], [("max_upload_mb", "25")])

        entry = self._audit_entries()[-1]
        self.assertEqual(entry.action, "Updated system setting")
        self.assertEqual(entry.details, "Updated setting 'max_upload_mb' to '25'")

    def test_blank_key_is_400(self) -> None:
        response = self.client.post(
            "/api/admin/settings", json={"key": "  ", "value": "x"}, headers=bearer(self.admin["token"])
        )
        self.assertEqual(response.status_code, 400)

    def test_citizen_cannot_change_settings(self) -> None:
        response = self.client.post(
            "/api/admin/settings", json={"key": "theme", "value": "dark"}, headers=bearer(self.citizen["token"])
        )
        self.assertEqual(response.status_code, 403)


class TestErrorEnvelope(AdminApiTestCase):
    """Admin failures use the ApiResponse envelope with success=false."""

    def assertEnvelope(self, response, status_code: int, message: str) -> dict:
        self.assertEqual(response.status_code, status_code)
        body = response.json()
        self.assertFalse(body["success"])
        self.assertEqual(body["message"], message)
        self.assertIsNone(body["data"])
        self.assertIn("timestamp", body)
        self.assertNotIn("detail", body)
        return body

    def test_missing_token(self) -> None:
        response = self.client.get("/api/admin/users")
        body = self.assertEnvelope(response, 401, "Authentication required")
        self.assertEqual(body["error"], "Not authenticated")
        self.assertEqual(response.headers.get("www-authenticate"), "Bearer")

    def test_wrong_role(self) -> None:
        response = self.client.get("/api/admin/users", headers=bearer(self.citizen["token"]))
        body = self.assertEnvelope(response, 403, "Access denied")
        self.assertEqual(body["error"], "Admin access required")

    def test_invalid_setting_body(self) -> None:
        response = self.client.post(
            "/api/admin/settings", json={"key": " ", "value": "x"}, headers=bearer(self.admin["token"])
        )
        body = self.assertEnvelope(response, 400, "Invalid input")
        self.assertIn("Key and Value are required", body["error"])

    def test_unexpected_failure_hides_details(self) -> None:
        client = TestClient(self.admin_app, raise_server_exceptions=False)
        with patch(
            "smartcity.api.admin.settings.list_settings",
            side_effect=RuntimeError("connection string with password"),
        ):
            response = client.get("/api/admin/settings", headers=bearer(self.admin["token"]))
        body = self.assertEnvelope(response, 500, "An unexpected error occurred")
        self.assertEqual(body["error"], "Internal server error")

    def test_unknown_route(self) -> None:
        self.assertEnvelope(self.client.get("/api/admin/nothing-here"), 404, "Not found")
