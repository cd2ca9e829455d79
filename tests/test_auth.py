import unittest

from core.auth import AdminSession, login
from core.errors import ApiError
from tests.helpers import FakeResponse, make_client


class AdminSessionTests(unittest.TestCase):
    def test_display_name_and_email(self):
        s = AdminSession(token="t", user={"name": " Priya ", "email": "Priya@Inst.Test"})
        self.assertTrue(s.is_authenticated)
        self.assertEqual(s.display_name, "Priya")
        self.assertEqual(s.email, "priya@inst.test")
        self.assertEqual(AdminSession().display_name, "Admin")


class LoginTests(unittest.TestCase):
    def test_login_returns_session(self):
        client, http = make_client(
            lambda m, p, kw: FakeResponse(200, {"success": True, "token": "new", "user": {"email": "a@b.c"}}),
            token=None,
        )
        session = login(client, " a@b.c ", "pw")
        self.assertEqual(session.token, "new")
        self.assertEqual(session.user, {"email": "a@b.c"})
        self.assertEqual(http.calls[0][1], "/auth/login")
        self.assertEqual(http.calls[0][2]["json"], {"email": "a@b.c", "password": "pw"})

    def test_login_failure_uses_backend_message(self):
        client, _ = make_client(
            lambda m, p, kw: FakeResponse(401, {"success": False, "message": "Invalid credentials"}), token=None
        )
        with self.assertRaises(ApiError) as ctx:
            login(client, "a@b.c", "bad")
        self.assertEqual(ctx.exception.message, "Invalid credentials")

    def test_login_without_token_fails(self):
        client, _ = make_client(lambda m, p, kw: FakeResponse(200, {"success": True}), token=None)
        with self.assertRaises(ApiError) as ctx:
            login(client, "a@b.c", "pw")
        self.assertEqual(ctx.exception.message, "Login failed")

    def test_blank_credentials_rejected_without_request(self):
        client, http = make_client(lambda m, p, kw: FakeResponse(200, {}), token=None)
        with self.assertRaises(ApiError):
            login(client, "  ", "pw")
        self.assertEqual(http.calls, [])
