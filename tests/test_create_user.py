"""Tests for the create_user bootstrap script."""

import io
import unittest
from contextlib import redirect_stderr, redirect_stdout
from unittest.mock import patch

from smartcity.core.database import create_db_engine, create_session_factory
from smartcity.core.roles import Role
from smartcity.models import Base, User
from smartcity.scripts import create_user
from support import make_settings


class TestCreateUserScript(unittest.TestCase):
    def setUp(self) -> None:
        self.engine = create_db_engine("sqlite://")
        Base.metadata.create_all(self.engine)
        patchers = [
            patch.object(create_user, "get_settings", return_value=make_settings()),
            patch.object(create_user, "create_db_engine", return_value=self.engine),
        ]
        for p in patchers:
            p.start()
            self.addCleanup(p.stop)

    def tearDown(self) -> None:
        self.engine.dispose()

    def _run(self, *argv: str) -> tuple[int, str, str]:
        out, err = io.StringIO(), io.StringIO()
        with redirect_stdout(out), redirect_stderr(err):
            code = create_user.main(list(argv))
        return code, out.getvalue(), err.getvalue()

    def test_creates_admin(self) -> None:
        code, out, _ = self._run("root@city.gov", "secret1", "Ada", "Admin", "Admin")
        self.assertEqual(code, 0)
        self.assertIn("Ada Admin", out)
        with create_session_factory(self.engine)() as db:
            user = db.query(User).one()
        self.assertEqual(user.role, Role.ADMIN)

    def test_duplicate_fails(self) -> None:
        self._run("root@city.gov", "secret1", "Ada", "Admin")
        code, _, err = self._run("root@city.gov", "secret1", "Other", "Person")
        self.assertEqual(code, 1)
        self.assertIn("already exist", err)

    def test_short_password_fails(self) -> None:
        code, _, err = self._run("root@city.gov", "123", "Ada", "Admin")
        self.assertEqual(code, 1)
        self.assertIn("Invalid input", err)
