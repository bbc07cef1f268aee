"""Tests for the ServiceError to HTTP mapping in smartcity.core.errors."""

import unittest

from fastapi import HTTPException

from smartcity.core.errors import (
    HTTP_STATUS_BY_KIND,
    ErrorKind,
    authentication_error,
    authorization_error,
    conflict_error,
    not_found_error,
    raise_for_error,
    upstream_error,
    validation_error,
)


class TestRaiseForError(unittest.TestCase):
    def _raised(self, error) -> HTTPException:
        with self.assertRaises(HTTPException) as ctx:
            raise_for_error(error)
        return ctx.exception

    def test_status_per_kind(self) -> None:
        cases = [
            (validation_error("bad"), 400),
            (authentication_error(), 401),
            (authorization_error("no"), 403),
            (conflict_error("taken"), 400),
            (not_found_error("gone"), 404),
            (upstream_error("down"), 503),
            (upstream_error("garbled", status_code=502), 502),
        ]
        for error, expected in cases:
            with self.subTest(kind=error.kind, status=expected):
                exc = self._raised(error)
                self.assertEqual(exc.status_code, expected)
                self.assertEqual(exc.detail, error.message)

    def test_every_kind_has_a_status(self) -> None:
        self.assertEqual(set(HTTP_STATUS_BY_KIND), set(ErrorKind))

    def test_service_errors_never_map_to_500(self) -> None:
        # 500 is reserved for unhandled exceptions, answered by the app-level handler.
        self.assertNotIn(500, HTTP_STATUS_BY_KIND.values())

    def test_authentication_carries_bearer_challenge(self) -> None:
        self.assertEqual(self._raised(authentication_error()).headers, {"WWW-Authenticate": "Bearer"})
        self.assertIsNone(self._raised(authorization_error("no")).headers)
