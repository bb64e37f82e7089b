from __future__ import annotations

import unittest

from rest_framework import exceptions

from api.exceptions import civicfeed_exception_handler


class PublicView:
    pass


class SensitiveView:
    expose_error_detail = False


class TestExceptionHandler(unittest.TestCase):
    def test_unexpected_error_is_500_with_detail(self) -> None:
        with self.assertLogs("api.exceptions", level="ERROR"):
            response = civicfeed_exception_handler(RuntimeError("db went away"), {"view": PublicView()})

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.data, {"message": "Server error", "error": "db went away"})

    def test_sensitive_views_hide_detail(self) -> None:
        with self.assertLogs("api.exceptions", level="ERROR"):
            response = civicfeed_exception_handler(RuntimeError("secret"), {"view": SensitiveView()})

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.data, {"message": "Server error"})

    def test_validation_error_keeps_field_detail(self) -> None:
        exc = exceptions.ValidationError({"title": ["This field is required."]})
        response = civicfeed_exception_handler(exc, {"view": PublicView()})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["message"], "title: This field is required.")
        self.assertEqual(response.data["error"], {"title": ["This field is required."]})

    def test_api_errors_map_to_status_codes(self) -> None:
        cases = [
            (exceptions.NotAuthenticated(), 401),
            (exceptions.PermissionDenied("Not authorized"), 403),
            (exceptions.NotFound("Post not found"), 404),
        ]
        for exc, code in cases:
            with self.subTest(code=code):
                response = civicfeed_exception_handler(exc, {"view": PublicView()})
                self.assertEqual(response.status_code, code)
                self.assertEqual(set(response.data), {"message"})

        self.assertEqual(
            civicfeed_exception_handler(exceptions.NotFound("Post not found"), {}).data,
            {"message": "Post not found"},
        )
