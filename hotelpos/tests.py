import os
import runpy
from pathlib import Path
from unittest import mock

from django.contrib.auth import get_user_model
from django.contrib.auth.models import AnonymousUser
from django.http import JsonResponse
from django.test import RequestFactory, SimpleTestCase, TestCase

from .api import json_endpoint
from .exceptions import Conflict, InternalError, NotFound, Unprocessable


@json_endpoint
def echo_view(request, error=None):
    if error is not None:
        raise error
    return JsonResponse({"ok": True})


class JsonEndpointTests(TestCase):
    def setUp(self):
        self.factory = RequestFactory()
        user_model = get_user_model()
        self.staff = user_model.objects.create_user(
            username="manager",
            password="pass1234",
            is_staff=True,
        )
        self.guest_user = user_model.objects.create_user(
            username="visitor",
            password="pass1234",
        )

    def call(self, user, error=None):
        request = self.factory.get("/api/echo/")
        request.user = user
        return echo_view(request, error=error)

    def test_anonymous_user_is_unauthorized(self):
        response = self.call(AnonymousUser())

        self.assertEqual(response.status_code, 401)

    def test_non_staff_user_is_forbidden(self):
        response = self.call(self.guest_user)

        self.assertEqual(response.status_code, 403)

    def test_staff_user_passes(self):
        response = self.call(self.staff)

        self.assertEqual(response.status_code, 200)

    def test_service_errors_map_to_status_codes(self):
        cases = [
            (NotFound(), 404, "NOT_FOUND"),
            (Conflict("Taken."), 409, "CONFLICT"),
            (Unprocessable(), 422, "UNPROCESSABLE"),
            (InternalError(), 500, "INTERNAL"),
        ]
        for error, status, code in cases:
            with self.subTest(code=code):
                response = self.call(self.staff, error=error)

                self.assertEqual(response.status_code, status)
                self.assertEqual(response["Content-Type"], "application/json")

        response = self.call(self.staff, error=Conflict("Taken."))
        self.assertEqual(response.content, b'{"error": "CONFLICT", "message": "Taken."}')


class SettingsTests(SimpleTestCase):
    settings_path = str(Path(__file__).with_name("settings.py"))

    def load_settings(self, **environ):
        clean = {key: value for key, value in os.environ.items() if key != "DJANGO_DEBUG"}
        clean.update(environ)
        with mock.patch.dict(os.environ, clean, clear=True):
            return runpy.run_path(self.settings_path)

    def test_debug_is_off_by_default(self):
        self.assertFalse(self.load_settings()["DEBUG"])

    def test_debug_can_be_enabled_from_environment(self):
        self.assertTrue(self.load_settings(DJANGO_DEBUG="true")["DEBUG"])
