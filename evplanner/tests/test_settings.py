import os
from unittest.mock import patch

from django.test import SimpleTestCase

from evplanner_api.settings import env_bool, env_float, env_int, env_list, env_optional_float


class EnvHelperTests(SimpleTestCase):
    def test_missing_values_fall_back_to_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            self.assertTrue(env_bool("DEBUG", True))
            self.assertEqual(env_int("EXTERNAL_API_TIMEOUT_SECONDS", 15), 15)
            self.assertEqual(env_float("DEFAULT_FULL_RANGE_KM", 300.0), 300.0)
            self.assertEqual(env_list("ALLOWED_HOSTS", "a, b,,"), ["a", "b"])
            self.assertEqual(env_optional_float("DEFAULT_MAX_FULL_CHARGE_TIME_HOURS", 3.0), 3.0)

    def test_values_are_parsed(self):
        env = {
            "DEBUG": "off",
            "EXTERNAL_API_TIMEOUT_SECONDS": "30",
            "DEFAULT_FULL_RANGE_KM": "412.5",
            "DEFAULT_MAX_FULL_CHARGE_TIME_HOURS": "1.5",
        }
        with patch.dict(os.environ, env, clear=True):
            self.assertFalse(env_bool("DEBUG", True))
            self.assertEqual(env_int("EXTERNAL_API_TIMEOUT_SECONDS", 15), 30)
            self.assertEqual(env_float("DEFAULT_FULL_RANGE_KM", 300.0), 412.5)
            self.assertEqual(env_optional_float("DEFAULT_MAX_FULL_CHARGE_TIME_HOURS", 3.0), 1.5)

    def test_blank_optional_float_uses_default(self):
        with patch.dict(os.environ, {"DEFAULT_MAX_FULL_CHARGE_TIME_HOURS": "  "}, clear=True):
            self.assertIsNone(env_optional_float("DEFAULT_MAX_FULL_CHARGE_TIME_HOURS"))


class ProjectWiringTests(SimpleTestCase):
    def test_root_lists_endpoints(self):
        response = self.client.get("/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["endpoints"]["route_plan"]["path"], "/api/route-plan/")

    def test_schema_and_docs_render(self):
        self.assertEqual(self.client.get("/api/schema/").status_code, 200)
        self.assertEqual(self.client.get("/api/docs/swagger/").status_code, 200)
        self.assertEqual(self.client.get("/api/docs/redoc/").status_code, 200)
