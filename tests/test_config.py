import os
import unittest
from unittest import mock

from pydantic import ValidationError

from config import DEFAULT_MORNING_ROUTINE, Settings


class TestSettings(unittest.TestCase):
    def test_defaults(self):
        settings = Settings(_env_file=None)

        self.assertEqual(settings.DEFAULT_MORNING_ROUTINE, DEFAULT_MORNING_ROUTINE)
        self.assertEqual(settings.ROLLOVER_LOOKBACK, 10)
        self.assertTrue(settings.ROLLOVER_LOCKING)
        self.assertEqual(settings.USER_ID_HEADER, "X-User-Id")

    def test_comma_separated_lists_from_environment(self):
        env = {
            "DEFAULT_NIGHT_ROUTINE": "read, journal ,",
            "ALLOWED_ORIGINS": "https://a.example,https://b.example",
            "STORE_BACKEND": "MEMORY",
            "LOG_LEVEL": "debug",
        }
        with mock.patch.dict(os.environ, env):
            settings = Settings(_env_file=None)

        self.assertEqual(settings.DEFAULT_NIGHT_ROUTINE, ["read", "journal"])
        self.assertEqual(settings.ALLOWED_ORIGINS, ["https://a.example", "https://b.example"])
        self.assertEqual(settings.STORE_BACKEND, "memory")
        self.assertEqual(settings.LOG_LEVEL, "DEBUG")

    def test_invalid_values(self):
        for field, value in (("TIMEZONE", "Mars/Olympus"), ("STORE_BACKEND", "sql"),
                             ("ROLLOVER_LOOKBACK", 0), ("PORT", 70000)):
            with self.subTest(field=field):
                with self.assertRaises(ValidationError):
                    Settings(_env_file=None, **{field: value})

    def test_store_path(self):
        settings = Settings(_env_file=None, DATA_DIR="var/data", STORE_FILE="ledger.json")
        self.assertEqual(str(settings.store_path), os.path.join("var", "data", "ledger.json"))


if __name__ == "__main__":
    unittest.main(verbosity=2)
