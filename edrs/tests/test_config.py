import os
import unittest
from unittest.mock import patch

from edrs.config import DEFAULT_PRODUCTION_API_URL, Settings, get_settings


class SettingsTests(unittest.TestCase):
    def test_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            settings = Settings(_env_file=None)
        self.assertEqual(settings.mode, "development")
        self.assertEqual(settings.api_url, DEFAULT_PRODUCTION_API_URL)
        self.assertEqual(settings.dev_api_url, "http://localhost:8000")
        self.assertIsNone(settings.storage_provider)
        self.assertEqual(settings.request_timeout, 10.0)
        self.assertEqual(settings.max_retries, 1)

    def test_production_timeouts_and_retries(self):
        settings = Settings(_env_file=None, mode="production")
        self.assertTrue(settings.is_production)
        self.assertEqual(settings.request_timeout, 30.0)
        self.assertEqual(settings.max_retries, 3)

    def test_other_modes_use_short_timeout_and_single_retry(self):
        settings = Settings(_env_file=None, mode="staging")
        self.assertFalse(settings.is_development)
        self.assertFalse(settings.is_production)
        self.assertEqual(settings.request_timeout, 10.0)
        self.assertEqual(settings.max_retries, 1)

    def test_env_names(self):
        env = {
            "EDRS_MODE": "production",
            "EDRS_API_URL": "https://api.example.test",
            "EDRS_STORAGE_PROVIDER": "minio",
            "EDRS_MINIO_USE_SSL": "true",
        }
        with patch.dict(os.environ, env, clear=True):
            settings = Settings(_env_file=None)
        self.assertEqual(settings.mode, "production")
        self.assertEqual(settings.api_url, "https://api.example.test")
        self.assertEqual(settings.storage_provider, "minio")
        self.assertTrue(settings.minio_use_ssl)

    def test_frontend_env_names_accepted(self):
        env = {
            "VITE_API_URL": "https://prod.example.test",
            "VITE_DEV_API_URL": "http://localhost:9999",
            "VITE_S3_FORCE_PATH_STYLE": "true",
        }
        with patch.dict(os.environ, env, clear=True):
            settings = Settings(_env_file=None)
        self.assertEqual(settings.api_url, "https://prod.example.test")
        self.assertEqual(settings.dev_api_url, "http://localhost:9999")
        self.assertTrue(settings.s3_force_path_style)

    def test_get_settings_is_cached(self):
        get_settings.cache_clear()
        try:
            self.assertIs(get_settings(), get_settings())
        finally:
            get_settings.cache_clear()


if __name__ == "__main__":
    unittest.main()
