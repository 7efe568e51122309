import os
import unittest
from unittest.mock import patch
from pydantic_settings import SettingsConfigDict
from config.settings import Settings


class IsolatedSettings(Settings):
    model_config = SettingsConfigDict(
        env_file=None,  # Don't load any .env files
        extra='ignore',
        case_sensitive=False
    )


class TestSettingsValidation(unittest.TestCase):
    def test_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            settings = IsolatedSettings()
            self.assertIsNone(settings.get_motherduck_token())
            self.assertEqual(settings.DEFAULT_DATABASE, ":memory:")
            self.assertTrue(settings.LOG_JSON)
            self.assertIsNone(settings.LOG_LEVEL)

    @patch.dict(os.environ, {'MOTHERDUCK_TOKEN': 'tok123', 'LOG_JSON': 'false'}, clear=True)
    def test_token_from_env(self):
        settings = IsolatedSettings()
        self.assertEqual(settings.get_motherduck_token().get_secret_value(), 'tok123')
        self.assertNotIn('tok123', repr(settings))
        self.assertFalse(settings.LOG_JSON)

    @patch.dict(os.environ, {'MOTHERDUCK_TOKEN': ''}, clear=True)
    def test_empty_token_is_unset(self):
        settings = IsolatedSettings()
        self.assertIsNone(settings.get_motherduck_token())

if __name__ == '__main__':
    unittest.main()
