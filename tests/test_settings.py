import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
import unittest
from unittest.mock import patch

from errors import ValidationError
from models import ViewFlavor
from settings import (
    DEFAULT_LIBRARY_PATH,
    LibrarySettings,
    ViewConfig,
    load_settings,
    resolve_flavor,
)


class TestViewConfig(unittest.TestCase):
    def test_defaults(self):
        config = ViewConfig()
        self.assertEqual(config.flavor, ViewFlavor.INTERACTIVE)
        self.assertEqual(config.virtualization_threshold, 50)
        self.assertEqual(config.item_height, 180)
        self.assertEqual(config.buffer_size, 5)
        self.assertEqual(config.empty_placeholder, "No saved tweets yet")

    def test_mode_strings(self):
        self.assertEqual(ViewConfig(flavor="readonly").flavor, ViewFlavor.READ_ONLY)
        self.assertEqual(resolve_flavor("full"), ViewFlavor.INTERACTIVE)
        self.assertEqual(resolve_flavor(None), ViewFlavor.INTERACTIVE)
        with self.assertRaises(ValidationError):
            resolve_flavor("mobile")

    def test_rejects_bad_geometry(self):
        with self.assertRaises(ValidationError):
            ViewConfig(item_height=0)
        with self.assertRaises(ValidationError):
            ViewConfig(buffer_size=-1)
        with self.assertRaises(ValidationError):
            ViewConfig(viewport_height=0)
        with self.assertRaises(ValidationError):
            ViewConfig(virtualization_threshold=-5)

    def test_library_settings_default_view(self):
        settings = LibrarySettings()
        self.assertEqual(settings.library_path, DEFAULT_LIBRARY_PATH)
        self.assertIsInstance(settings.view, ViewConfig)


class TestLoadSettings(unittest.TestCase):
    @patch("settings.load_dotenv")
    @patch.dict(
        os.environ,
        {
            "TWEET_LIBRARY_MODE": "readonly",
            "TWEET_LIBRARY_VIRTUAL_THRESHOLD": "10",
            "TWEET_LIBRARY_ITEM_HEIGHT": "120",
            "TWEET_LIBRARY_PATH": "/tmp/tweets.json",
            "TWEET_LIBRARY_MIRROR_URL": "https://example.com/tweets.json",
        },
        clear=True,
    )
    def test_reads_environment(self, mock_load_dotenv):
        settings = load_settings()
        mock_load_dotenv.assert_called_once()
        self.assertEqual(settings.view.flavor, ViewFlavor.READ_ONLY)
        self.assertEqual(settings.view.virtualization_threshold, 10)
        self.assertEqual(settings.view.item_height, 120)
        self.assertEqual(settings.view.buffer_size, 5)
        self.assertEqual(settings.library_path, "/tmp/tweets.json")
        self.assertEqual(settings.mirror_url, "https://example.com/tweets.json")

    @patch("settings.load_dotenv")
    @patch.dict(os.environ, {}, clear=True)
    def test_defaults_without_environment(self, mock_load_dotenv):
        settings = load_settings()
        self.assertEqual(settings.library_path, DEFAULT_LIBRARY_PATH)
        self.assertIsNone(settings.mirror_url)
        self.assertEqual(settings.view.flavor, ViewFlavor.INTERACTIVE)

    @patch("settings.load_dotenv")
    @patch.dict(os.environ, {"TWEET_LIBRARY_ITEM_HEIGHT": "tall"}, clear=True)
    def test_bad_integer(self, mock_load_dotenv):
        with self.assertRaises(ValidationError):
            load_settings()


if __name__ == "__main__":
    unittest.main()
