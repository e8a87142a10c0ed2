"""Unit tests for settings loading and saving."""

import json
import logging
import unittest
import tempfile
import shutil
from pathlib import Path

from feedbackmark.settings import AnnotationSettings, SettingsStore, validate_setting


class TestSettingsStore(unittest.TestCase):

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.store = SettingsStore(config_dir=Path(self.temp_dir))

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def _write(self, content):
        with open(self.store.path, 'w', encoding='utf-8') as f:
            f.write(content)

    def test_missing_file_gives_defaults(self):
        self.assertEqual(self.store.load(), AnnotationSettings())

    def test_save_then_load(self):
        settings = AnnotationSettings(highlight_color="red", feedback_key="7")
        self.assertTrue(self.store.save(settings))
        self.assertEqual(self.store.load(), settings)
        # No temp file left behind
        self.assertFalse(self.store.path.with_suffix('.tmp').exists())

    def test_corrupted_file_gives_defaults(self):
        self._write("{not json")
        with self.assertLogs("feedbackmark.settings", level=logging.WARNING):
            settings = self.store.load()
        self.assertEqual(settings, AnnotationSettings())

    def test_non_dict_file_gives_defaults(self):
        self._write(json.dumps(["orange"]))
        with self.assertLogs("feedbackmark.settings", level=logging.WARNING):
            self.assertEqual(self.store.load(), AnnotationSettings())

    def test_invalid_values_are_ignored(self):
        self._write(json.dumps({
            "highlight_color": "",
            "plain_color": "white",
            "feedback_key": "12",
        }))
        with self.assertLogs("feedbackmark.settings", level=logging.WARNING):
            settings = self.store.load()
        self.assertEqual(settings.highlight_color, "orange")
        self.assertEqual(settings.plain_color, "white")
        self.assertEqual(settings.feedback_key, "1")

    def test_colliding_keys_fall_back_to_defaults(self):
        self._write(json.dumps({"feedback_key": "5", "correction_key": "5"}))
        with self.assertLogs("feedbackmark.settings", level=logging.WARNING):
            settings = self.store.load()
        self.assertEqual((settings.feedback_key, settings.correction_key), ("1", "2"))

    def test_unknown_keys_are_ignored(self):
        self._write(json.dumps({"zoom": 1.5}))
        self.assertEqual(self.store.load(), AnnotationSettings())

    def test_save_failure_returns_false(self):
        blocker = Path(self.temp_dir) / "file"
        blocker.write_text("x")
        store = SettingsStore(config_dir=blocker / "sub")
        with self.assertLogs("feedbackmark.settings", level=logging.WARNING):
            self.assertFalse(store.save(AnnotationSettings()))


def test_validate_setting():
    assert validate_setting("highlight_color", "orange")
    assert not validate_setting("highlight_color", 3)
    assert validate_setting("correction_key", "x")
    assert not validate_setting("correction_key", " ")
    assert not validate_setting("unknown", "x")
