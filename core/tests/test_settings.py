"""Tests for runtime settings helpers."""

import logging
import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from core.settings import (
    ConfigValidationError,
    load_settings_file,
    resolve_log_level,
    resolve_settings_path,
    resolve_strict_config_validation,
    string_list,
)


def write_settings(test_case, content):
    handle = tempfile.NamedTemporaryFile(mode="w", suffix=".yml", delete=False)
    handle.write(content)
    handle.close()
    test_case.addCleanup(Path(handle.name).unlink, missing_ok=True)
    return handle.name


class TestLoadSettingsFile(unittest.TestCase):
    """Test the strict/non-strict settings file reader."""

    def test_mapping_returned(self):
        """Test that a YAML mapping is returned as a dict."""
        path = write_settings(self, "spawner_pattern: x\n")
        self.assertEqual(load_settings_file(path, strict=True), {"spawner_pattern": "x"})

    def test_non_strict_missing_returns_empty(self):
        """Test that a missing file gives an empty mapping and a warning."""
        with self.assertLogs("core.settings", level="WARNING"):
            self.assertEqual(load_settings_file("/definitely/missing.yml"), {})

    def test_strict_missing_raises(self):
        """Test that a missing file raises in strict mode."""
        with self.assertRaises(ConfigValidationError):
            load_settings_file("/definitely/missing.yml", strict=True)

    def test_strict_invalid_yaml_raises(self):
        """Test that unparsable YAML raises in strict mode."""
        path = write_settings(self, "extra_properties: [unclosed\n")
        with self.assertRaises(ConfigValidationError):
            load_settings_file(path, strict=True)

    def test_strict_non_mapping_payload_raises(self):
        """Test that a top-level list is rejected in strict mode."""
        path = write_settings(self, "- Radius\n")
        with self.assertRaises(ConfigValidationError):
            load_settings_file(path, strict=True)

    def test_non_strict_empty_file(self):
        """Test that an empty file gives an empty mapping."""
        path = write_settings(self, "")
        with self.assertLogs("core.settings", level="WARNING"):
            self.assertEqual(load_settings_file(path), {})


class TestStringList(unittest.TestCase):
    """Test list-of-strings settings entries."""

    def test_values_stripped(self):
        """Test that entries are stripped."""
        self.assertEqual(string_list({"k": [" a ", "b"]}, "k", strict=True), ["a", "b"])

    def test_absent_key(self):
        """Test that an absent key gives None."""
        self.assertIsNone(string_list({}, "k", strict=True))

    def test_invalid_entry(self):
        """Test that a scalar or empty entry is rejected."""
        with self.assertRaises(ConfigValidationError):
            string_list({"k": "a"}, "k", strict=True)
        with self.assertLogs("core.settings", level="WARNING"):
            self.assertIsNone(string_list({"k": ["a", " "]}, "k", strict=False))


class TestEnvironmentResolution(unittest.TestCase):
    """Test environment-driven settings."""

    def test_strict_flag(self):
        """Test truthy and falsy strict flag values."""
        with mock.patch.dict(os.environ, {"STRICT_CONFIG_VALIDATION": "yes"}):
            self.assertTrue(resolve_strict_config_validation())
        with mock.patch.dict(os.environ, {"STRICT_CONFIG_VALIDATION": "0"}):
            self.assertFalse(resolve_strict_config_validation(default=True))

    def test_log_level(self):
        """Test level names, numbers and unknown values."""
        with mock.patch.dict(os.environ, {"ASSET_EXTRACT_LOG_LEVEL": "debug"}):
            self.assertEqual(resolve_log_level(), logging.DEBUG)
        with mock.patch.dict(os.environ, {"ASSET_EXTRACT_LOG_LEVEL": "30"}):
            self.assertEqual(resolve_log_level(), logging.WARNING)
        with mock.patch.dict(os.environ, {"ASSET_EXTRACT_LOG_LEVEL": "chatty"}):
            self.assertEqual(resolve_log_level(default=logging.ERROR), logging.ERROR)

    def test_settings_path(self):
        """Test that the settings path is stripped and blank means unset."""
        with mock.patch.dict(os.environ, {"ASSET_EXTRACT_CONFIG": " graph.yml "}):
            self.assertEqual(resolve_settings_path(), "graph.yml")
        with mock.patch.dict(os.environ, {"ASSET_EXTRACT_CONFIG": ""}):
            self.assertIsNone(resolve_settings_path())


if __name__ == "__main__":
    unittest.main()
