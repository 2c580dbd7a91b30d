#!/usr/bin/env python3

"""Unit tests for the config module."""

import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from gitshare.config import (
    DEFAULT_CONFIG,
    get_config_path,
    get_logger_path,
    get_logger_verbosity,
    load_config,
)


class ConfigTest(unittest.TestCase):
    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.addCleanup(self.temp_dir.cleanup)
        self.env_patch = patch.dict(
            os.environ, {"GITSHARE_CONFIG_DIR": self.temp_dir.name}
        )
        self.env_patch.start()
        self.addCleanup(self.env_patch.stop)

    def write_config(self, content: str) -> Path:
        path = Path(self.temp_dir.name) / "gitsharerc"
        path.write_text(content)
        return path

    def test_config_dir_takes_precedence(self):
        path = self.write_config("")
        self.assertEqual(get_config_path(), path)

    def test_xdg_config_home(self):
        xdg_dir = Path(self.temp_dir.name) / "xdg"
        (xdg_dir / "gitshare").mkdir(parents=True)
        rc = xdg_dir / "gitshare" / "gitsharerc"
        rc.write_text("")
        with patch.dict(os.environ, {"XDG_CONFIG_HOME": str(xdg_dir)}):
            # No gitsharerc in GITSHARE_CONFIG_DIR, so XDG wins
            self.assertEqual(get_config_path(), rc)

    def test_defaults_without_file(self):
        with patch.dict(os.environ, {"XDG_CONFIG_HOME": self.temp_dir.name}), patch(
            "gitshare.config.Path.home", return_value=Path(self.temp_dir.name)
        ):
            self.assertEqual(load_config(), DEFAULT_CONFIG)

    def test_user_values_merge_with_defaults(self):
        self.write_config('[logger]\nverbosity = "DEBUG"\n')
        self.assertEqual(get_logger_verbosity(), "DEBUG")
        self.assertEqual(get_logger_path(), DEFAULT_CONFIG["logger"]["path"])

    def test_merge_does_not_mutate_defaults(self):
        self.write_config('[logger]\nverbosity = "ERROR"\n')
        load_config()
        self.assertEqual(DEFAULT_CONFIG["logger"]["verbosity"], "INFO")

    def test_logger_path_expands_tilde(self):
        self.write_config('[logger]\npath = "~/share-logs"\n')
        self.assertEqual(
            get_logger_path(), os.path.join(os.path.expanduser("~"), "share-logs")
        )

    def test_invalid_toml_falls_back_to_defaults(self):
        self.write_config("[logger\nverbosity = ")
        with self.assertLogs(level="WARNING"):
            config = load_config()
        self.assertEqual(config, DEFAULT_CONFIG)


if __name__ == "__main__":
    unittest.main()
