import logging
import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from fshell.config import Config


class TestConfig(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.root = os.path.abspath(self._tmp.name)

    def tearDown(self):
        self._tmp.cleanup()

    def test_defaults(self):
        with mock.patch.dict(os.environ, {}, clear=True):
            config = Config.from_env()
        self.assertEqual(config.start_directory, Path(os.getcwd()))
        self.assertEqual(config.log_level, "WARNING")
        self.assertEqual(config.logging_level, logging.WARNING)
        self.assertTrue(config.history_file.endswith(".fshell_history"))

    def test_environment(self):
        env = {
            "FSHELL_START_DIR": self.root,
            "FSHELL_HOME": "/home/someone",
            "FSHELL_HISTFILE": "/tmp/hist",
            "FSHELL_LOG_LEVEL": "debug",
        }
        with mock.patch.dict(os.environ, env, clear=True):
            config = Config.from_env()
        self.assertEqual(config.start_directory, Path(self.root))
        self.assertEqual(config.home_directory, Path("/home/someone"))
        self.assertEqual(config.history_file, "/tmp/hist")
        self.assertEqual(config.logging_level, logging.DEBUG)

    def test_missing_start_directory_falls_back_to_cwd(self):
        missing = os.path.join(self.root, "nope")
        with mock.patch.dict(os.environ, {"FSHELL_START_DIR": missing}, clear=True):
            with self.assertLogs("fshell.config", level="WARNING") as logs:
                config = Config.from_env()
        self.assertEqual(config.start_directory, Path(os.getcwd()))
        self.assertIn(missing, logs.output[0])

    def test_start_directory_must_be_a_directory(self):
        plain = os.path.join(self.root, "plain.txt")
        with open(plain, "w"):
            pass
        with mock.patch.dict(os.environ, {"FSHELL_START_DIR": plain}, clear=True):
            with self.assertLogs("fshell.config", level="WARNING"):
                config = Config.from_env()
        self.assertEqual(config.start_directory, Path(os.getcwd()))

    def test_invalid_log_level_falls_back(self):
        with mock.patch.dict(os.environ, {"FSHELL_LOG_LEVEL": "chatty"}, clear=True):
            self.assertEqual(Config.from_env().log_level, "WARNING")

    def test_args_override_environment(self):
        with mock.patch.dict(os.environ, {"FSHELL_START_DIR": self.root}, clear=True):
            config = Config.from_args(start_directory="/opt", log_level="error")
        self.assertEqual(config.start_directory, Path("/opt"))
        self.assertEqual(config.log_level, "ERROR")

    def test_relative_start_directory_is_made_absolute(self):
        with mock.patch.dict(os.environ, {}, clear=True):
            config = Config.from_args(start_directory="some/dir")
        self.assertEqual(config.start_directory, Path(os.getcwd()) / "some" / "dir")


if __name__ == '__main__':
    unittest.main()
