"""Configuration management for fshell"""

import logging
import os
from pathlib import Path
from typing import Optional


logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


class Config:
    """Configuration for an fshell session"""

    def __init__(self):
        # Directory the working-directory cursor starts in
        self.start_directory = self._start_directory_from_env()
        # Target of a bare `cd`
        self.home_directory = Path(os.path.abspath(os.getenv('FSHELL_HOME') or Path.home()))
        # prompt_toolkit history file
        self.history_file = os.path.expanduser(
            os.getenv('FSHELL_HISTFILE', '~/.fshell_history')
        )
        self.log_level = os.getenv('FSHELL_LOG_LEVEL', 'WARNING').upper()
        if self.log_level not in LOG_LEVELS:
            self.log_level = 'WARNING'

    @staticmethod
    def _start_directory_from_env() -> Path:
        """FSHELL_START_DIR if it names a directory, else the process working directory"""
        start_dir = os.getenv('FSHELL_START_DIR')
        if start_dir:
            if os.path.isdir(start_dir):
                return Path(os.path.abspath(start_dir))
            logger.warning("FSHELL_START_DIR is not a directory, ignoring: %s", start_dir)
        return Path(os.getcwd())

    @classmethod
    def from_env(cls):
        """Create configuration from environment variables"""
        return cls()

    @classmethod
    def from_args(
        cls,
        start_directory: Optional[str] = None,
        home_directory: Optional[str] = None,
        history_file: Optional[str] = None,
        log_level: Optional[str] = None,
    ):
        """Create configuration from command line arguments"""
        config = cls()
        if start_directory:
            config.start_directory = Path(start_directory)
        if home_directory:
            config.home_directory = Path(home_directory)
        if history_file:
            config.history_file = os.path.expanduser(history_file)
        if log_level:
            config.log_level = log_level.upper()
        # The cursor is always absolute
        config.start_directory = Path(os.path.abspath(config.start_directory))
        config.home_directory = Path(os.path.abspath(config.home_directory))
        return config

    @property
    def logging_level(self) -> int:
        return getattr(logging, self.log_level, logging.WARNING)

    def __repr__(self):
        return (
            f"Config(start_directory={self.start_directory}, "
            f"home_directory={self.home_directory}, "
            f"history_file={self.history_file}, log_level={self.log_level})"
        )
