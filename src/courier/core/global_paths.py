"""Per-user directories for courier config and log files."""

import os
from pathlib import Path

from platformdirs import user_config_dir, user_data_dir

APP_NAME = "courier"


class GlobalPath:
    """Resolves platform-specific application directories.

    ``COURIER_HOME`` relocates everything under one directory, which keeps
    tests and sandboxed runs away from the real user profile.
    """

    @classmethod
    def _override(cls) -> Path | None:
        home = os.environ.get("COURIER_HOME")
        return Path(home) if home else None

    @classmethod
    def config(cls) -> str:
        """Configuration directory."""
        root = cls._override()
        return str(root / "config") if root else user_config_dir(APP_NAME)

    @classmethod
    def data(cls) -> str:
        """Application data directory."""
        root = cls._override()
        return str(root / "data") if root else user_data_dir(APP_NAME)

    @classmethod
    def log(cls) -> str:
        """Log file directory."""
        return str(Path(cls.data()) / "log")
