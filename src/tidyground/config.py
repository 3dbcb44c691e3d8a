"""Configuration management.

Settings are read from environment variables, falling back
to the defaults below. Explicit overrides can be provided
as a dictionary, which takes precedence over the environment::

    settings = get_settings({"display_rows": 5})

* ``TIDYGROUND_LOG_LEVEL`` (``WARNING``): level used by the commands to set up logging.
* ``TIDYGROUND_DISPLAY_ROWS`` (``20``): rows shown when printing a dataframe.
* ``TIDYGROUND_MISSING_SENTINELS`` (``-999,-999.0,-999.00``): values meaning
  "missing" in raw datasets.
* ``TIDYGROUND_BLOCK_SIZE`` (unset): bytes read at once from CSV files.
"""

import os
from typing import Any


class Settings:
    """Configuration of the library and of its commands."""

    def __init__(self, overrides: dict[str, Any] | None = None) -> None:
        """
        :param overrides: Values taking precedence over the environment,
                          keys are the lowercase setting names.
        """
        self.log_level = os.getenv("TIDYGROUND_LOG_LEVEL", "WARNING")
        self.display_rows = int(os.getenv("TIDYGROUND_DISPLAY_ROWS", "20"))
        self.missing_sentinels = [
            value.strip()
            for value in os.getenv(
                "TIDYGROUND_MISSING_SENTINELS", "-999,-999.0,-999.00"
            ).split(",")
            if value.strip()
        ]
        block_size = os.getenv("TIDYGROUND_BLOCK_SIZE")
        self.block_size = int(block_size) if block_size else None

        if overrides:
            self._update_from_dict(overrides)

    def _update_from_dict(self, overrides: dict[str, Any]) -> None:
        for key, value in overrides.items():
            if not hasattr(self, key):
                raise ValueError(f"Unknown setting: {key}")
            setattr(self, key, value)

    def to_dict(self) -> dict[str, Any]:
        return {
            "log_level": self.log_level,
            "display_rows": self.display_rows,
            "missing_sentinels": list(self.missing_sentinels),
            "block_size": self.block_size,
        }

    def __repr__(self) -> str:
        return f"Settings({self.to_dict()})"


def get_settings(overrides: dict[str, Any] | None = None) -> Settings:
    """Build the settings from the current environment."""
    return Settings(overrides)
