"""Display preferences persisted next to the task list.

Only the color scheme is stored. It lives under its own key and is
independent of the task data.
"""

import logging
from typing import Optional

from .config import COLOR_SCHEMES
from .storage import KeyValueStore

logger = logging.getLogger(__name__)


class ColorSchemePreference:
    """Light/dark color scheme stored in a key-value store."""

    def __init__(self, store: KeyValueStore, key: str = "color-scheme", default: str = "light"):
        if default not in COLOR_SCHEMES:
            raise ValueError(f"Unknown color scheme {default!r}")
        self.store = store
        self.key = key
        self.default = default

    def get(self) -> str:
        value = self.store.get(self.key)
        if value is None:
            return self.default
        if value not in COLOR_SCHEMES:
            logger.warning(f"Unknown stored color scheme {value!r}, using {self.default!r}")
            return self.default
        return value

    def set(self, value: str) -> str:
        if value not in COLOR_SCHEMES:
            raise ValueError(f"Unknown color scheme {value!r} (expected light or dark)")
        self.store.set(self.key, value)
        return value

    def toggle(self, value: Optional[str] = None) -> str:
        """Switch to ``value`` if given, otherwise flip between light and dark."""
        if value is None:
            value = "light" if self.get() == "dark" else "dark"
        return self.set(value)
