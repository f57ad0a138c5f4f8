"""Option stores holding one bundle of values per option name."""

from __future__ import annotations

import copy
import threading
from typing import Any, Dict, Optional

from .config import SETTINGS_FILE_VERSION
from .logger import logger
from .utils import read_json, write_json


class OptionStore:
    """Persistence interface: bundles are always read and written whole."""

    def get(self, option_name: str, default: Any = None) -> Any:
        raise NotImplementedError

    def set(self, option_name: str, bundle: Dict[str, Any]) -> None:
        raise NotImplementedError


class MemoryOptionStore(OptionStore):
    def __init__(self, initial: Optional[Dict[str, Any]] = None) -> None:
        self._lock = threading.Lock()
        self._values: Dict[str, Any] = copy.deepcopy(dict(initial or {}))

    def get(self, option_name: str, default: Any = None) -> Any:
        with self._lock:
            if option_name not in self._values:
                return copy.deepcopy(default)
            return copy.deepcopy(self._values[option_name])

    def set(self, option_name: str, bundle: Dict[str, Any]) -> None:
        with self._lock:
            self._values[option_name] = copy.deepcopy(bundle)


class JsonFileOptionStore(OptionStore):
    """Keeps every option in a single versioned JSON document.

    The file looks like ``{"version": 1, "options": {"<option name>": {...}}}``.
    It is read once and cached; ``reload()`` drops the cache.
    """

    def __init__(self, path: str) -> None:
        self.path = path
        self._lock = threading.Lock()
        self._cache: Optional[Dict[str, Any]] = None

    def _load_locked(self) -> Dict[str, Any]:
        if self._cache is not None:
            return self._cache

        raw_data = read_json(self.path)
        version = raw_data.get("version", 0)
        options = raw_data.get("options")
        if not isinstance(options, dict):
            options = {}
        if raw_data and version != SETTINGS_FILE_VERSION:
            logger.info(
                f"SettingsHelper: settings file {self.path} has version {version}, "
                f"expected {SETTINGS_FILE_VERSION}; it will be rewritten on next save"
            )
        self._cache = options
        return options

    def _persist_locked(self, options: Dict[str, Any]) -> None:
        write_json(self.path, {"version": SETTINGS_FILE_VERSION, "options": options})
        self._cache = options

    def get(self, option_name: str, default: Any = None) -> Any:
        with self._lock:
            options = self._load_locked()
            if option_name not in options:
                return copy.deepcopy(default)
            return copy.deepcopy(options[option_name])

    def set(self, option_name: str, bundle: Dict[str, Any]) -> None:
        with self._lock:
            options = dict(self._load_locked())
            options[option_name] = copy.deepcopy(bundle)
            self._persist_locked(options)

    def reload(self) -> None:
        with self._lock:
            self._cache = None


__all__ = ["JsonFileOptionStore", "MemoryOptionStore", "OptionStore"]
