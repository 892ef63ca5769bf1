"""
Local key-value cache for the last script and result

A single JSON object on disk; missing or unreadable files read as an empty cache.
"""

import json
from pathlib import Path
from typing import Dict, Optional, Union

import structlog

from config import config

logger = structlog.get_logger(__name__)

SCRIPT_KEY = "yco_script_en"
RESULT_KEY = "yco_result_en"


class StorageError(Exception):
    """Custom exception for cache write failures"""
    pass


class LocalCache:
    """JSON-file-backed string store"""

    def __init__(self, path: Optional[Union[str, Path]] = None):
        self.path = Path(path) if path else Path(config.storage.cache_path).expanduser()

    def _load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("Cache file unreadable, starting empty",
                           filepath=str(self.path),
                           error=str(e))
            return {}
        if not isinstance(raw, dict):
            logger.warning("Cache file has unexpected shape, starting empty",
                           filepath=str(self.path))
            return {}
        return {k: v for k, v in raw.items() if isinstance(v, str)}

    def _save(self, data: Dict[str, str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
        except OSError as e:
            logger.error("Failed to write cache file", filepath=str(self.path), error=str(e))
            raise StorageError(f"Failed to write cache {self.path}: {e}")

    def get(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._save(data)

    def remove(self, key: str) -> None:
        data = self._load()
        if key in data:
            del data[key]
            self._save(data)

    def clear(self) -> None:
        """Drop the cached script and result"""
        data = self._load()
        for key in (SCRIPT_KEY, RESULT_KEY):
            data.pop(key, None)
        self._save(data)
        logger.info("Cache cleared", filepath=str(self.path))

    # Host-application conventions for the two fixed keys

    def load_script(self) -> str:
        return self.get(SCRIPT_KEY) or ""

    def save_script(self, script: str) -> None:
        self.set(SCRIPT_KEY, script)

    def load_result(self) -> Optional[str]:
        return self.get(RESULT_KEY) or None

    def save_result(self, result: Optional[str]) -> None:
        # Empty results never overwrite the last good one
        if result:
            self.set(RESULT_KEY, result)
