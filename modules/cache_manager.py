# modules/cache_manager.py

import json
import logging
import pathlib
from typing import Any

from config import MODS_CACHE_FILE, NOTIFICATIONS_CACHE_FILE, SPOTREP_CACHE_FILE
from utils.time_utils import utc_now, to_iso

logger = logging.getLogger(__name__)


class JsonCacheStore:
    """One JSON file holding one whole collection. Writes always replace the file."""

    def __init__(self, path: str | pathlib.Path):
        self.path = pathlib.Path(path)

    def exists(self) -> bool:
        return self.path.is_file()

    def create_if_absent(self, initial_value: Any) -> bool:
        """Creates the file with `initial_value` unless it exists. Returns whether it already existed."""
        if self.exists():
            return True
        logger.info(f"📁 Creating cache file {self.path}")
        self.write(initial_value)
        return False

    def read(self) -> Any:
        try:
            return json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.error(f"❌ Error reading from cache {self.path}: {e}")
            raise

    def write(self, value: Any) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(value, indent=2), encoding="utf-8")
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"❌ Error writing to cache {self.path}: {e}")
            raise


def mods_cache() -> JsonCacheStore:
    return JsonCacheStore(MODS_CACHE_FILE)


def notifications_cache() -> JsonCacheStore:
    return JsonCacheStore(NOTIFICATIONS_CACHE_FILE)


def spotrep_cache() -> JsonCacheStore:
    return JsonCacheStore(SPOTREP_CACHE_FILE)


def create_caches(mods: JsonCacheStore, notifications: JsonCacheStore, spotrep: JsonCacheStore) -> None:
    """Makes sure all three cache files exist before they are read at startup."""
    mods.create_if_absent({})
    notifications.create_if_absent({})
    spotrep.create_if_absent({"lastUpdate": to_iso(utc_now())})
