"""Local cache: synchronous key-value persistence of planner pages in one JSON file.

Entries are keyed ``"{page}:{date}"`` and hold the JSON-encoded record for that
page and date. The cache is the authoritative copy: reads never raise and
writes either land on disk or are dropped with a log line.
"""
import json
import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from planner.infra.paths import LOCAL_CACHE_FILE
from planner.utilities.config import LOCAL_CACHE_QUOTA_BYTES

logger = logging.getLogger(__name__)


def make_key(page: str, date_key: str) -> str:
    return f"{page}:{date_key}"


def split_key(key: str) -> Tuple[str, str]:
    page, _, date_key = key.partition(":")
    return page, date_key


class LocalCache:
    def __init__(self, path: Path = LOCAL_CACHE_FILE, quota_bytes: int = LOCAL_CACHE_QUOTA_BYTES):
        self.path = Path(path)
        self.quota_bytes = quota_bytes

    # --- file helpers -----------------------------------------------------
    def _load_store(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                store = json.load(f)
        except json.JSONDecodeError as e:
            logger.error(f"Invalid JSON in local cache {self.path}: {e}")
            return {}
        except OSError as e:
            logger.error(f"Error reading local cache {self.path}: {e}")
            return {}
        return store if isinstance(store, dict) else {}

    def _atomic_write(self, encoded: str):
        os.makedirs(self.path.parent, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=".cache_", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as tmp:
                tmp.write(encoded)
            shutil.move(tmp_path, self.path)
        finally:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)

    # --- public API -------------------------------------------------------
    def read(self, page: str, date_key: str) -> Optional[Dict[str, Any]]:
        '''
        Returns the stored record for (page, date) or None.
        The record is returned as decoded; shape normalization is up to the caller.
        '''
        return self._load_store().get(make_key(page, date_key))

    def write(self, page: str, date_key: str, value: Any) -> bool:
        '''
        Stores the record for (page, date). Objects exposing to_dict() are
        converted first. Returns False when the write was dropped (quota
        exceeded, value not serializable, or disk error); never raises.
        '''
        record = value.to_dict() if hasattr(value, "to_dict") else value
        store = self._load_store()
        store[make_key(page, date_key)] = record
        try:
            encoded = json.dumps(store, ensure_ascii=False, indent=2)
        except (TypeError, ValueError) as e:
            logger.error(f"Local cache write dropped for {make_key(page, date_key)}: not serializable ({e})")
            return False
        size = len(encoded.encode("utf-8"))
        if size > self.quota_bytes:
            logger.warning(f"Local cache quota exceeded ({size} > {self.quota_bytes} bytes); "
                           f"write dropped for {make_key(page, date_key)}")
            return False
        try:
            self._atomic_write(encoded)
        except OSError as e:
            logger.error(f"Local cache write failed for {make_key(page, date_key)}: {e}")
            return False
        return True

    def entries(self, page: Optional[str] = None) -> List[Tuple[str, str, Any]]:
        """List cached (page, date, record) triples, optionally for one page, in key order."""
        result = []
        for key, record in sorted(self._load_store().items()):
            entry_page, date_key = split_key(key)
            if not date_key:
                continue
            if page is None or entry_page == page:
                result.append((entry_page, date_key, record))
        return result

    def size_bytes(self) -> int:
        try:
            return self.path.stat().st_size
        except OSError:
            return 0
