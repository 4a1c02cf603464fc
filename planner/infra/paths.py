from pathlib import Path

from planner.utilities.config import DATA_DIR as _CONFIG_DATA_DIR, LOCAL_CACHE_FILE as _CONFIG_CACHE_FILE

# Centralized paths for data files (single source of truth)
DATA_DIR = Path(_CONFIG_DATA_DIR).resolve()
LOCAL_CACHE_FILE = Path(_CONFIG_CACHE_FILE).resolve()

__all__ = ['DATA_DIR', 'LOCAL_CACHE_FILE']
