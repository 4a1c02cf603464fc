"""Configuration management for the Daily Planner application."""
import os
from typing import Final
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR: Final[Path] = Path(__file__).parent.parent
_env_path = BASE_DIR / '.env'
if _env_path.exists():
    load_dotenv(_env_path)

# Application Settings
APP_HOST: Final[str] = os.getenv('APP_HOST', '0.0.0.0')
APP_PORT: Final[int] = int(os.getenv('APP_PORT', '8000'))
DEBUG: Final[bool] = os.getenv('DEBUG', 'False').lower() == 'true'

# Local cache
DATA_DIR: Final[Path] = Path(os.getenv('PLANNER_DATA_DIR', str(BASE_DIR / 'data')))
LOCAL_CACHE_FILE: Final[Path] = Path(os.getenv('PLANNER_CACHE_FILE', str(DATA_DIR / 'local_cache.json')))
# Same order of magnitude as a browser's localStorage quota
LOCAL_CACHE_QUOTA_BYTES: Final[int] = int(os.getenv('PLANNER_CACHE_QUOTA_BYTES', str(5 * 1024 * 1024)))

# Debounced persistence
SAVE_DEBOUNCE_SECONDS: Final[float] = float(os.getenv('PLANNER_SAVE_DEBOUNCE_SECONDS', '0.3'))

# Remote document store (empty base URL means local-only mode)
REMOTE_BASE_URL: Final[str] = os.getenv('PLANNER_REMOTE_URL', '')
REMOTE_PROJECT_ID: Final[str] = os.getenv('PLANNER_REMOTE_PROJECT', 'daily-planner')
REMOTE_API_KEY: Final[str] = os.getenv('PLANNER_REMOTE_API_KEY', '')
REMOTE_TIMEOUT_SECONDS: Final[float] = float(os.getenv('PLANNER_REMOTE_TIMEOUT', '5'))
