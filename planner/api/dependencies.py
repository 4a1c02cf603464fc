"""Shared FastAPI dependencies: the process-wide PlannerSession and remote factory."""
import logging
from datetime import date
from typing import Optional

from fastapi import HTTPException

from planner.infra.Local_Cache import LocalCache
from planner.infra.Remote_Store import HttpRemoteStore, RemoteStore
from planner.infra.Sync_Coordinator import SyncCoordinator
from planner.logic.session import PlannerSession, parse_date_key
from planner.utilities.config import REMOTE_BASE_URL

logger = logging.getLogger(__name__)

_session: Optional[PlannerSession] = None


def build_session() -> PlannerSession:
    """Local-only session over the configured cache file."""
    return PlannerSession(SyncCoordinator(LocalCache()))


def get_session() -> PlannerSession:
    global _session
    if _session is None:
        _session = build_session()
    return _session


def get_remote_store() -> Optional[RemoteStore]:
    """Remote backend handle, or None when no remote URL is configured (local-only mode)."""
    if not REMOTE_BASE_URL:
        return None
    logger.debug(f"Using remote store at {REMOTE_BASE_URL}")
    return HttpRemoteStore(REMOTE_BASE_URL)


def checked_date(date_key: str) -> date:
    try:
        return parse_date_key(date_key)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


async def open_date(session: PlannerSession, date_key: str) -> PlannerSession:
    """Validate the date and make it the session's active date."""
    checked_date(date_key)
    await session.ensure(date_key)
    return session
