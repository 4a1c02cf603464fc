from typing import Optional

from fastapi import APIRouter, Depends, Query

from planner.api.dependencies import get_remote_store, get_session
from planner.domain.UserInfo import UserInfo
from planner.events.web_observers import get_events
from planner.infra.Remote_Store import RemoteStore
from planner.infra.Sync_Coordinator import RemoteSession
from planner.logic.session import PlannerSession
from planner.utilities.config import REMOTE_PROJECT_ID
from planner.utilities.validators import SessionInput

router = APIRouter(prefix="/api", tags=["session"])


def _describe(session: PlannerSession):
    return {
        "mode": session.mode,
        "user": session.user.to_dict() if session.user else None,
        "date": session.date_key,
    }


@router.get("/session")
async def get_current_session(session: PlannerSession = Depends(get_session)):
    return _describe(session)


@router.post("/session")
async def sign_in(payload: SessionInput, session: PlannerSession = Depends(get_session),
                  store: Optional[RemoteStore] = Depends(get_remote_store)):
    """Sign in: cache the user record and, with a remote backend, push local data to it."""
    if session.coordinator.remote_active:
        await session.sign_out()
    remote = RemoteSession(store, payload.uid, REMOTE_PROJECT_ID) if store is not None else None
    user = UserInfo(payload.uid, email=payload.email, display_name=payload.display_name,
                    provider=payload.provider)
    report = await session.sign_in(remote, user)
    return dict(_describe(session), sync=report.to_dict())


@router.delete("/session")
async def sign_out(session: PlannerSession = Depends(get_session)):
    await session.sign_out()
    return _describe(session)


@router.get("/sync/events")
def sync_events(since: Optional[int] = Query(default=None)):
    """Recent persistence events for a sync-status indicator (poll with since=next_cursor)."""
    return get_events(since)
