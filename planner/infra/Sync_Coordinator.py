"""Sync coordinator: local-first persistence with a best-effort remote mirror.

Load: remote first when a remote session is active, local cache otherwise or
on any remote miss/failure, empty plan when neither has the date. The result
always goes through normalization.

Save: local cache first (synchronously, before any await), then the remote
store when a session is active. Remote failures never undo the local write;
they are reported through the returned SaveResult and a plan.sync_failed event.

Bulk sync: after sign-in every cached (page, date) entry is pushed to the
remote store and overwrites whatever is there (last local write wins).
"""
from __future__ import annotations
import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from planner.domain.PlanState import PlanState
from planner.domain.UserInfo import UserInfo
from planner.events.Event_Bus import EventBus, GLOBAL_EVENT_BUS
from planner.events.event_helpers import (
    publish_bulk_sync,
    publish_plan_cleared,
    publish_plan_saved,
    publish_sync_failed,
)
from planner.infra.Local_Cache import LocalCache, make_key
from planner.infra.Remote_Store import RemoteRejectedError, RemoteStore
from planner.logic.normalize import normalize
from planner.utilities.constants import DEFAULT_PAGE, REMOTE_METADATA_KEYS, USER_INFO_KEY, USER_INFO_PAGE

logger = logging.getLogger(__name__)


class SaveResult(str, Enum):
    OK = "ok"
    LOCAL_ONLY = "local_only"
    REMOTE_UNAVAILABLE = "remote_unavailable"
    REMOTE_REJECTED = "remote_rejected"


class RemoteSession:
    """A signed-in user bound to a remote store."""

    def __init__(self, store: RemoteStore, user_id: str, project_id: str):
        self.store = store
        self.user_id = user_id
        self.project_id = project_id

    def __repr__(self) -> str:
        return f"RemoteSession(user={self.user_id!r}, project={self.project_id!r})"


class BulkSyncReport:
    def __init__(self):
        self.pushed: List[str] = []
        self.failed: List[str] = []

    def to_dict(self):
        return {"pushed": len(self.pushed), "failed": len(self.failed), "failed_keys": list(self.failed)}


def _classify(error: Exception) -> SaveResult:
    if isinstance(error, RemoteRejectedError):
        return SaveResult.REMOTE_REJECTED
    return SaveResult.REMOTE_UNAVAILABLE


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class SyncCoordinator:
    def __init__(self, cache: LocalCache, remote: Optional[RemoteSession] = None,
                 event_bus: Optional[EventBus] = None):
        self.cache = cache
        self.remote = remote
        self._event_bus = event_bus if event_bus is not None else GLOBAL_EVENT_BUS

    # --- remote session ---------------------------------------------------
    @property
    def remote_active(self) -> bool:
        return self.remote is not None

    def attach_remote(self, remote: RemoteSession):
        self.remote = remote
        logger.info(f"Remote session attached: {remote}")
        return self

    def detach_remote(self) -> Optional[RemoteSession]:
        remote, self.remote = self.remote, None
        if remote is not None:
            logger.info(f"Remote session detached: {remote}")
        return remote

    def _remote_payload(self, page: str, record: Dict[str, Any], **extra) -> Dict[str, Any]:
        payload = dict(record)
        payload.update({
            "lastUpdated": _now_iso(),
            "userId": self.remote.user_id,
            "projectId": self.remote.project_id,
            "page": page,
        })
        payload.update(extra)
        return payload

    # --- raw records ------------------------------------------------------
    async def load_record(self, page: str, date_key: str) -> Optional[Dict[str, Any]]:
        """Fetch the raw record for (page, date): remote first, then local."""
        remote = self.remote
        if remote is not None:
            try:
                data = await remote.store.read(remote.user_id, remote.project_id, page, date_key)
            except Exception as e:
                logger.warning(f"Remote read failed for {make_key(page, date_key)}, using local cache: {e}")
            else:
                if data is not None:
                    logger.debug(f"Loaded {make_key(page, date_key)} from remote store")
                    return {k: v for k, v in data.items() if k not in REMOTE_METADATA_KEYS}
        return self.cache.read(page, date_key)

    async def save_record(self, page: str, date_key: str, record: Dict[str, Any]) -> SaveResult:
        """Local write first, then best-effort remote mirror."""
        self.cache.write(page, date_key, record)
        remote = self.remote
        if remote is None:
            result = SaveResult.LOCAL_ONLY
        else:
            try:
                await remote.store.write(remote.user_id, remote.project_id, page, date_key,
                                         self._remote_payload(page, record))
            except Exception as e:
                result = _classify(e)
                logger.warning(f"Remote write failed for {make_key(page, date_key)} ({result.value}): {e}")
                publish_sync_failed(page, date_key, result, str(e), bus=self._event_bus)
            else:
                result = SaveResult.OK
        publish_plan_saved(page, date_key, result, bus=self._event_bus)
        return result

    # --- plans ------------------------------------------------------------
    async def load(self, date_key: str, page: str = DEFAULT_PAGE) -> PlanState:
        record = await self.load_record(page, date_key)
        return normalize(record)

    async def save(self, date_key: str, state: PlanState, page: str = DEFAULT_PAGE) -> SaveResult:
        return await self.save_record(page, date_key, state.to_dict())

    async def clear(self, date_key: str, page: str = DEFAULT_PAGE) -> PlanState:
        """Reset the date to the empty template and persist it immediately."""
        empty = PlanState.empty()
        await self.save(date_key, empty, page)
        publish_plan_cleared(page, date_key, bus=self._event_bus)
        logger.info(f"All data cleared for {make_key(page, date_key)}")
        return empty

    # --- bulk sync --------------------------------------------------------
    async def bulk_sync(self) -> BulkSyncReport:
        """Push every cached entry to the remote store, overwriting remote copies.

        Failed entries are neither retried nor rolled back; already pushed
        entries stay pushed.
        """
        report = BulkSyncReport()
        remote = self.remote
        if remote is None:
            return report
        for page, date_key, record in self.cache.entries():
            key = make_key(page, date_key)
            if not isinstance(record, dict):
                logger.warning(f"Skipping bulk sync of {key}: record is not an object")
                report.failed.append(key)
                continue
            try:
                await remote.store.write(remote.user_id, remote.project_id, page, date_key,
                                         self._remote_payload(page, record, synced=True))
            except Exception as e:
                logger.warning(f"Bulk sync failed for {key}: {e}")
                report.failed.append(key)
            else:
                report.pushed.append(key)
        logger.info(f"Synced {len(report.pushed)} entries to remote store ({len(report.failed)} failed)")
        publish_bulk_sync(report.pushed, report.failed, bus=self._event_bus)
        return report

    # --- user info --------------------------------------------------------
    async def load_user_info(self) -> Optional[UserInfo]:
        record = await self.load_record(USER_INFO_PAGE, USER_INFO_KEY)
        if not isinstance(record, dict) or not record.get("uid"):
            return None
        return UserInfo.from_dict(record)

    async def save_user_info(self, info: UserInfo) -> SaveResult:
        return await self.save_record(USER_INFO_PAGE, USER_INFO_KEY, info.to_dict())


__all__ = ["SyncCoordinator", "SaveResult", "RemoteSession", "BulkSyncReport"]
