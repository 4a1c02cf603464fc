import pytest

from planner.events.Event_Bus import EventBus
from planner.infra.Local_Cache import LocalCache
from planner.infra.Remote_Store import RemoteStore, RemoteUnavailableError, document_path
from planner.infra.Sync_Coordinator import RemoteSession, SyncCoordinator


class FakeRemoteStore(RemoteStore):
    """In-memory remote store. Set `fail_with` to make every call raise,
    or add document paths to `fail_paths` to make only those writes fail."""

    def __init__(self):
        self.docs = {}
        self.fail_with = None
        self.fail_paths = set()
        self.writes = []
        self.closed = False

    async def read(self, user_id, project_id, page, date_key):
        if self.fail_with is not None:
            raise self.fail_with
        doc = self.docs.get(document_path(project_id, user_id, page, date_key))
        return dict(doc) if doc is not None else None

    async def write(self, user_id, project_id, page, date_key, payload):
        path = document_path(project_id, user_id, page, date_key)
        if self.fail_with is not None:
            raise self.fail_with
        if path in self.fail_paths:
            raise RemoteUnavailableError(f"write to {path} failed")
        self.writes.append(path)
        self.docs[path] = dict(payload)

    async def aclose(self):
        self.closed = True


class RecordingBus(EventBus):
    def __init__(self):
        super().__init__()
        self.published = []

    def publish(self, event_name, payload):
        self.published.append((event_name, payload))
        super().publish(event_name, payload)

    def names(self):
        return [name for name, _ in self.published]


@pytest.fixture
def cache(tmp_path):
    return LocalCache(tmp_path / "local_cache.json")


@pytest.fixture
def remote_store():
    return FakeRemoteStore()


@pytest.fixture
def remote_session(remote_store):
    return RemoteSession(remote_store, "user-1", "test-project")


@pytest.fixture
def bus():
    return RecordingBus()


@pytest.fixture
def coordinator(cache, bus):
    return SyncCoordinator(cache, event_bus=bus)


@pytest.fixture
def remote_coordinator(cache, remote_session, bus):
    return SyncCoordinator(cache, remote=remote_session, event_bus=bus)
