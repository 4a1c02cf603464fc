import asyncio

import pytest

from planner.domain.UserInfo import UserInfo
from planner.infra.Remote_Store import document_path
from planner.logic.session import PlannerSession, parse_date_key

MONDAY = "2025-01-06"
TUESDAY = "2025-01-07"


@pytest.fixture
def session(coordinator):
    return PlannerSession(coordinator)


def test_parse_date_key():
    assert parse_date_key(MONDAY).isoweekday() == 1
    for bad in ("2025-13-01", "06/01/2025", "", None):
        with pytest.raises(ValueError):
            parse_date_key(bad)


@pytest.mark.asyncio
async def test_open_unknown_date_gives_empty_plan(session):
    plan = await session.open(MONDAY)
    assert session.date_key == MONDAY
    assert plan.todos == [] and plan.water == 0
    assert session.mode == "local"


@pytest.mark.asyncio
async def test_mutation_requires_active_date(session):
    with pytest.raises(RuntimeError):
        session.set_notes("too early")


@pytest.mark.asyncio
async def test_edits_are_debounced_into_cache(session, cache):
    session.writer.delay = 0.02
    await session.open(MONDAY)
    session.add_todo("one")
    session.add_todo("two")
    session.set_water(3)
    assert cache.read("planner", MONDAY) is None
    await asyncio.sleep(0.1)
    record = cache.read("planner", MONDAY)
    assert [t["text"] for t in record["todos"]] == ["one", "two"]
    assert record["water"] == 3


@pytest.mark.asyncio
async def test_navigation_flushes_previous_date(session, cache):
    await session.open(MONDAY)
    session.set_notes("last edit before leaving")
    await session.open(TUESDAY)
    assert cache.read("planner", MONDAY)["notes"] == "last edit before leaving"
    assert session.plan.notes == ""
    await session.open(MONDAY)
    assert session.plan.notes == "last edit before leaving"


@pytest.mark.asyncio
async def test_ensure_keeps_in_memory_plan(session):
    await session.open(MONDAY)
    session.set_notes("unsaved")
    plan = await session.ensure(MONDAY)
    assert plan is session.plan
    assert plan.notes == "unsaved"
    await session.close()


@pytest.mark.asyncio
async def test_clear_all_discards_pending_edits(session, cache):
    await session.open(MONDAY)
    session.add_todo("keep me")
    await session.flush()
    session.add_todo("pending")
    plan = await session.clear_all()
    assert plan.todos == []
    await asyncio.sleep(0)
    assert cache.read("planner", MONDAY)["todos"] == []
    assert not session.writer.pending()


@pytest.mark.asyncio
async def test_mark_habit_uses_active_date(session):
    await session.open(MONDAY)
    habit = session.create_habit("Read", days=[1])
    session.mark_habit(habit.id, "yes")
    assert habit.completions == {MONDAY: "completed"}
    await session.close()


@pytest.mark.asyncio
async def test_widget_operations_update_plan(session):
    await session.open(MONDAY)
    session.set_top_three(0, text="Ship", done=True)
    first = session.add_todo("a")
    session.add_todo("b")
    session.update_todo(first.id, done=True)
    todos = session.move_todo(0, 1)
    session.set_schedule("07:00", "Run")
    session.set_meal("lunch", "Salad")
    assert session.tap_water(2) == 3
    assert [t.text for t in todos] == ["b", "a"]
    session.delete_todo(first.id)
    results = await session.flush()
    assert results == {MONDAY: "local_only"}
    reloaded = await session.reload()
    assert reloaded.top_three[0].text == "Ship"
    assert [t.text for t in reloaded.todos] == ["b"]
    assert reloaded.schedule["07:00"] == "Run"
    assert reloaded.meals["lunch"] == "Salad"
    assert reloaded.water == 3


@pytest.mark.asyncio
async def test_sign_in_pushes_local_work(session, remote_session, remote_store, cache):
    await session.open(MONDAY)
    session.set_notes("written offline")
    user = UserInfo("user-1", email="ann@example.com")

    report = await session.sign_in(remote_session, user)

    assert session.mode == "remote"
    assert session.user is user
    assert "planner:2025-01-06" in report.pushed
    assert "userInfo:profile" in report.pushed
    doc = remote_store.docs[document_path("test-project", "user-1", "planner", MONDAY)]
    assert doc["notes"] == "written offline"
    assert doc["synced"] is True
    assert session.plan.notes == "written offline"


@pytest.mark.asyncio
async def test_sign_in_keeps_first_creation_time(session, remote_session):
    first = UserInfo("user-1", created_at="2024-01-01T00:00:00+00:00")
    await session.sign_in(None, first)
    again = UserInfo("user-1")
    await session.sign_in(remote_session, again)
    assert again.created_at == "2024-01-01T00:00:00+00:00"
    assert again.last_login_at != again.created_at


@pytest.mark.asyncio
async def test_sign_in_without_remote_stays_local(session, cache):
    report = await session.sign_in(None, UserInfo("user-2"))
    assert session.mode == "local"
    assert report.pushed == []
    assert cache.read("userInfo", "profile")["uid"] == "user-2"


@pytest.mark.asyncio
async def test_sign_out_detaches_and_closes_remote(session, remote_session, remote_store):
    await session.sign_in(remote_session, UserInfo("user-1"))
    detached = await session.sign_out()
    assert detached is remote_session
    assert remote_store.closed
    assert session.mode == "local"
    assert session.user is None


def test_session_page_must_be_known(coordinator):
    assert PlannerSession(coordinator, page="work").page == "work"
    with pytest.raises(ValueError):
        PlannerSession(coordinator, page="diary")


@pytest.mark.asyncio
async def test_concurrent_edits_on_newly_opened_date_are_kept(session, cache):
    await session.open("2025-01-05")
    session.set_notes("sunday notes")

    async def add(text):
        await session.ensure(MONDAY)
        session.add_todo(text)

    await asyncio.gather(add("first"), add("second"))
    await session.flush()
    assert sorted(t["text"] for t in cache.read("planner", MONDAY)["todos"]) == ["first", "second"]
    assert cache.read("planner", "2025-01-05")["notes"] == "sunday notes"
