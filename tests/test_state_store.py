"""Tests for StateStore ordering and the file and HTTP backends."""

import asyncio
import json

import httpx
import pytest

from chronos.infra.state_store import (
    DatabaseStateBackend,
    FileStateBackend,
    HttpStateBackend,
    MemoryStateBackend,
    StateKey,
    StateStore,
    create_backend,
)
from chronos.infra.state_store import factory
from chronos.models.app_config import Theme
from tests.conftest import run


class SlowBackend(MemoryStateBackend):
    """Writes of the first key take longer than later ones."""

    async def write(self, user_id, key, value):
        if key == StateKey.CONFIG:
            await asyncio.sleep(0.02)
        await super().write(user_id, key, value)


class FailingBackend(MemoryStateBackend):
    async def read(self, user_id, key):
        raise OSError("disk gone")

    async def write(self, user_id, key, value):
        if key == StateKey.THEME:
            raise OSError("disk gone")
        await super().write(user_id, key, value)


# ── StateStore ────────────────────────────────────────────────


class TestStateStore:
    def test_writes_apply_in_issue_order(self):
        backend = SlowBackend()
        store = StateStore(backend, "u")

        async def scenario():
            store.save(StateKey.CONFIG, {"timers": {"FOCUS": 1}})
            store.save(StateKey.THEME, Theme.LIGHT)
            store.save(StateKey.CONFIG, {"timers": {"FOCUS": 2}})
            await store.flush()

        run(scenario())

        assert backend.writes == [("u", StateKey.CONFIG), ("u", StateKey.THEME), ("u", StateKey.CONFIG)]
        assert backend.data["u"][StateKey.CONFIG] == {"timers": {"FOCUS": 2}}
        assert backend.data["u"][StateKey.THEME] == "light"

    def test_value_is_captured_at_save_time(self):
        backend = MemoryStateBackend()
        store = StateStore(backend, "u")
        tasks = [{"id": "1"}]

        store.save(StateKey.TASKS, tasks)
        tasks.append({"id": "2"})
        run(store.flush())

        assert backend.data["u"][StateKey.TASKS] == [{"id": "1"}]

    def test_failures_are_logged_not_raised(self):
        backend = FailingBackend()
        store = StateStore(backend, "u")

        async def scenario():
            store.save(StateKey.THEME, "dark")
            store.save(StateKey.TASKS, [])
            await store.flush()
            return await store.load(StateKey.CONFIG)

        assert run(scenario()) is None
        assert backend.writes == [("u", StateKey.TASKS)]
        assert store.pending_writes == 0

    def test_absent_key_loads_none(self, store):
        assert run(store.load(StateKey.SESSIONS)) is None


# ── Backend Selection ─────────────────────────────────────────


class TestCreateBackend:
    def test_default_is_database(self):
        assert isinstance(create_backend(), DatabaseStateBackend)

    def test_setting_picks_backend(self, monkeypatch):
        monkeypatch.setattr(factory, "CHRONOS_STATE_BACKEND", "file")

        assert isinstance(create_backend(), FileStateBackend)

    def test_name_is_case_insensitive(self):
        assert isinstance(create_backend(" Memory "), MemoryStateBackend)

    def test_http_keeps_theme_on_disk(self):
        backend = create_backend("http")

        assert isinstance(backend, HttpStateBackend)
        assert isinstance(backend._fallback, FileStateBackend)
        run(backend.close())

    def test_unknown_name(self):
        with pytest.raises(ValueError, match="redis"):
            create_backend("redis")


# ── File Backend ──────────────────────────────────────────────


class TestFileStateBackend:
    def test_round_trip_per_user(self, tmp_path):
        backend = FileStateBackend(str(tmp_path))

        async def scenario():
            await backend.write("alice@example.com", StateKey.THEME, "light")
            await backend.write("alice@example.com", StateKey.TASKS, [{"id": "1"}])
            return (
                await backend.read("alice@example.com", StateKey.THEME),
                await backend.read("alice@example.com", StateKey.TASKS),
                await backend.read("bob", StateKey.THEME),
            )

        theme, tasks, other = run(scenario())

        assert theme == "light"
        assert tasks == [{"id": "1"}]
        assert other is None
        stored = json.loads((tmp_path / "alice_example.com.json").read_text())
        assert stored["theme"] == "light"


# ── HTTP Backend ──────────────────────────────────────────────


class FakeApi:
    """In-memory stand-in for the CRUD API behind httpx.MockTransport."""

    def __init__(self):
        self.requests = []
        self.sessions = [{"id": "2", "timestamp": 2}, {"id": "1", "timestamp": 1}]
        self.tasks = [{"id": "t2", "text": "b"}, {"id": "t1", "text": "a"}]

    def handler(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content) if request.content else None
        self.requests.append((request.method, request.url.path, dict(request.url.params), body))

        if request.url.path == "/api/sessions" and request.method == "GET":
            return httpx.Response(200, json=self.sessions)
        if request.url.path == "/api/tasks" and request.method == "GET":
            return httpx.Response(200, json=self.tasks)
        if request.url.path == "/api/tasks" and request.method == "DELETE":
            return httpx.Response(404, json={"error": "Task t9 not found"})
        if request.url.path == "/api/config" and request.method == "GET":
            return httpx.Response(200, json={"timers": {"FOCUS": 1500}})
        return httpx.Response(201 if request.method == "POST" else 200, json={})


@pytest.fixture
def api():
    return FakeApi()


@pytest.fixture
def http_backend(api):
    client = httpx.AsyncClient(base_url="http://chronos.test", transport=httpx.MockTransport(api.handler))
    return HttpStateBackend(client=client)


class TestHttpStateBackend:
    def test_sessions_are_read_chronologically_and_only_new_ones_posted(self, api, http_backend):
        async def scenario():
            loaded = await http_backend.read("u", StateKey.SESSIONS)
            await http_backend.write("u", StateKey.SESSIONS, loaded + [{"id": "3", "timestamp": 3}])
            await http_backend.write("u", StateKey.SESSIONS, loaded + [{"id": "3", "timestamp": 3}])
            return loaded

        loaded = run(scenario())

        assert [s["id"] for s in loaded] == ["1", "2"]
        posts = [r for r in api.requests if r[0] == "POST"]
        assert posts == [("POST", "/api/sessions", {}, {"userId": "u", "session": {"id": "3", "timestamp": 3}})]

    def test_tasks_are_diffed(self, api, http_backend):
        async def scenario():
            loaded = await http_backend.read("u", StateKey.TASKS)
            await http_backend.write("u", StateKey.TASKS, [
                {"id": "t1", "text": "a (edited)"},
                {"id": "t3", "text": "c"},
            ])
            return loaded

        loaded = run(scenario())

        assert [t["id"] for t in loaded] == ["t1", "t2"]
        writes = [(m, p, params.get("id"), body and body["task"]["id"]) for m, p, params, body in api.requests if m != "GET"]
        assert ("DELETE", "/api/tasks", "t2", None) in writes
        assert ("PUT", "/api/tasks", "t1", "t1") in writes
        assert ("POST", "/api/tasks", None, "t3") in writes

    def test_config_goes_through_api_and_theme_stays_local(self, api, http_backend):
        async def scenario():
            await http_backend.write("u", StateKey.CONFIG, {"timers": {"FOCUS": 60}})
            await http_backend.write("u", StateKey.THEME, "light")
            return await http_backend.read("u", StateKey.THEME), await http_backend.read("u", StateKey.CONFIG)

        theme, config = run(scenario())

        assert theme == "light"
        assert config == {"timers": {"FOCUS": 1500}}
        assert ("PUT", "/api/config", {}, {"userId": "u", "config": {"timers": {"FOCUS": 60}}}) in api.requests
        assert not any(path == "/api/theme" for _, path, _, _ in api.requests)
