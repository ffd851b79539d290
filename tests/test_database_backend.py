"""Tests for DatabaseStateBackend against the throwaway SQLite database"""

import uuid

import pytest

from chronos.db.session import init_models
from chronos.infra.state_store import DatabaseStateBackend, StateKey, StateStore
from tests.conftest import run


@pytest.fixture(scope="module", autouse=True)
def tables():
    run(init_models())


def session_dict(i, topic="Kubernetes"):
    return {
        "id": f"s-{uuid.uuid4()}-{i}",
        "timestamp": 1_715_947_200_000 + i * 1000,
        "durationSeconds": 1500,
        "mode": "FOCUS",
        "topic": topic,
        "tags": ["DevOps"],
        "resources": [{"id": "r1", "url": "https://k8s.io", "title": "Docs", "type": "DOCUMENTATION"}],
        "tasks": [],
    }


def task_dict(task_id, text, start):
    return {"id": task_id, "text": text, "status": "TODO", "priority": "LOW", "tags": ["k8s"], "startDate": start}


class TestDatabaseStateBackend:
    def test_absent_keys_read_as_none(self, user_id):
        backend = DatabaseStateBackend()

        for key in StateKey:
            assert run(backend.read(user_id, key)) is None

    def test_theme_and_config_round_trip(self, user_id):
        backend = DatabaseStateBackend()
        config = {
            "featureFlags": {"experimentalAI": False, "slackIntegration": True, "plannerIntegration": True},
            "timers": {"FOCUS": 3000, "SHORT_BREAK": 300, "LONG_BREAK": 900, "CUSTOM": 1200},
        }

        run(backend.write(user_id, StateKey.THEME, "light"))
        run(backend.write(user_id, StateKey.CONFIG, config))

        assert run(backend.read(user_id, StateKey.THEME)) == "light"
        assert run(backend.read(user_id, StateKey.CONFIG)) == config

    def test_sessions_appended_once(self, user_id):
        backend = DatabaseStateBackend()
        first, second = session_dict(1), session_dict(2, topic="Helm")

        run(backend.write(user_id, StateKey.SESSIONS, [first]))
        run(backend.write(user_id, StateKey.SESSIONS, [first, second]))
        # A fresh backend does not know what was stored already
        run(DatabaseStateBackend().write(user_id, StateKey.SESSIONS, [first, second]))

        stored = run(backend.read(user_id, StateKey.SESSIONS))
        assert [s["id"] for s in stored] == [first["id"], second["id"]]
        assert stored[0]["resources"][0]["url"] == "https://k8s.io"

    def test_tasks_synced_to_backlog(self, user_id):
        backend = DatabaseStateBackend()
        a, b = f"a-{uuid.uuid4()}", f"b-{uuid.uuid4()}"

        run(backend.write(user_id, StateKey.TASKS, [task_dict(a, "Read docs", 1), task_dict(b, "Lab", 2)]))
        edited = dict(task_dict(b, "Lab 2", 2), status="DONE")
        run(backend.write(user_id, StateKey.TASKS, [edited]))

        stored = run(backend.read(user_id, StateKey.TASKS))
        assert [t["id"] for t in stored] == [b]
        assert stored[0]["text"] == "Lab 2"
        assert stored[0]["completed"] is True

    def test_state_store_over_database(self, user_id):
        store = StateStore(DatabaseStateBackend(), user_id)

        async def scenario():
            store.save(StateKey.THEME, "dark")
            store.save(StateKey.THEME, "light")
            await store.flush()
            return await store.load(StateKey.THEME)

        assert run(scenario()) == "light"
