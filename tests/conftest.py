"""
Shared fixtures and fakes.

The environment is pinned before any chronos import so that the database
engine points at a throwaway SQLite file and no real AI or desktop
notification is ever used.
"""

import asyncio
import os
import tempfile
import uuid

_TMP_DIR = tempfile.mkdtemp(prefix="chronos-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TMP_DIR}/chronos.db"
os.environ["GOOGLE_API_KEY"] = ""
os.environ["CHRONOS_NOTIFICATIONS"] = "0"
os.environ["CHRONOS_STATE_DIR"] = os.path.join(_TMP_DIR, "state")

import pytest  # noqa: E402

from chronos.infra.state_store import MemoryStateBackend, StateStore  # noqa: E402
from chronos.models.app_config import AppConfig  # noqa: E402
from chronos.models.timer import TimerMode  # noqa: E402
from chronos.services.planner import PlannerRegistry  # noqa: E402
from chronos.services.session_log import SessionLogStore  # noqa: E402
from chronos.services.timer.engine import TimerEngine  # noqa: E402


# ── Helpers ───────────────────────────────────────────────────


def run(coro):
    """Run an async function in a fresh event loop."""
    loop = asyncio.new_event_loop()
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


class ManualScheduler:
    """Scheduler stand-in: records arm/cancel calls, ticks are driven by the test."""

    def __init__(self):
        self.arm_count = 0
        self.cancel_count = 0
        self.armed = False

    def arm(self, tick, should_continue):
        self.arm_count += 1
        self.armed = True

    def cancel(self):
        self.cancel_count += 1
        self.armed = False


class RecordingNotifier:
    def __init__(self, fail=False):
        self.completed = []
        self.prepared = 0
        self.fail = fail

    def prepare_audio(self):
        self.prepared += 1

    def notify_completion(self, mode):
        self.completed.append(mode)
        if self.fail:
            raise RuntimeError("notification daemon down")


class FakeLLM:
    """LLMService stand-in with canned answers."""

    def __init__(self, text="Great focus streak!", topics=None, chunks=None, fail_after=None, error=None):
        self.text = text
        self.topics = topics if topics is not None else ["Helm", "Operators", "Service Mesh", "GitOps", "eBPF", "Extra"]
        self.chunks = chunks if chunks is not None else ["Pods ", "are ", "cattle."]
        self.fail_after = fail_after
        self.error = error
        self.calls = []

    async def invoke(self, messages, **kwargs):
        self.calls.append(("invoke", messages))
        if self.error:
            raise self.error
        return self.text

    async def structured_invoke(self, messages, schema, **kwargs):
        self.calls.append(("structured_invoke", messages))
        if self.error:
            raise self.error
        return schema(topics=self.topics)

    async def stream_invoke(self, messages, **kwargs):
        self.calls.append(("stream_invoke", messages))
        for index, chunk in enumerate(self.chunks):
            if self.fail_after is not None and index >= self.fail_after:
                raise ConnectionError("stream dropped")
            yield chunk


def tick_n(engine, n):
    record = None
    for _ in range(n):
        record = engine.tick() or record
    return record


# ── Fixtures ──────────────────────────────────────────────────


@pytest.fixture
def backend():
    return MemoryStateBackend()


@pytest.fixture
def store(backend):
    return StateStore(backend, "user-1")


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def config():
    return AppConfig(timers={
        TimerMode.FOCUS: 3,
        TimerMode.SHORT_BREAK: 2,
        TimerMode.LONG_BREAK: 4,
        TimerMode.CUSTOM: 5,
    })


@pytest.fixture
def engine(config, store, scheduler, notifier):
    log = SessionLogStore()
    planner = PlannerRegistry(store=store)
    clock = iter(range(1_700_000_000_000, 1_800_000_000_000, 1000))
    return TimerEngine(
        config=config,
        log=log,
        planner=planner,
        notifier=notifier,
        store=store,
        scheduler=scheduler,
        clock=lambda: next(clock),
    )


@pytest.fixture
def llm():
    return FakeLLM()


@pytest.fixture
def api_manager(llm):
    from chronos.services.insights import InsightService
    from chronos.services.notification import NotificationSink
    from chronos.services.timer.timer_manager import TimerManager

    return TimerManager(
        backend_factory=MemoryStateBackend,
        insight_service=InsightService(llm=llm),
        notifier_factory=lambda: NotificationSink(enabled=False),
    )


@pytest.fixture
def client(api_manager):
    from fastapi.testclient import TestClient

    from chronos.main import app
    from chronos.services.timer.timer_manager import get_timer_manager

    app.dependency_overrides[get_timer_manager] = lambda: api_manager
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def user_id():
    return f"user-{uuid.uuid4()}"


@pytest.fixture(autouse=True)
def _fresh_database():
    """Give every test empty tables: all tests share one SQLite file."""
    from chronos.db.base import Base
    from chronos.db.session import engine, init_models

    async def reset():
        import chronos.db.models  # noqa: F401

        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
        await init_models()

    run(reset())
    yield
