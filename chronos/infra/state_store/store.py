"""Write-through persistence adapter scoped to one user"""
import asyncio
import logging
from collections import deque
from typing import Any, Deque, Optional, Tuple

from chronos.utils.serialization import to_jsonable

from .base import StateBackend, StateKey

logger = logging.getLogger(__name__)


class StateStore:
    """
    Persistence adapter used by the engine and workspace.

    `save()` never blocks and never raises: the value is serialised at call time
    and queued, then a single drain task applies queued writes to the backend in
    the order they were issued. Backend failures are logged and dropped (last
    write wins, no retry).
    """

    def __init__(self, backend: StateBackend, user_id: str):
        self._backend = backend
        self._user_id = user_id
        self._pending: Deque[Tuple[StateKey, Any]] = deque()
        self._drain_task: Optional[asyncio.Task] = None

    @property
    def user_id(self) -> str:
        return self._user_id

    @property
    def pending_writes(self) -> int:
        return len(self._pending)

    async def load(self, key: StateKey) -> Optional[Any]:
        """Read a key once at start-up. Failures read as absent (defaults apply)."""
        try:
            return await self._backend.read(self._user_id, key)
        except Exception as e:
            logger.error(f"Failed to load '{key.value}' for user {self._user_id}: {e}")
            return None

    def save(self, key: StateKey, value: Any) -> None:
        """Queue a write-through of `value` under `key`"""
        try:
            payload = to_jsonable(value)
        except Exception as e:
            logger.error(f"Failed to serialise '{key.value}' for user {self._user_id}: {e}")
            return

        self._pending.append((key, payload))
        self._ensure_drain()

    def _ensure_drain(self) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No loop yet; pending writes are applied on the next flush()
            return

        if self._drain_task is None or self._drain_task.done():
            self._drain_task = loop.create_task(self._drain())

    async def _drain(self) -> None:
        while self._pending:
            key, payload = self._pending.popleft()
            try:
                await self._backend.write(self._user_id, key, payload)
            except Exception as e:
                logger.error(f"Failed to persist '{key.value}' for user {self._user_id}: {e}")

    async def flush(self) -> None:
        """Wait until every queued write has been applied"""
        self._ensure_drain()
        while self._drain_task is not None and not self._drain_task.done():
            await self._drain_task

    async def close(self) -> None:
        await self.flush()
        await self._backend.close()
