"""State backend that syncs through the Chronos CRUD API"""
import logging
from typing import Any, Dict, List, Optional, Set

import httpx

from chronos.config import CHRONOS_API_URL

from .base import StateBackend, StateKey
from .memory import MemoryStateBackend

logger = logging.getLogger(__name__)


class HttpStateBackend(StateBackend):
    """
    Maps state keys onto the REST endpoints:

    - config: GET/PUT /api/config
    - sessions: GET /api/sessions, POST /api/sessions for records not sent yet
    - tasks: GET /api/tasks, then POST/PUT/DELETE by diffing against the last synced backlog
    - theme: not served by the API, delegated to a local fallback backend
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        fallback: Optional[StateBackend] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self._client = client or httpx.AsyncClient(base_url=base_url or CHRONOS_API_URL, timeout=10.0)
        self._fallback = fallback or MemoryStateBackend()
        self._sent_session_ids: Dict[str, Set[str]] = {}
        self._synced_tasks: Dict[str, Dict[str, Dict[str, Any]]] = {}

    async def read(self, user_id: str, key: StateKey) -> Optional[Any]:
        if key == StateKey.THEME:
            return await self._fallback.read(user_id, key)

        if key == StateKey.CONFIG:
            response = await self._client.get("/api/config", params={"userId": user_id})
            response.raise_for_status()
            return response.json()

        if key == StateKey.SESSIONS:
            response = await self._client.get("/api/sessions", params={"userId": user_id})
            response.raise_for_status()
            # API returns newest first; the log is chronological
            records: List[Dict[str, Any]] = list(reversed(response.json()))
            self._sent_session_ids[user_id] = {record["id"] for record in records}
            return records

        if key == StateKey.TASKS:
            response = await self._client.get("/api/tasks", params={"userId": user_id})
            response.raise_for_status()
            # API returns newest first; the backlog keeps insertion order
            tasks: List[Dict[str, Any]] = list(reversed(response.json()))
            self._synced_tasks[user_id] = {task["id"]: task for task in tasks}
            return tasks

        return None

    async def write(self, user_id: str, key: StateKey, value: Any) -> None:
        if key == StateKey.THEME:
            await self._fallback.write(user_id, key, value)
        elif key == StateKey.CONFIG:
            response = await self._client.put("/api/config", json={"userId": user_id, "config": value})
            response.raise_for_status()
        elif key == StateKey.SESSIONS:
            await self._push_sessions(user_id, value or [])
        elif key == StateKey.TASKS:
            await self._sync_tasks(user_id, value or [])

    async def _push_sessions(self, user_id: str, records: List[Dict[str, Any]]) -> None:
        sent = self._sent_session_ids.setdefault(user_id, set())
        for record in records:
            if record["id"] in sent:
                continue
            response = await self._client.post("/api/sessions", json={"userId": user_id, "session": record})
            response.raise_for_status()
            sent.add(record["id"])

    async def _sync_tasks(self, user_id: str, tasks: List[Dict[str, Any]]) -> None:
        synced = self._synced_tasks.setdefault(user_id, {})
        current = {task["id"]: task for task in tasks}

        for task_id in list(synced):
            if task_id not in current:
                response = await self._client.delete("/api/tasks", params={"id": task_id, "userId": user_id})
                if response.status_code != 404:
                    response.raise_for_status()
                synced.pop(task_id)

        for task_id, task in current.items():
            if task_id not in synced:
                response = await self._client.post("/api/tasks", json={"userId": user_id, "task": task})
            elif synced[task_id] != task:
                response = await self._client.put(
                    "/api/tasks", params={"id": task_id}, json={"userId": user_id, "task": task}
                )
            else:
                continue
            response.raise_for_status()
            synced[task_id] = task

        logger.debug(f"Synced {len(current)} tasks for user {user_id}")

    async def close(self) -> None:
        await self._client.aclose()
