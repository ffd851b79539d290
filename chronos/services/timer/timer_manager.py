"""Timer Manager - one focus workspace per user inside the server process"""
import asyncio
import logging
from typing import Callable, Dict, List, Optional

from chronos.infra.state_store import StateBackend, StateStore, create_backend
from chronos.models.app_config import AppConfig
from chronos.models.session import SessionRecord
from chronos.models.task import TaskEntry
from chronos.services.insights import InsightService
from chronos.services.notification import NotificationSink
from chronos.services.workspace import FocusWorkspace

logger = logging.getLogger(__name__)


class TimerManager:
    """
    Creates, loads and caches FocusWorkspaces keyed by user id.

    Each workspace gets its own StateStore and tick scheduler; the storage
    backend and the insight service are shared.
    """

    def __init__(
        self,
        backend_factory: Optional[Callable[[], StateBackend]] = None,
        insight_service: Optional[InsightService] = None,
        notifier_factory: Optional[Callable[[], NotificationSink]] = None,
    ):
        self._backend_factory = backend_factory or create_backend
        self._backend: Optional[StateBackend] = None
        self._insight_service = insight_service
        self._notifier_factory = notifier_factory or NotificationSink
        self._workspaces: Dict[str, FocusWorkspace] = {}
        self._lock = asyncio.Lock()

    @property
    def user_ids(self) -> List[str]:
        return list(self._workspaces)

    def _get_backend(self) -> StateBackend:
        if self._backend is None:
            self._backend = self._backend_factory()
        return self._backend

    @property
    def insight_service(self) -> InsightService:
        if self._insight_service is None:
            self._insight_service = InsightService()
        return self._insight_service

    async def get_workspace(self, user_id: str) -> FocusWorkspace:
        """
        Get the loaded workspace of a user, creating it on first use.

        Args:
            user_id: Owner id

        Returns:
            FocusWorkspace with persisted state applied
        """
        workspace = self._workspaces.get(user_id)
        if workspace is not None:
            return workspace

        async with self._lock:
            workspace = self._workspaces.get(user_id)
            if workspace is None:
                workspace = FocusWorkspace(
                    store=StateStore(self._get_backend(), user_id),
                    insight_service=self.insight_service,
                    notifier=self._notifier_factory(),
                )
                await workspace.load()
                self._workspaces[user_id] = workspace
                logger.info(f"Timer workspace created for user {user_id}")
        return workspace

    def loaded(self, user_id: str) -> Optional[FocusWorkspace]:
        """The workspace of a user if it is hosted, without loading it"""
        return self._workspaces.get(user_id)

    # CRUD writes go straight to storage; a hosted workspace mirrors them so
    # completion snapshots and the next write-through see the same rows.

    async def settle(self, user_id: str) -> None:
        """Apply queued writes of a hosted workspace before storage is written directly"""
        workspace = self.loaded(user_id)
        if workspace is not None:
            await workspace.store.flush()

    def task_stored(self, user_id: str, task: TaskEntry) -> None:
        workspace = self.loaded(user_id)
        if workspace is not None:
            workspace.planner.apply_task(task)
            logger.debug(f"Task {task.id} mirrored into workspace of user {user_id}")

    def task_deleted(self, user_id: str, task_id: str) -> None:
        workspace = self.loaded(user_id)
        if workspace is not None:
            workspace.planner.discard_task(task_id)

    def session_stored(self, user_id: str, record: SessionRecord) -> None:
        workspace = self.loaded(user_id)
        if workspace is not None and record.id not in workspace.log:
            workspace.log.append(record)

    def config_stored(self, user_id: str, config: AppConfig) -> None:
        workspace = self.loaded(user_id)
        if workspace is not None:
            workspace.apply_config(config)
            logger.debug(f"Config mirrored into workspace of user {user_id}")

    async def shutdown(self) -> None:
        """Stop every timer and apply pending writes"""
        workspaces, self._workspaces = list(self._workspaces.values()), {}
        for workspace in workspaces:
            workspace.engine.reset()
            await workspace.store.flush()
        if self._backend is not None:
            await self._backend.close()
            self._backend = None
        logger.info(f"Timer manager stopped {len(workspaces)} workspaces")


timer_manager = TimerManager()


def get_timer_manager() -> TimerManager:
    """FastAPI dependency returning the process-wide TimerManager"""
    return timer_manager
