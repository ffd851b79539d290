"""Session resources and the standing task backlog"""
import logging
from datetime import date
from typing import Callable, Iterable, List, Optional, Tuple

from chronos.infra.state_store import StateKey, StateStore
from chronos.models.resource import ResourceEntry, ResourceType
from chronos.models.task import TaskEntry, TaskPriority, TaskProgress, TaskStatus
from chronos.utils.ids import new_time_id, now_ms

logger = logging.getLogger(__name__)


def normalise_url(url: str) -> str:
    """Prefix https:// when the URL carries no http(s) scheme"""
    url = url.strip()
    return url if url.startswith("http") else f"https://{url}"


class PlannerRegistry:
    """
    Holds the resources attached to the session in progress and the task
    backlog that persists across sessions.

    Resources are session scoped and not persisted; every task mutation is
    written through under the `tasks` key.
    """

    def __init__(self, store: Optional[StateStore] = None, clock: Callable[[], int] = now_ms):
        self._store = store
        self._clock = clock
        self._resources: List[ResourceEntry] = []
        self._tasks: List[TaskEntry] = []

    # Resources

    @property
    def resources(self) -> List[ResourceEntry]:
        return list(self._resources)

    def add_resource(
        self,
        url: str,
        title: Optional[str] = None,
        type: ResourceType = ResourceType.DOCUMENTATION,
    ) -> ResourceEntry:
        """
        Attach a link to the current session.

        Args:
            url: Link, https:// is prefixed when no scheme is given
            title: Display title, falls back to the URL as entered
            type: Resource category

        Returns:
            The new entry

        Raises:
            ValueError: If the URL is blank
        """
        if not url or not url.strip():
            raise ValueError("Resource URL is required")

        entry = ResourceEntry(
            id=new_time_id(),
            url=normalise_url(url),
            title=(title or "").strip() or url.strip(),
            type=type,
        )
        self._resources.append(entry)
        return entry

    def remove_resource(self, resource_id: str) -> bool:
        before = len(self._resources)
        self._resources = [r for r in self._resources if r.id != resource_id]
        return len(self._resources) < before

    def clear_resources(self) -> None:
        self._resources = []

    def resources_snapshot(self) -> Tuple[ResourceEntry, ...]:
        return tuple(r.model_copy(deep=True) for r in self._resources)

    # Tasks

    @property
    def tasks(self) -> List[TaskEntry]:
        return list(self._tasks)

    def load_tasks(self, tasks: Iterable[TaskEntry]) -> None:
        """Replace the backlog with persisted tasks without writing back"""
        self._tasks = list(tasks)

    def add_task(
        self,
        text: str,
        description: Optional[str] = None,
        priority: TaskPriority = TaskPriority.MEDIUM,
        tags: Optional[List[str]] = None,
        target_date: Optional[date] = None,
    ) -> TaskEntry:
        """
        Append a new TODO task to the backlog.

        Raises:
            ValueError: If the text is blank
        """
        if not text or not text.strip():
            raise ValueError("Task text is required")

        unique_tags: List[str] = []
        for tag in tags or []:
            tag = tag.strip()
            if tag and tag not in unique_tags:
                unique_tags.append(tag)

        task = TaskEntry(
            id=new_time_id(),
            text=text.strip(),
            description=description,
            status=TaskStatus.TODO,
            priority=priority,
            tags=unique_tags,
            start_date=self._clock(),
            target_date=target_date,
        )
        self._tasks.append(task)
        self._persist()
        return task

    def _index_of(self, task_id: str) -> int:
        for index, task in enumerate(self._tasks):
            if task.id == task_id:
                return index
        raise ValueError(f"Task {task_id} not found")

    def get_task(self, task_id: str) -> TaskEntry:
        return self._tasks[self._index_of(task_id)]

    def update_task(self, task: TaskEntry) -> TaskEntry:
        """
        Replace the task with the same id.

        Raises:
            ValueError: If no task has this id
        """
        self._tasks[self._index_of(task.id)] = task
        self._persist()
        return task

    def remove_task(self, task_id: str) -> bool:
        removed = self.discard_task(task_id)
        if removed:
            self._persist()
        return removed

    def apply_task(self, task: TaskEntry) -> None:
        """Insert or replace a task that is already stored, without writing back"""
        for index, current in enumerate(self._tasks):
            if current.id == task.id:
                self._tasks[index] = task
                return
        self._tasks.append(task)

    def discard_task(self, task_id: str) -> bool:
        """Drop a task that is already deleted from storage, without writing back"""
        before = len(self._tasks)
        self._tasks = [t for t in self._tasks if t.id != task_id]
        return len(self._tasks) < before

    def set_task_status(self, task_id: str, status: TaskStatus) -> TaskEntry:
        index = self._index_of(task_id)
        updated = self._tasks[index].model_copy(update={"status": status})
        self._tasks[index] = updated
        self._persist()
        return updated

    def toggle_task(self, task_id: str) -> TaskEntry:
        """Flip a task between DONE and TODO"""
        current = self.get_task(task_id)
        status = TaskStatus.TODO if current.status == TaskStatus.DONE else TaskStatus.DONE
        return self.set_task_status(task_id, status)

    def tasks_snapshot(self) -> Tuple[TaskEntry, ...]:
        return tuple(t.model_copy(deep=True) for t in self._tasks)

    def progress(self) -> TaskProgress:
        total = len(self._tasks)
        by_status = {status: 0 for status in TaskStatus}
        for task in self._tasks:
            by_status[task.status] += 1
        done = by_status[TaskStatus.DONE]
        return TaskProgress(
            done=done,
            total=total,
            percent=round(done / total * 100) if total else 0,
            by_status=by_status,
        )

    def _persist(self) -> None:
        if self._store is not None:
            self._store.save(StateKey.TASKS, self._tasks)
