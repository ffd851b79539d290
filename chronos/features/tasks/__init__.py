"""Tasks feature module"""

from chronos.features.tasks.repository import TaskRepository
from chronos.features.tasks.service import TaskService
from chronos.features.tasks.schemas import TaskPayload, TaskWriteRequest

# The router is imported from chronos.features.tasks.api directly: it depends on
# the timer manager, whose database backend imports the repository above
__all__ = ["TaskRepository", "TaskService", "TaskPayload", "TaskWriteRequest"]
