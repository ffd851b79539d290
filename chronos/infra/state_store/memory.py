"""In-process state backend"""
import copy
from typing import Any, Dict, Optional

from .base import StateBackend, StateKey


class MemoryStateBackend(StateBackend):
    """Dict-backed storage for tests and ephemeral runs"""

    def __init__(self):
        self.data: Dict[str, Dict[StateKey, Any]] = {}
        self.writes: list = []  # (user_id, key) in applied order

    async def read(self, user_id: str, key: StateKey) -> Optional[Any]:
        value = self.data.get(user_id, {}).get(key)
        return copy.deepcopy(value)

    async def write(self, user_id: str, key: StateKey, value: Any) -> None:
        self.data.setdefault(user_id, {})[key] = copy.deepcopy(value)
        self.writes.append((user_id, key))
