"""State backend contract"""
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Optional


class StateKey(str, Enum):
    """Independent keys of per-user persisted state"""
    THEME = "theme"
    SESSIONS = "sessions"
    TASKS = "tasks"
    CONFIG = "config"


class StateBackend(ABC):
    """
    Durable key/value storage for user state.
    Values are JSON-compatible (dicts, lists, strings); an absent key reads as None.
    """

    @abstractmethod
    async def read(self, user_id: str, key: StateKey) -> Optional[Any]:
        ...

    @abstractmethod
    async def write(self, user_id: str, key: StateKey, value: Any) -> None:
        ...

    async def close(self) -> None:
        """Release any held resources"""
        return None
