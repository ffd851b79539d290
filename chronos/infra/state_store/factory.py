"""Backend selection from configuration"""
import logging
from typing import Callable, Dict, Optional

from chronos.config import CHRONOS_STATE_BACKEND

from .base import StateBackend
from .database import DatabaseStateBackend
from .file import FileStateBackend
from .http import HttpStateBackend
from .memory import MemoryStateBackend

logger = logging.getLogger(__name__)

BACKENDS: Dict[str, Callable[[], StateBackend]] = {
    "database": DatabaseStateBackend,
    # The CRUD API has no theme field; keep it on disk next to the client
    "http": lambda: HttpStateBackend(fallback=FileStateBackend()),
    "file": FileStateBackend,
    "memory": MemoryStateBackend,
}


def create_backend(kind: Optional[str] = None) -> StateBackend:
    """
    Build the state backend named by `kind` (default: CHRONOS_STATE_BACKEND).

    Raises:
        ValueError: If the name is unknown
    """
    name = (kind or CHRONOS_STATE_BACKEND).strip().lower()
    factory = BACKENDS.get(name)
    if factory is None:
        raise ValueError(f"Unknown state backend '{name}', expected one of: {', '.join(BACKENDS)}")
    logger.info(f"Using {name} state backend")
    return factory()
