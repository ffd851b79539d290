"""Persistence adapter and its storage backends"""
from .base import StateBackend, StateKey
from .store import StateStore
from .memory import MemoryStateBackend
from .file import FileStateBackend
from .http import HttpStateBackend
from .database import DatabaseStateBackend
from .factory import BACKENDS, create_backend

__all__ = [
    'StateBackend', 'StateKey', 'StateStore',
    'MemoryStateBackend', 'FileStateBackend', 'HttpStateBackend', 'DatabaseStateBackend',
    'BACKENDS', 'create_backend',
]
