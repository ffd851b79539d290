"""JSON-file state backend (one document per user)"""
import asyncio
import json
import os
import re
from pathlib import Path
from typing import Any, Dict, Optional

from chronos.config import CHRONOS_STATE_DIR

from .base import StateBackend, StateKey

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9_.-]")


class FileStateBackend(StateBackend):
    """
    Stores each user's keys in `<state_dir>/<user_id>.json`.
    Writes replace the file atomically via a temp file.
    """

    def __init__(self, state_dir: Optional[str] = None):
        self._state_dir = Path(state_dir or CHRONOS_STATE_DIR)

    def _path_for(self, user_id: str) -> Path:
        safe_name = _UNSAFE_CHARS.sub("_", user_id) or "default"
        return self._state_dir / f"{safe_name}.json"

    def _read_document(self, user_id: str) -> Dict[str, Any]:
        path = self._path_for(user_id)
        if not path.exists():
            return {}
        with path.open("r", encoding="utf-8") as f:
            return json.load(f)

    def _write_document(self, user_id: str, document: Dict[str, Any]) -> None:
        path = self._path_for(user_id)
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = path.with_suffix(".json.tmp")
        with tmp_path.open("w", encoding="utf-8") as f:
            json.dump(document, f, ensure_ascii=False, indent=2)
        os.replace(tmp_path, path)

    async def read(self, user_id: str, key: StateKey) -> Optional[Any]:
        document = await asyncio.to_thread(self._read_document, user_id)
        return document.get(key.value)

    async def write(self, user_id: str, key: StateKey, value: Any) -> None:
        def _update() -> None:
            document = self._read_document(user_id)
            document[key.value] = value
            self._write_document(user_id, document)

        await asyncio.to_thread(_update)
