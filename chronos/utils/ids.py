"""Time-derived identifiers"""
import time

_last_id: int = 0


def now_ms() -> int:
    """Current epoch time in milliseconds"""
    return int(time.time() * 1000)


def new_time_id() -> str:
    """
    Return a millisecond-timestamp id, unique within the process.

    Two ids requested within the same millisecond are bumped so that ids stay
    strictly increasing.
    """
    global _last_id

    candidate = now_ms()
    if candidate <= _last_id:
        candidate = _last_id + 1
    _last_id = candidate
    return str(candidate)
