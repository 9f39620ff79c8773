"""In-memory map session store. Idle sessions expire; the store is capped in size."""
import logging
import time
from typing import Callable, Optional

from map_core.constants import MAX_SESSIONS, SESSION_IDLE_TTL_S
from map_core.session import MapSession

LOG = logging.getLogger(__name__)

_store: dict[str, MapSession] = {}
# session_id -> last access time; insertion order is least recently used first.
_last_access: dict[str, float] = {}

_clock: Callable[[], float] = time.monotonic
idle_ttl_s: float = SESSION_IDLE_TTL_S
max_sessions: int = MAX_SESSIONS


def _touch(session_id: str) -> None:
    _last_access.pop(session_id, None)
    _last_access[session_id] = _clock()


def _drop(session_id: str) -> None:
    _store.pop(session_id, None)
    _last_access.pop(session_id, None)


def evict_idle() -> int:
    """Drop sessions not accessed within the idle TTL. Returns how many were dropped."""
    cutoff = _clock() - idle_ttl_s
    expired = [sid for sid, seen in _last_access.items() if seen <= cutoff]
    for sid in expired:
        _drop(sid)
    if expired:
        LOG.info("Evicted %d idle map sessions", len(expired))
    return len(expired)


def get_all() -> list[MapSession]:
    """List all open sessions."""
    evict_idle()
    return list(_store.values())


def get_by_id(session_id: str) -> Optional[MapSession]:
    """Get session by id or None. Counts as an access."""
    evict_idle()
    session = _store.get(session_id)
    if session is not None:
        _touch(session_id)
    return session


def add(session: MapSession) -> None:
    """Add or replace session by session_id, evicting idle and then least recently used sessions."""
    evict_idle()
    _store[session.session_id] = session
    _touch(session.session_id)
    while len(_store) > max_sessions:
        oldest = next(iter(_last_access))
        LOG.info("Map session store full, evicting %s", oldest)
        _drop(oldest)


def remove(session_id: str) -> bool:
    """Remove session by id. Returns True if removed."""
    if session_id in _store:
        _drop(session_id)
        return True
    return False


def clear() -> None:
    """Clear all sessions (tests)."""
    _store.clear()
    _last_access.clear()
