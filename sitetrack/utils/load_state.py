"""
Explicit load state for dashboard fetches.

The first fetch of a (user, project) pair is a full load; every later one
is a refresh. Clients use the reported status to choose between a
full-screen loader and a quiet background refresh.

The tracker keeps at most max_entries pairs; the least recently touched
pair is dropped first and simply starts over with a full load.
"""
import threading
from collections import OrderedDict
from enum import Enum
from typing import Hashable, Tuple


class LoadStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    REFRESHING = "refreshing"


class LoadTracker:
    def __init__(self, max_entries: int = 10000):
        self._lock = threading.Lock()
        self._max_entries = max_entries
        self._states: "OrderedDict[Tuple[Hashable, Hashable], LoadStatus]" = OrderedDict()

    def _store(self, key: Tuple[Hashable, Hashable], value: LoadStatus) -> None:
        self._states[key] = value
        self._states.move_to_end(key)
        while len(self._states) > self._max_entries:
            self._states.popitem(last=False)

    def status(self, user_id: Hashable, project_id: Hashable) -> LoadStatus:
        with self._lock:
            return self._states.get((user_id, project_id), LoadStatus.IDLE)

    def begin(self, user_id: Hashable, project_id: Hashable) -> LoadStatus:
        """Mark a fetch as started; returns loading or refreshing."""
        key = (user_id, project_id)
        with self._lock:
            current = self._states.get(key, LoadStatus.IDLE)
            if current in (LoadStatus.LOADED, LoadStatus.REFRESHING):
                new_status = LoadStatus.REFRESHING
            else:
                new_status = LoadStatus.LOADING
            self._store(key, new_status)
            return new_status

    def finish(self, user_id: Hashable, project_id: Hashable, ok: bool = True) -> LoadStatus:
        """A failed first load falls back to idle so the next fetch is a full load again."""
        key = (user_id, project_id)
        with self._lock:
            current = self._states.get(key, LoadStatus.IDLE)
            if ok or current == LoadStatus.REFRESHING:
                new_status = LoadStatus.LOADED
            else:
                new_status = LoadStatus.IDLE
            self._store(key, new_status)
            return new_status

    def reset(self, user_id: Hashable = None, project_id: Hashable = None) -> None:
        with self._lock:
            if user_id is None and project_id is None:
                self._states.clear()
                return
            for key in [k for k in self._states if (user_id is None or k[0] == user_id)
                        and (project_id is None or k[1] == project_id)]:
                del self._states[key]


load_tracker = LoadTracker()
