import contextlib
import threading
from typing import Any, Dict

_registry_lock = threading.Lock()
_program_locks: Dict[str, threading.Lock] = {}


def _lock_for(program_id: Any) -> threading.Lock:
    key = str(program_id)
    with _registry_lock:
        lock = _program_locks.get(key)
        if lock is None:
            lock = threading.Lock()
            _program_locks[key] = lock
        return lock


@contextlib.contextmanager
def program_write_lock(program_id: Any):
    """Serialise match-creating writes for one programme within this process.

    Cross-process writers are serialised by the programme row lock taken in
    the same transaction, and the partial unique index backs both.
    """
    lock = _lock_for(program_id)
    with lock:
        yield
