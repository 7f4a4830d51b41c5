"""
Time-ordered identifiers for records, notifications and patients.

Ids are decimal strings of the epoch time in milliseconds. Within one process
they are forced strictly increasing, so two ids minted in the same millisecond
still sort in creation order.
"""
import threading
import time

_lock = threading.Lock()
_last_issued = 0


def new_id() -> str:
    """Return a fresh, strictly increasing id."""
    global _last_issued
    with _lock:
        candidate = time.time_ns() // 1_000_000
        if candidate <= _last_issued:
            candidate = _last_issued + 1
        _last_issued = candidate
        return str(candidate)


def id_sort_key(value: str) -> tuple:
    """
    Sort key that orders decimal ids numerically.

    Shorter decimal strings are smaller numbers, so (length, text) matches
    numeric order without parsing and still works for non-numeric ids.
    """
    return (len(value), value)
