import threading
import time

_lock = threading.Lock()
_last_token = 0


def _next_token() -> int:
    global _last_token
    with _lock:
        now_ms = int(time.time() * 1000)
        _last_token = max(now_ms, _last_token + 1)
        return _last_token


def generate_id(prefix: str) -> str:
    """Return ``<prefix><millisecond timestamp>``, strictly increasing per process."""
    return f"{prefix}{_next_token()}"


def ruleset_id() -> str:
    return generate_id("RS-")


def cashback_id() -> str:
    return generate_id("CB-")
