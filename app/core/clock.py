from datetime import datetime, timezone
import time


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string, the format every table stores."""
    return datetime.now(timezone.utc).isoformat()


def now_ms() -> int:
    return int(time.time() * 1000)
