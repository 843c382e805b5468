import time
from datetime import datetime, timezone

class SystemClock:
    """Clock source backed by the interpreter's monotonic and wall clocks"""

    def now(self) -> int:
        """Monotonic milliseconds, only meaningful as a difference"""
        return time.monotonic_ns() // 1_000_000

    def wall_time(self) -> datetime:
        return datetime.now(timezone.utc)
