from datetime import UTC, datetime


class Clock:
    """Single time source for every expiry comparison (naive UTC)"""

    def now(self) -> datetime:
        return datetime.now(UTC).replace(tzinfo=None)
