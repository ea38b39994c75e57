from typing import Optional


class FetchError(Exception):
    """Upstream page fetch failed (network error, non-success status or unreadable body)."""

    def __init__(self, message: str, *, offset: int = 0, topic: str = "", status: Optional[int] = None):
        super().__init__(message)
        self.offset = offset
        self.topic = topic
        self.status = status
