from __future__ import annotations

import time
from datetime import datetime


class SystemClock:
    """Wall-clock source in whole seconds, plus the date/time strings mail system data carries."""

    def timestamp(self) -> int:
        return int(time.time())

    def now(self) -> datetime:
        return datetime.fromtimestamp(self.timestamp())

    def date_mail_format(self) -> str:
        return self.now().strftime("%d.%m.%Y")

    def time_mail_format(self) -> str:
        return self.now().strftime("%H:%M")


class FixedClock(SystemClock):
    def __init__(self, timestamp: int) -> None:
        self._timestamp = int(timestamp)

    def timestamp(self) -> int:
        return self._timestamp

    def advance(self, seconds: int) -> None:
        self._timestamp += int(seconds)
