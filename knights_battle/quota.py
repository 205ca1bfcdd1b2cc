"""Daily battle allowance and the attendance reward timer."""
from datetime import date, datetime, timedelta
from typing import Callable, Optional

from .config import ATTENDANCE_INTERVAL_SECONDS, ATTENDANCE_REWARD, DAILY_BATTLE_LIMIT
from .errors import AttendanceNotReady, DailyQuotaExceeded


class DailyBattleQuota:
    """Counts battles per local calendar day.

    The counter resets lazily the first time it is touched after local
    midnight; `clock` returns the current local datetime.
    """

    def __init__(
        self,
        limit: int = DAILY_BATTLE_LIMIT,
        clock: Callable[[], datetime] = datetime.now,
        used: int = 0,
        day: Optional[date] = None,
    ):
        self.limit = limit
        self.clock = clock
        self.used = used
        self.day = day or clock().date()

    def _roll_over(self) -> None:
        today = self.clock().date()
        if today != self.day:
            self.day = today
            self.used = 0

    @property
    def remaining(self) -> int:
        self._roll_over()
        return max(self.limit - self.used, 0)

    def check(self) -> None:
        if self.remaining <= 0:
            raise DailyQuotaExceeded(f"Daily battle limit reached ({self.limit}/day)")

    def consume(self) -> int:
        """Use one battle; returns the battles left today."""
        self.check()
        self.used += 1
        return self.limit - self.used

    def to_dict(self) -> dict:
        return {"limit": self.limit, "used": self.used, "day": self.day.isoformat()}

    @classmethod
    def from_dict(
        cls,
        data: Optional[dict],
        limit: int = DAILY_BATTLE_LIMIT,
        clock: Callable[[], datetime] = datetime.now,
    ) -> "DailyBattleQuota":
        """Restore a saved counter. The limit always comes from the caller."""
        if not data:
            return cls(limit=limit, clock=clock)
        return cls(
            limit=limit,
            clock=clock,
            used=int(data.get("used", 0)),
            day=date.fromisoformat(data["day"]) if data.get("day") else None,
        )


class AttendanceClock:
    """Grants a gold reward at most once per interval."""

    def __init__(
        self,
        interval: timedelta = timedelta(seconds=ATTENDANCE_INTERVAL_SECONDS),
        reward: int = ATTENDANCE_REWARD,
        last_claim: Optional[datetime] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.interval = interval
        self.reward = reward
        self.last_claim = last_claim
        self.clock = clock

    def is_due(self) -> bool:
        if self.last_claim is None:
            return True
        return self.clock() - self.last_claim >= self.interval

    def time_until_due(self) -> timedelta:
        if self.is_due():
            return timedelta(0)
        return self.last_claim + self.interval - self.clock()

    def claim(self) -> int:
        if not self.is_due():
            raise AttendanceNotReady("Attendance reward is not ready yet")
        self.last_claim = self.clock()
        return self.reward
