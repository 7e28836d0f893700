from datetime import datetime, timezone

from ecs_local.domain.clock import Clock


class SystemClock(Clock):
    def now(self) -> datetime:
        return datetime.now(timezone.utc)
