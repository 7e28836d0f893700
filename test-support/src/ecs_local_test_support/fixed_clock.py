from datetime import datetime, timedelta

from ecs_local.domain.clock import Clock


class FixedClock(Clock):
    def __init__(self, now: datetime):
        self.__now = now

    def now(self) -> datetime:
        return self.__now

    def advance(self, duration: timedelta) -> None:
        self.__now = self.__now + duration
