from abc import ABCMeta, abstractmethod
from datetime import datetime


class Clock(metaclass=ABCMeta):
    @abstractmethod
    def now(self) -> datetime:
        pass
