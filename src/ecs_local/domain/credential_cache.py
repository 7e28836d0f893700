from abc import ABCMeta, abstractmethod
from typing import Optional

from ecs_local.domain.credentials import Credentials


class CredentialCache(metaclass=ABCMeta):
    @abstractmethod
    def get(self, cache_key: str) -> Optional[Credentials]:
        pass

    @abstractmethod
    def put(self, cache_key: str, credentials: Credentials) -> None:
        pass
