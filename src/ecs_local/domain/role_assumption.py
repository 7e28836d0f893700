from abc import ABCMeta, abstractmethod
from dataclasses import dataclass
from typing import Union

from ecs_local.domain.credentials import Credentials
from ecs_local.domain.errors import RoleAssumptionError

ROLE_SESSION_NAME = 'ecs-local'
ROLE_SESSION_DURATION_SECONDS = 3600


@dataclass(frozen=True)
class AssumedRole:
    role_arn: str
    credentials: Credentials


@dataclass(frozen=True)
class RoleAssumptionFailure:
    role_arn: str
    error: RoleAssumptionError


RoleAssumptionResult = Union[AssumedRole, RoleAssumptionFailure]


class RoleAssumer(metaclass=ABCMeta):
    @abstractmethod
    def assume(self, role_arn: str) -> RoleAssumptionResult:
        pass
