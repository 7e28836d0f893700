from abc import ABCMeta, abstractmethod

from ecs_local.domain.credentials import Credentials
from ecs_local.domain.identity_context import IdentityContext


class CredentialProvider(metaclass=ABCMeta):
    @abstractmethod
    def resolve(self, identity_context: IdentityContext) -> Credentials:
        pass
