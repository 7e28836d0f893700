from abc import ABCMeta, abstractmethod

from ecs_local.domain.registry_auth import RegistryAuth


class RegistryAuthenticator(metaclass=ABCMeta):
    @abstractmethod
    def authenticate(self, image: str) -> RegistryAuth:
        pass
