from abc import ABCMeta, abstractmethod

from ecs_local.domain.invocation_spec import InvocationSpec
from ecs_local.domain.registry_auth import RegistryAuth


class ContainerRuntime(metaclass=ABCMeta):
    @abstractmethod
    def pull(self, image: str, registry_auth: RegistryAuth) -> None:
        pass

    @abstractmethod
    def run(self, invocation_spec: InvocationSpec) -> int:
        pass
