from dataclasses import dataclass, field
from typing import List, Optional, Tuple


@dataclass(frozen=True)
class ContainerDefinition:
    image: str
    command: List[str] = field(default_factory=list)
    environment: List[Tuple[str, str]] = field(default_factory=list)


@dataclass(frozen=True)
class TaskDefinition:
    arn: str
    container_definitions: List[ContainerDefinition]
    role_arn: Optional[str] = None

    @property
    def primary_container(self) -> ContainerDefinition:
        # Only the first container of a task is run locally
        return self.container_definitions[0]
