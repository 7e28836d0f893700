from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from ecs_local.domain.invocation_spec import EnvironmentVariable, MountSpec


@dataclass(frozen=True)
class LocalRunRequest:
    task_definition_name: str
    command: Optional[List[str]] = None
    mounts: List[MountSpec] = field(default_factory=list)
    envs: List[EnvironmentVariable] = field(default_factory=list)


def parse_local_run_request(task_definition_name: str, command: Optional[Sequence[str]] = None,
                            raw_mounts: Sequence[str] = (), raw_envs: Sequence[str] = ()) -> LocalRunRequest:
    return LocalRunRequest(
        task_definition_name=task_definition_name,
        command=list(command) if command else None,
        mounts=[MountSpec.parse(raw_mount) for raw_mount in raw_mounts],
        envs=[EnvironmentVariable.parse(raw_env) for raw_env in raw_envs]
    )
