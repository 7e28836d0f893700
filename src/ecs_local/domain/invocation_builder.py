from typing import Optional, Sequence

from ecs_local.domain.credentials import Credentials
from ecs_local.domain.invocation_spec import BASE_RUNTIME_FLAGS, EnvironmentVariable, InvocationSpec, MountSpec
from ecs_local.domain.task_definition import ContainerDefinition


def build_invocation(container_definition: ContainerDefinition, scoped_credentials: Optional[Credentials],
                     user_mounts: Sequence[MountSpec], user_envs: Sequence[EnvironmentVariable],
                     command: Optional[Sequence[str]] = None) -> InvocationSpec:
    environment = [EnvironmentVariable(name, value) for name, value in container_definition.environment]

    if scoped_credentials is not None:
        environment.append(EnvironmentVariable('AWS_ACCESS_KEY_ID', scoped_credentials.access_key))
        environment.append(EnvironmentVariable('AWS_SECRET_ACCESS_KEY', scoped_credentials.secret_key))
        environment.append(EnvironmentVariable('AWS_SESSION_TOKEN', scoped_credentials.session_token or ''))

    if command:
        final_command = tuple(command)
    else:
        final_command = tuple(container_definition.command)

    return InvocationSpec(
        runtime_flags=BASE_RUNTIME_FLAGS,
        environment=tuple(environment),
        mounts=tuple(user_mounts),
        environment_overrides=tuple(user_envs),
        image=container_definition.image,
        command=final_command
    )
