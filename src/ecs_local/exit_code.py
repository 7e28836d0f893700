from enum import IntEnum

from ecs_local.domain.errors import ControlPlaneError, EcsLocalError, IdentityError, ImagePullError, \
    RegistryAuthError, RuntimeLaunchError


class ExitCode(IntEnum):
    OK = 0
    ERROR = 1
    DOCKER_ERROR = 2
    FLAG_PARSE_ERROR = 13
    AWS_ERROR = 14


def exit_code_for(error: EcsLocalError) -> ExitCode:
    if isinstance(error, (IdentityError, ControlPlaneError)):
        return ExitCode.AWS_ERROR

    if isinstance(error, (RegistryAuthError, ImagePullError, RuntimeLaunchError)):
        return ExitCode.DOCKER_ERROR

    return ExitCode.ERROR
