from logging import Logger
from typing import Optional

from botocore.exceptions import BotoCoreError

from ecs_local.domain.caching_credential_provider import CachingCredentialProvider
from ecs_local.domain.errors import IdentityError
from ecs_local.domain.identity_context import IdentityContext
from ecs_local.domain.local_task_runner import LocalTaskRunner
from ecs_local.infrastructure.botocore_credential_provider import BotocoreCredentialProvider
from ecs_local.infrastructure.cached_boto_session import cached_boto_session
from ecs_local.infrastructure.docker_cli_container_runtime import DockerCliContainerRuntime
from ecs_local.infrastructure.ecr_registry_authenticator import EcrRegistryAuthenticator
from ecs_local.infrastructure.ecs_task_definition_source import EcsTaskDefinitionSource
from ecs_local.infrastructure.json_file_credential_cache import JsonFileCredentialCache, \
    default_credential_cache_path
from ecs_local.infrastructure.sts_role_assumer import StsRoleAssumer
from ecs_local.infrastructure.system_clock import SystemClock

__version__ = '0.3.0'

__all__ = ["ecs_local_task_runner", "LocalTaskRunner", "__version__"]


def ecs_local_task_runner(identity_context: IdentityContext, logger: Logger,
                          credential_cache_path: Optional[str] = None) -> LocalTaskRunner:
    """Wires a ``LocalTaskRunner`` for the given identity.

    Creating the AWS clients already resolves credentials through the cache, so this is where an
    expired cache entry leads to the MFA prompt, and where ``IdentityError`` is raised for a missing
    profile or missing credentials. A missing ``docker`` binary raises ``RuntimeLaunchError`` before
    any of that happens.
    """
    container_runtime = DockerCliContainerRuntime(logger)

    credential_provider = CachingCredentialProvider(
        BotocoreCredentialProvider(logger),
        JsonFileCredentialCache(credential_cache_path or default_credential_cache_path(), logger),
        SystemClock(),
        logger
    )
    boto_session = cached_boto_session(identity_context, credential_provider)

    try:
        task_definition_source = EcsTaskDefinitionSource(boto_session, logger)
        registry_authenticator = EcrRegistryAuthenticator(boto_session, logger)
        role_assumer = StsRoleAssumer(boto_session, logger)
    except BotoCoreError as e:
        raise IdentityError(f'Unable to create AWS clients for profile "{identity_context.profile_name}": {e}') from e

    return LocalTaskRunner(
        identity_context,
        credential_provider,
        task_definition_source,
        registry_authenticator,
        role_assumer,
        container_runtime,
        logger
    )
