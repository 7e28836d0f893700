from logging import Logger
from typing import Optional

from ecs_local.domain.container_runtime import ContainerRuntime
from ecs_local.domain.credential_provider import CredentialProvider
from ecs_local.domain.credentials import Credentials
from ecs_local.domain.identity_context import IdentityContext
from ecs_local.domain.invocation_builder import build_invocation
from ecs_local.domain.local_run_request import LocalRunRequest
from ecs_local.domain.registry_authenticator import RegistryAuthenticator
from ecs_local.domain.role_assumption import AssumedRole, RoleAssumer
from ecs_local.domain.task_definition import TaskDefinition
from ecs_local.domain.task_definition_source import TaskDefinitionSource


class LocalTaskRunner:
    """Runs the first container of an ECS task definition on the local container runtime.

    Identity, task lookup, registry authentication, image pull and container launch failures all
    propagate. A task role that cannot be assumed only means the container starts without the
    role's AWS credentials in its environment.
    """

    def __init__(self, identity_context: IdentityContext, credential_provider: CredentialProvider,
                 task_definition_source: TaskDefinitionSource, registry_authenticator: RegistryAuthenticator,
                 role_assumer: RoleAssumer, container_runtime: ContainerRuntime, logger: Logger):
        self.__identity_context = identity_context
        self.__credential_provider = credential_provider
        self.__task_definition_source = task_definition_source
        self.__registry_authenticator = registry_authenticator
        self.__role_assumer = role_assumer
        self.__container_runtime = container_runtime
        self.__logger = logger

    def run(self, request: LocalRunRequest) -> int:
        credentials = self.__credential_provider.resolve(self.__identity_context)
        self.__logger.debug('Credential provider is %s', credentials.provider_name)

        task_definition = self.__task_definition_source.fetch(request.task_definition_name)
        self.__logger.debug('Found task %s', task_definition.arn)
        container_definition = task_definition.primary_container

        registry_auth = self.__registry_authenticator.authenticate(container_definition.image)
        self.__container_runtime.pull(container_definition.image, registry_auth)

        invocation_spec = build_invocation(
            container_definition,
            self.__assume_task_role(task_definition),
            request.mounts,
            request.envs,
            request.command
        )
        self.__logger.debug('Running command "%s"', ' '.join(invocation_spec.command))

        return self.__container_runtime.run(invocation_spec)

    def __assume_task_role(self, task_definition: TaskDefinition) -> Optional[Credentials]:
        if task_definition.role_arn is None:
            return None

        result = self.__role_assumer.assume(task_definition.role_arn)

        if isinstance(result, AssumedRole):
            self.__logger.debug('Successfully assumed container role %s', result.role_arn)
            return result.credentials

        self.__logger.debug('Unable to assume role %s: %s', result.role_arn, result.error)
        return None
