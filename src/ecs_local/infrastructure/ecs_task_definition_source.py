from logging import Logger
from typing import Any, Mapping

from boto3 import Session
from botocore.exceptions import BotoCoreError, ClientError
from mypy_boto3_ecs import ECSClient

from ecs_local.domain.errors import ControlPlaneError
from ecs_local.domain.task_definition import ContainerDefinition, TaskDefinition
from ecs_local.domain.task_definition_source import TaskDefinitionSource


class EcsTaskDefinitionSource(TaskDefinitionSource):
    def __init__(self, boto_session: Session, logger: Logger):
        self.__ecs_client: ECSClient = boto_session.client('ecs')
        self.__logger = logger

    def fetch(self, task_definition_name: str) -> TaskDefinition:
        self.__logger.debug('Describing task definition "%s"', task_definition_name)

        try:
            result = self.__ecs_client.describe_task_definition(taskDefinition=task_definition_name)
        except (BotoCoreError, ClientError) as e:
            raise ControlPlaneError(f'Unable to describe task definition "{task_definition_name}": {e}') from e

        task_definition = result['taskDefinition']
        container_definitions = [
            _container_definition_from(container_definition)
            for container_definition in task_definition.get('containerDefinitions', [])
        ]

        if not container_definitions:
            raise ControlPlaneError(f'Task definition "{task_definition_name}" has no container definitions')

        return TaskDefinition(
            arn=task_definition['taskDefinitionArn'],
            container_definitions=container_definitions,
            role_arn=task_definition.get('taskRoleArn')
        )


def _container_definition_from(container_definition: Mapping[str, Any]) -> ContainerDefinition:
    return ContainerDefinition(
        image=container_definition['image'],
        command=list(container_definition.get('command', [])),
        environment=[
            (environment_variable['name'], environment_variable.get('value', ''))
            for environment_variable in container_definition.get('environment', [])
        ]
    )
