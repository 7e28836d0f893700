from abc import ABCMeta, abstractmethod

from ecs_local.domain.task_definition import TaskDefinition


class TaskDefinitionSource(metaclass=ABCMeta):
    @abstractmethod
    def fetch(self, task_definition_name: str) -> TaskDefinition:
        pass
