"""Settings for a run, gathered from flags, the environment and an optional YAML file."""

import os
from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, List, Mapping, Optional, Tuple

import yaml

from ecs_local.domain.errors import ConfigurationError

DEFAULT_CONFIG_FILE = 'ecs-local-config.yaml'
DEFAULT_PROFILE = 'default'
DEFAULT_REGION = 'us-east-1'


@dataclass(frozen=True)
class EcsLocalConfiguration:
    taskdef: Optional[str] = None
    action: Optional[str] = None
    profile: Optional[str] = None
    region: Optional[str] = None
    mounts: List[str] = field(default_factory=list)
    envs: List[str] = field(default_factory=list)
    verbose: bool = False

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> 'EcsLocalConfiguration':
        known_keys = {configuration_field.name for configuration_field in fields(cls)}
        values = {key: value for key, value in document.items() if key in known_keys}

        for list_key in ('mounts', 'envs'):
            if values.get(list_key) is None:
                values.pop(list_key, None)
            elif isinstance(values[list_key], str):
                values[list_key] = _split_list(values[list_key])
            elif isinstance(values[list_key], list):
                values[list_key] = [str(value) for value in values[list_key]]
            else:
                raise ConfigurationError(f'"{list_key}" must be a list of strings')

        for string_key in ('taskdef', 'action', 'profile', 'region'):
            if values.get(string_key) is not None:
                values[string_key] = str(values[string_key])

        values['verbose'] = bool(values.get('verbose', False))

        return cls(**values)

    def to_document(self) -> Dict[str, Any]:
        return dict(
            taskdef=self.taskdef,
            action=self.action,
            profile=self.profile,
            region=self.region,
            mounts=list(self.mounts),
            envs=list(self.envs),
            verbose=self.verbose
        )

    def overridden_by(self, other: 'EcsLocalConfiguration') -> 'EcsLocalConfiguration':
        """Returns this configuration with every value that ``other`` sets taking precedence."""
        return replace(
            self,
            taskdef=other.taskdef or self.taskdef,
            action=other.action or self.action,
            profile=other.profile or self.profile,
            region=other.region or self.region,
            mounts=other.mounts or self.mounts,
            envs=other.envs or self.envs,
            verbose=other.verbose or self.verbose
        )


def read_configuration_file(config_file_path: str, must_exist: bool) -> EcsLocalConfiguration:
    if not os.path.exists(config_file_path):
        if must_exist:
            raise ConfigurationError(f'Config file {config_file_path} does not exist')

        return EcsLocalConfiguration()

    try:
        with open(config_file_path, 'r', encoding='utf-8') as f:
            document = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f'Failed to read config file {config_file_path}: {e}') from e

    if document is None:
        return EcsLocalConfiguration()

    if not isinstance(document, dict):
        raise ConfigurationError(f'Config file {config_file_path} must contain a mapping')

    return EcsLocalConfiguration.from_document(document)


def write_configuration_file(config_file_path: str, configuration: EcsLocalConfiguration) -> None:
    try:
        with open(config_file_path, 'w', encoding='utf-8') as f:
            yaml.safe_dump(configuration.to_document(), f, default_flow_style=False, sort_keys=True)
    except OSError as e:
        raise ConfigurationError(f'Failed to write config file {config_file_path}: {e}') from e


def select_setting(flag_value: Optional[str], environment: Mapping[str, str], environment_variable: str,
                   configured_value: Optional[str], default: str) -> Tuple[str, str]:
    """Picks a setting and names where it came from: flag, environment, config file or default."""
    if flag_value:
        return flag_value, 'flag'

    environment_value = environment.get(environment_variable)
    if environment_value:
        return environment_value, environment_variable

    if configured_value:
        return configured_value, 'config file'

    return default, 'default'


def _split_list(value: str) -> List[str]:
    return [part.strip() for part in value.split(',') if part.strip()]
