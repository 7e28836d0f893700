from logging import Logger
from pathlib import Path
from typing import List, Optional

import pytest
from click.testing import CliRunner, Result

from ecs_local import cli
from ecs_local.domain.errors import ControlPlaneError, EcsLocalError, RuntimeLaunchError
from ecs_local.domain.identity_context import IdentityContext
from ecs_local.domain.invocation_spec import EnvironmentVariable, MountSpec
from ecs_local.domain.local_run_request import LocalRunRequest


class RecordingTaskRunner:
    def __init__(self, exit_code: int = 0, error: Optional[EcsLocalError] = None):
        self.requests: List[LocalRunRequest] = []
        self.__exit_code = exit_code
        self.__error = error

    def run(self, request: LocalRunRequest) -> int:
        self.requests.append(request)

        if self.__error is not None:
            raise self.__error

        return self.__exit_code


class Harness:
    def __init__(self, monkeypatch: pytest.MonkeyPatch):
        self.task_runner = RecordingTaskRunner()
        self.factory_error: Optional[EcsLocalError] = None
        self.identity_contexts: List[IdentityContext] = []
        monkeypatch.setattr(cli, 'identity_context_for', self.__identity_context_for)
        monkeypatch.setattr(cli, 'ecs_local_task_runner', self.__ecs_local_task_runner)

    def invoke(self, *args: str) -> Result:
        return CliRunner().invoke(cli.ecs_local, list(args))

    @property
    def request(self) -> LocalRunRequest:
        assert len(self.task_runner.requests) == 1
        return self.task_runner.requests[0]

    def __identity_context_for(self, profile_name: str, region: str) -> IdentityContext:
        return IdentityContext(profile_name=profile_name, region=region)

    def __ecs_local_task_runner(self, identity_context: IdentityContext, _: Logger) -> RecordingTaskRunner:
        self.identity_contexts.append(identity_context)

        if self.factory_error is not None:
            raise self.factory_error

        return self.task_runner


@pytest.fixture(scope='function')
def harness(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Harness:
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv('AWS_PROFILE', raising=False)
    monkeypatch.delenv('AWS_REGION', raising=False)
    return Harness(monkeypatch)


def test_prints_help_and_succeeds_when_no_task_definition_is_given(harness: Harness) -> None:
    result = harness.invoke()

    assert result.exit_code == 0
    assert 'no taskdef defined' in result.output
    assert '--taskdef' in result.output
    assert harness.identity_contexts == []


def test_runs_task_definition_with_mounts_and_environment_overrides(harness: Harness) -> None:
    result = harness.invoke('-t', 'stage-accounts', '-m', 'src:/app/src,config:/app/config', '-m', 'log:/app/log',
                            '-e', 'FOO=bar', '-e', 'BAZ=qux=1')

    assert result.exit_code == 0
    assert harness.request == LocalRunRequest(
        task_definition_name='stage-accounts',
        command=None,
        mounts=[MountSpec('src', '/app/src'), MountSpec('config', '/app/config'), MountSpec('log', '/app/log')],
        envs=[EnvironmentVariable('FOO', 'bar'), EnvironmentVariable('BAZ', 'qux=1')]
    )


def test_splits_action_into_command_arguments(harness: Harness) -> None:
    harness.invoke('-t', 'stage-accounts', '-a', "bundle exec rails runner 'puts 1'")

    assert harness.request.command == ['bundle', 'exec', 'rails', 'runner', 'puts 1']


def test_prefers_trailing_arguments_over_action(harness: Harness) -> None:
    harness.invoke('-t', 'stage-accounts', '-a', 'rails c', '--', 'sh', '-c', 'echo hi')

    assert harness.request.command == ['sh', '-c', 'echo hi']


def test_uses_default_profile_and_region(harness: Harness) -> None:
    harness.invoke('-t', 'stage-accounts')

    assert harness.identity_contexts == [IdentityContext(profile_name='default', region='us-east-1')]


def test_prefers_flags_over_environment_over_config_file(harness: Harness, monkeypatch: pytest.MonkeyPatch,
                                                         tmp_path: Path) -> None:
    (tmp_path / 'ecs-local-config.yaml').write_text('taskdef: app\nprofile: file-profile\nregion: eu-west-1\n')
    monkeypatch.setenv('AWS_PROFILE', 'env-profile')

    harness.invoke()
    harness.invoke('-p', 'flag-profile', '-r', 'ap-southeast-2')

    assert harness.identity_contexts == [
        IdentityContext(profile_name='env-profile', region='eu-west-1'),
        IdentityContext(profile_name='flag-profile', region='ap-southeast-2'),
    ]


def test_writes_flags_to_config_file_for_later_runs(harness: Harness, tmp_path: Path) -> None:
    write_result = harness.invoke('-w', '-c', 'accounts.yaml', '-t', 'stage-accounts', '-a', 'rails c',
                                  '-m', 'src:/app')

    assert write_result.exit_code == 0
    assert 'Config saved' in write_result.output
    assert harness.task_runner.requests == []
    assert (tmp_path / 'accounts.yaml').exists()

    run_result = harness.invoke('-c', 'accounts.yaml')

    assert run_result.exit_code == 0
    assert harness.request == LocalRunRequest('stage-accounts', ['rails', 'c'], [MountSpec('src', '/app')], [])


def test_fails_when_named_config_file_does_not_exist(harness: Harness) -> None:
    result = harness.invoke('-c', 'missing.yaml')

    assert result.exit_code == 1
    assert 'does not exist' in result.output


def test_rejects_malformed_mount_before_contacting_aws(harness: Harness) -> None:
    result = harness.invoke('-t', 'stage-accounts', '-m', 'no-destination')

    assert result.exit_code == 1
    assert 'expected SOURCE:DESTINATION' in result.output
    assert harness.identity_contexts == []


def test_rejects_malformed_environment_override_before_contacting_aws(harness: Harness) -> None:
    result = harness.invoke('-t', 'stage-accounts', '-e', 'NO_VALUE')

    assert result.exit_code == 1
    assert 'expected KEY=VALUE' in result.output
    assert harness.identity_contexts == []


def test_exits_with_aws_error_code_when_task_definition_cannot_be_described(harness: Harness) -> None:
    harness.task_runner = RecordingTaskRunner(error=ControlPlaneError('Unable to describe task definition "x"'))

    result = harness.invoke('-t', 'x')

    assert result.exit_code == 14
    assert 'Unable to describe task definition "x"' in result.output


def test_exits_with_docker_error_code_when_docker_is_unavailable(harness: Harness) -> None:
    harness.factory_error = RuntimeLaunchError('Container runtime "docker" was not found on the PATH')

    result = harness.invoke('-t', 'stage-accounts')

    assert result.exit_code == 2
    assert 'was not found on the PATH' in result.output


def test_exits_with_exit_status_of_container(harness: Harness) -> None:
    harness.task_runner = RecordingTaskRunner(exit_code=42)

    assert harness.invoke('-t', 'stage-accounts').exit_code == 42


def test_prints_version(harness: Harness) -> None:
    result = harness.invoke('--version')

    assert result.exit_code == 0
    assert '0.3.0' in result.output


@pytest.mark.parametrize('args', [['--bogus'], ['-t']])
def test_exits_with_flag_parse_error_code_for_invalid_flags(args: List[str], harness: Harness) -> None:
    with pytest.raises(SystemExit) as exit_info:
        cli.main(args)

    assert exit_info.value.code == 13


def test_main_exits_with_exit_status_of_container(harness: Harness) -> None:
    harness.task_runner = RecordingTaskRunner(exit_code=3)

    with pytest.raises(SystemExit) as exit_info:
        cli.main(['-t', 'stage-accounts'])

    assert exit_info.value.code == 3
