"""Command line entry point for ecs-local."""

import logging
import os
import shlex
import sys
from typing import List, Optional, Sequence, Tuple

import click

from ecs_local import __version__, ecs_local_task_runner
from ecs_local.configuration import DEFAULT_CONFIG_FILE, DEFAULT_PROFILE, DEFAULT_REGION, EcsLocalConfiguration, \
    read_configuration_file, select_setting, write_configuration_file
from ecs_local.domain.errors import EcsLocalError, InvalidInvocationError
from ecs_local.domain.local_run_request import parse_local_run_request
from ecs_local.exit_code import ExitCode, exit_code_for
from ecs_local.infrastructure.botocore_credential_provider import identity_context_for

LOGGER_NAME = 'ecs_local'


@click.command(
    context_settings=dict(help_option_names=['-h', '--help']),
    epilog="Example: ecs-local -t stage-accounts -m src:dest -c ecs-local-config.yaml -a 'bundle exec rails c'"
)
@click.version_option(version=__version__, prog_name='ecs-local')
@click.option('-c', '--config', 'config_file', default=None,
              help=f'Read from, or with -w write to, this config file (default is {DEFAULT_CONFIG_FILE}).')
@click.option('-p', '--profile', default=None, help='AWS profile.')
@click.option('-r', '--region', default=None, help='AWS region.')
@click.option('-t', '--taskdef', default=None, help='Task definition family, family:revision or ARN.')
@click.option('-a', '--action', default=None, help='Command to run in the container.')
@click.option('-m', '--mounts', multiple=True, help='Mount SRC:DEST. Can be repeated or comma separated.')
@click.option('-e', '--envs', multiple=True, help='Environment variable KEY=VALUE. Can be repeated or comma separated.')
@click.option('-v', '--verbose', is_flag=True, default=False, help='Verbose output.')
@click.option('-w', '--write', is_flag=True, default=False, help='Write the flags to the config file and exit.')
@click.argument('command', nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def ecs_local(ctx: click.Context, config_file: Optional[str], profile: Optional[str], region: Optional[str],
              taskdef: Optional[str], action: Optional[str], mounts: Tuple[str, ...], envs: Tuple[str, ...],
              verbose: bool, write: bool, command: Tuple[str, ...]) -> None:
    """Run an ECS task definition as a local Docker container."""
    config_file_path = config_file or DEFAULT_CONFIG_FILE
    flag_configuration = EcsLocalConfiguration(
        taskdef=taskdef,
        action=action,
        profile=profile,
        region=region,
        mounts=_split_list_flags(mounts),
        envs=_split_list_flags(envs),
        verbose=verbose
    )

    try:
        if write:
            write_configuration_file(config_file_path, flag_configuration)
            click.echo('Config saved')
            ctx.exit(ExitCode.OK)

        file_configuration = read_configuration_file(config_file_path, must_exist=config_file is not None)
    except EcsLocalError as e:
        click.echo(str(e), err=True)
        ctx.exit(exit_code_for(e))

    configuration = file_configuration.overridden_by(flag_configuration)
    logger = _configure_logging(configuration.verbose)

    if not configuration.taskdef:
        click.echo('no taskdef defined')
        click.echo(ctx.get_help())
        ctx.exit(ExitCode.OK)

    region_name, region_source = select_setting(region, os.environ, 'AWS_REGION', file_configuration.region,
                                                DEFAULT_REGION)
    profile_name, profile_source = select_setting(profile, os.environ, 'AWS_PROFILE', file_configuration.profile,
                                                  DEFAULT_PROFILE)
    logger.debug('Using AWS region "%s" from %s', region_name, region_source)
    logger.debug('Using AWS profile "%s" from %s', profile_name, profile_source)

    try:
        request = parse_local_run_request(
            configuration.taskdef,
            command=_command_from(command, configuration.action),
            raw_mounts=configuration.mounts,
            raw_envs=configuration.envs
        )
        task_runner = ecs_local_task_runner(identity_context_for(profile_name, region_name), logger)
        exit_code = task_runner.run(request)
    except EcsLocalError as e:
        logger.debug('Run failed', exc_info=e)
        click.echo(str(e), err=True)
        ctx.exit(exit_code_for(e))

    ctx.exit(exit_code)


def main(args: Optional[Sequence[str]] = None) -> None:
    try:
        exit_code = ecs_local.main(args=args, prog_name='ecs-local', standalone_mode=False)
    except click.UsageError as e:
        e.show()
        sys.exit(ExitCode.FLAG_PARSE_ERROR)
    except click.ClickException as e:
        e.show()
        sys.exit(ExitCode.ERROR)
    except click.Abort:
        click.echo('Aborted!', err=True)
        sys.exit(ExitCode.ERROR)

    sys.exit(int(exit_code or ExitCode.OK))


def _configure_logging(verbose: bool) -> logging.Logger:
    logging.basicConfig(level=logging.ERROR, format='%(levelname)s %(message)s')

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG if verbose else logging.ERROR)

    return logger


def _command_from(command_args: Tuple[str, ...], action: Optional[str]) -> Optional[List[str]]:
    if command_args:
        return list(command_args)

    if not action:
        return None

    try:
        return shlex.split(action)
    except ValueError as e:
        raise InvalidInvocationError(f'Invalid action "{action}": {e}') from e


def _split_list_flags(values: Sequence[str]) -> List[str]:
    return [part.strip() for value in values for part in value.split(',') if part.strip()]
