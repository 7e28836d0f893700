import shutil
import signal
import subprocess
import tempfile
from contextlib import contextmanager
from logging import Logger
from types import FrameType
from typing import Iterator, List, Optional

from ecs_local.domain.container_runtime import ContainerRuntime
from ecs_local.domain.errors import ImagePullError, RuntimeLaunchError
from ecs_local.domain.invocation_spec import InvocationSpec
from ecs_local.domain.registry_auth import RegistryAuth

FORWARDED_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class DockerCliContainerRuntime(ContainerRuntime):
    """Drives the ``docker`` command line client.

    Registry credentials only ever live in a throwaway Docker config directory that is removed once
    the pull has finished, so the user's own Docker configuration is left untouched.
    """

    def __init__(self, logger: Logger, docker_binary: str = 'docker'):
        resolved_docker_binary = shutil.which(docker_binary)

        if resolved_docker_binary is None:
            raise RuntimeLaunchError(f'Container runtime "{docker_binary}" was not found on the PATH')

        self.__docker_binary = resolved_docker_binary
        self.__logger = logger

    def pull(self, image: str, registry_auth: RegistryAuth) -> None:
        print(f'Pulling {image}', flush=True)

        with tempfile.TemporaryDirectory(prefix='ecs-local-docker-') as docker_config_directory:
            docker_command = [self.__docker_binary, '--config', docker_config_directory]

            if registry_auth.registry:
                self.__login(docker_command, registry_auth)

            self.__logger.debug('Executing command: %s', subprocess.list2cmdline(docker_command + ['pull', image]))
            completed_process = self.__execute(docker_command + ['pull', image])

            if completed_process.returncode != 0:
                raise ImagePullError(f'Unable to pull {image} (exit code {completed_process.returncode})')

    def run(self, invocation_spec: InvocationSpec) -> int:
        command_args = [self.__docker_binary] + invocation_spec.to_args()
        self.__logger.debug('Starting container from %s', invocation_spec.image)

        try:
            process = subprocess.Popen(command_args)
        except OSError as e:
            raise RuntimeLaunchError(f'Unable to start {self.__docker_binary}: {e}') from e

        with _signals_forwarded_to(process):
            return_code = process.wait()

        if return_code < 0:
            return 128 - return_code

        return return_code

    def __login(self, docker_command: List[str], registry_auth: RegistryAuth) -> None:
        self.__logger.debug('Logging in to %s', registry_auth.registry)

        completed_process = self.__execute(
            docker_command + ['login', '--username', registry_auth.username, '--password-stdin',
                              registry_auth.registry],
            stdin_text=registry_auth.password,
            capture_output=True
        )

        if completed_process.returncode != 0:
            raise ImagePullError(
                f'Unable to log in to {registry_auth.registry}: {completed_process.stderr.strip()}'
            )

    def __execute(self, command_args: List[str], stdin_text: Optional[str] = None,
                  capture_output: bool = False) -> subprocess.CompletedProcess[str]:
        try:
            return subprocess.run(command_args, input=stdin_text, capture_output=capture_output, encoding='utf-8')
        except OSError as e:
            raise RuntimeLaunchError(f'Unable to start {self.__docker_binary}: {e}') from e


@contextmanager
def _signals_forwarded_to(process: subprocess.Popen[bytes]) -> Iterator[None]:
    def forward(signal_number: int, _: Optional[FrameType]) -> None:
        if process.poll() is None:
            process.send_signal(signal_number)

    previous_handlers = {
        signal_number: signal.signal(signal_number, forward) for signal_number in FORWARDED_SIGNALS
    }

    try:
        yield
    finally:
        for signal_number, previous_handler in previous_handlers.items():
            signal.signal(signal_number, previous_handler)
