import logging
from datetime import datetime, timezone
from logging import Logger
from pathlib import Path

import pytest

from ecs_local_test_support.fixed_clock import FixedClock

AWS_ENVIRONMENT_VARIABLES = [
    'AWS_ACCESS_KEY_ID', 'AWS_SECRET_ACCESS_KEY', 'AWS_SESSION_TOKEN', 'AWS_SECURITY_TOKEN', 'AWS_PROFILE',
    'AWS_DEFAULT_PROFILE', 'AWS_CONTAINER_CREDENTIALS_RELATIVE_URI', 'AWS_CONTAINER_CREDENTIALS_FULL_URI',
    'AWS_WEB_IDENTITY_TOKEN_FILE', 'AWS_ROLE_ARN',
]


@pytest.fixture(scope="session")
def logger() -> Logger:
    return logging.getLogger()


@pytest.fixture(scope="function")
def clock() -> FixedClock:
    return FixedClock(datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture(scope="function")
def aws_config_directory(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    for variable in AWS_ENVIRONMENT_VARIABLES:
        monkeypatch.delenv(variable, raising=False)

    aws_directory = tmp_path / 'aws'
    aws_directory.mkdir()
    (aws_directory / 'config').write_text('')
    (aws_directory / 'credentials').write_text('')
    monkeypatch.setenv('AWS_CONFIG_FILE', str(aws_directory / 'config'))
    monkeypatch.setenv('AWS_SHARED_CREDENTIALS_FILE', str(aws_directory / 'credentials'))
    monkeypatch.setenv('BOTO_CONFIG', str(aws_directory / 'boto.cfg'))
    monkeypatch.setenv('AWS_EC2_METADATA_DISABLED', 'true')

    return aws_directory
