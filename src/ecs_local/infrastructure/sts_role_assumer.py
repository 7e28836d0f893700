from logging import Logger

from boto3 import Session
from botocore.exceptions import BotoCoreError, ClientError
from mypy_boto3_sts import STSClient

from ecs_local.domain.credentials import Credentials
from ecs_local.domain.errors import RoleAssumptionError
from ecs_local.domain.role_assumption import AssumedRole, ROLE_SESSION_DURATION_SECONDS, ROLE_SESSION_NAME, \
    RoleAssumer, RoleAssumptionFailure, RoleAssumptionResult


class StsRoleAssumer(RoleAssumer):
    def __init__(self, boto_session: Session, logger: Logger):
        self.__sts_client: STSClient = boto_session.client('sts')
        self.__logger = logger

    def assume(self, role_arn: str) -> RoleAssumptionResult:
        self.__logger.debug('Assuming role %s', role_arn)

        try:
            result = self.__sts_client.assume_role(
                RoleArn=role_arn,
                RoleSessionName=ROLE_SESSION_NAME,
                DurationSeconds=ROLE_SESSION_DURATION_SECONDS
            )
        except (BotoCoreError, ClientError) as e:
            return RoleAssumptionFailure(role_arn, RoleAssumptionError(str(e)))

        role_credentials = result['Credentials']

        return AssumedRole(role_arn, Credentials(
            access_key=role_credentials['AccessKeyId'],
            secret_key=role_credentials['SecretAccessKey'],
            session_token=role_credentials['SessionToken'],
            expiry=role_credentials['Expiration'],
            provider_name='AssumeRoleProvider'
        ))
