import base64
import binascii
import re
from logging import Logger
from typing import Optional

from boto3 import Session
from botocore.exceptions import BotoCoreError, ClientError
from mypy_boto3_ecr import ECRClient

from ecs_local.domain.errors import RegistryAuthError
from ecs_local.domain.registry_auth import RegistryAuth
from ecs_local.domain.registry_authenticator import RegistryAuthenticator

ECR_IMAGE_PATTERN = re.compile(r'^(?P<account_id>\d{12})\.dkr\.ecr\.[a-z0-9-]+\.amazonaws\.com(\.cn)?/')


class EcrRegistryAuthenticator(RegistryAuthenticator):
    def __init__(self, boto_session: Session, logger: Logger):
        self.__ecr_client: ECRClient = boto_session.client('ecr')
        self.__logger = logger

    def authenticate(self, image: str) -> RegistryAuth:
        registry_id = registry_id_for(image)

        try:
            if registry_id is None:
                result = self.__ecr_client.get_authorization_token()
            else:
                result = self.__ecr_client.get_authorization_token(registryIds=[registry_id])
        except (BotoCoreError, ClientError) as e:
            raise RegistryAuthError(f'Unable to get registry authorization token: {e}') from e

        authorization_data = result.get('authorizationData', [])

        if not authorization_data:
            raise RegistryAuthError('Registry authorization response contained no authorization data')

        registry = authorization_data[0].get('proxyEndpoint', '')
        self.__logger.debug('Obtained authorization token for registry %s', registry)

        return decode_authorization_token(authorization_data[0].get('authorizationToken', ''), registry)


def registry_id_for(image: str) -> Optional[str]:
    match = ECR_IMAGE_PATTERN.match(image)

    return match.group('account_id') if match else None


def decode_authorization_token(authorization_token: str, registry: str) -> RegistryAuth:
    try:
        decoded_token = base64.b64decode(authorization_token, validate=True).decode('utf-8')
    except (binascii.Error, UnicodeDecodeError) as e:
        raise RegistryAuthError(f'Unable to decode registry authorization token: {e}') from e

    username, separator, password = decoded_token.partition(':')

    if not separator:
        raise RegistryAuthError('Registry authorization token is not of the form username:password')

    return RegistryAuth(username=username, password=password, registry=registry)
