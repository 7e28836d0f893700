import os
from datetime import datetime
from logging import Logger
from typing import Mapping, Optional

import botocore.credentials
import botocore.session
from botocore.exceptions import BotoCoreError, ClientError

from ecs_local.domain.credential_provider import CredentialProvider
from ecs_local.domain.credentials import Credentials
from ecs_local.domain.errors import IdentityError
from ecs_local.domain.identity_context import IdentityContext

DEFAULT_PROFILE = 'default'
PROFILE_ENVIRONMENT_VARIABLES = ('AWS_PROFILE', 'AWS_DEFAULT_PROFILE')


class BotocoreCredentialProvider(CredentialProvider):
    """Resolves credentials through botocore's default provider chain for the context's profile.

    Role profiles with an ``mfa_serial`` make botocore prompt for a token code on the terminal.
    """

    def __init__(self, logger: Logger):
        self.__logger = logger

    def resolve(self, identity_context: IdentityContext) -> Credentials:
        session = botocore_session_for(identity_context)

        try:
            botocore_credentials = session.get_credentials()

            if botocore_credentials is None:
                raise IdentityError(f'No AWS credentials found for profile "{identity_context.profile_name}"')

            frozen_credentials = botocore_credentials.get_frozen_credentials()
        except (BotoCoreError, ClientError) as e:
            raise IdentityError(
                f'Unable to resolve AWS credentials for profile "{identity_context.profile_name}": {e}'
            ) from e
        except EOFError as e:
            raise IdentityError('No MFA token code was provided') from e

        self.__logger.debug('Resolved credentials for "%s" using %s', identity_context.profile_name,
                            botocore_credentials.method)

        return Credentials(
            access_key=frozen_credentials.access_key,
            secret_key=frozen_credentials.secret_key,
            session_token=frozen_credentials.token,
            expiry=expiry_of(botocore_credentials, self.__logger),
            provider_name=botocore_credentials.method
        )


def expiry_of(botocore_credentials: botocore.credentials.Credentials, logger: Logger) -> Optional[datetime]:
    if not isinstance(botocore_credentials, botocore.credentials.RefreshableCredentials):
        return None

    # botocore has no public accessor for the expiry of refreshable credentials
    # noinspection PyProtectedMember
    expiry = getattr(botocore_credentials, '_expiry_time', None)

    if not isinstance(expiry, datetime) or expiry.tzinfo is None:
        logger.warning('Unable to determine when credentials from %s expire, they will not be cached',
                       botocore_credentials.method)
        return None

    return expiry


def identity_context_for(profile_name: str, region: str) -> IdentityContext:
    session = botocore.session.Session()
    profile_config = session.full_config.get('profiles', {}).get(profile_name, {})
    role_arn: Optional[str] = profile_config.get('role_arn')

    return IdentityContext(profile_name=profile_name, region=region, role_arn=role_arn)


def botocore_session_for(identity_context: IdentityContext,
                         environment: Optional[Mapping[str, str]] = None) -> botocore.session.Session:
    profile = _explicit_profile_for(identity_context.profile_name, os.environ if environment is None else environment)

    try:
        session = botocore.session.Session(profile=profile)
        session.set_config_variable('region', identity_context.region)
        # Fails fast with ProfileNotFound instead of on the first client created from the session
        session.get_scoped_config()
        return session
    except BotoCoreError as e:
        raise IdentityError(f'Unable to use AWS profile "{identity_context.profile_name}": {e}') from e


def _explicit_profile_for(profile_name: str, environment: Mapping[str, str]) -> Optional[str]:
    # An explicit profile makes botocore skip credentials from the environment, so the default
    # profile is left implicit unless the environment would select a different one.
    environment_profiles = {environment.get(variable) for variable in PROFILE_ENVIRONMENT_VARIABLES}

    if profile_name == DEFAULT_PROFILE and environment_profiles <= {None, '', DEFAULT_PROFILE}:
        return None

    return profile_name
