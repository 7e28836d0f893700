from typing import Any, Dict, Optional

import boto3
import botocore.credentials

from ecs_local.domain.credential_provider import CredentialProvider
from ecs_local.domain.identity_context import IdentityContext
from ecs_local.infrastructure.botocore_credential_provider import botocore_session_for


class CacheBackedBotocoreCredentialProvider(botocore.credentials.CredentialProvider):
    METHOD = 'ecs-local-cache'
    CANONICAL_NAME = 'EcsLocalCache'

    def __init__(self, credential_provider: CredentialProvider, identity_context: IdentityContext):
        super().__init__()
        self.__credential_provider = credential_provider
        self.__identity_context = identity_context

    def load(self) -> Optional[botocore.credentials.Credentials]:
        metadata = self.__fetch_metadata()

        if metadata['expiry_time'] is None:
            return botocore.credentials.Credentials(
                metadata['access_key'], metadata['secret_key'], metadata['token'], method=self.METHOD
            )

        return botocore.credentials.RefreshableCredentials.create_from_metadata(
            metadata=metadata,
            refresh_using=self.__fetch_metadata,
            method=self.METHOD
        )

    def __fetch_metadata(self) -> Dict[str, Any]:
        credentials = self.__credential_provider.resolve(self.__identity_context)

        return dict(
            access_key=credentials.access_key,
            secret_key=credentials.secret_key,
            token=credentials.session_token,
            expiry_time=credentials.expiry.isoformat() if credentials.expiry else None
        )


def cached_boto_session(identity_context: IdentityContext, credential_provider: CredentialProvider) -> boto3.Session:
    """Builds a session for the context's profile that signs with credentials from ``credential_provider``.

    Raises ``IdentityError`` when the profile does not exist, whatever ``AWS_PROFILE`` says.
    """
    botocore_session = botocore_session_for(identity_context)

    credential_resolver = botocore_session.get_component('credential_provider')
    credential_resolver.providers.insert(
        0, CacheBackedBotocoreCredentialProvider(credential_provider, identity_context)
    )

    return boto3.Session(botocore_session=botocore_session, region_name=identity_context.region)
