from datetime import timedelta
from logging import Logger

from ecs_local.domain.clock import Clock
from ecs_local.domain.credential_cache import CredentialCache
from ecs_local.domain.credential_provider import CredentialProvider
from ecs_local.domain.credentials import Credentials
from ecs_local.domain.identity_context import IdentityContext

CACHE_SAFETY_MARGIN = timedelta(minutes=5)


class CachingCredentialProvider(CredentialProvider):
    """Serves credentials from a durable cache, falling back to the wrapped provider.

    Only credentials that carry an expiry are cached. A cached entry is used while the current time
    is earlier than its expiry minus the safety margin; after that the wrapped provider is asked
    again (which may prompt for an MFA code) and the cache entry is overwritten.
    """

    def __init__(self, underlying_provider: CredentialProvider, credential_cache: CredentialCache, clock: Clock,
                 logger: Logger, safety_margin: timedelta = CACHE_SAFETY_MARGIN):
        self.__underlying_provider = underlying_provider
        self.__credential_cache = credential_cache
        self.__clock = clock
        self.__logger = logger
        self.__safety_margin = safety_margin

    def resolve(self, identity_context: IdentityContext) -> Credentials:
        cache_key = identity_context.cache_key
        cached_credentials = self.__credential_cache.get(cache_key)

        if cached_credentials is not None and cached_credentials.expiry is not None:
            if cached_credentials.usable_at(self.__clock.now(), self.__safety_margin):
                self.__logger.debug('Using cached credentials for "%s", valid until %s', cache_key,
                                    cached_credentials.expiry.isoformat())
                return cached_credentials

            self.__logger.debug('Cached credentials for "%s" have expired', cache_key)
        else:
            self.__logger.debug('No cached credentials for "%s"', cache_key)

        credentials = self.__underlying_provider.resolve(identity_context)

        if credentials.expiry is None:
            self.__logger.debug('Credentials from %s do not expire, not caching them', credentials.provider_name)
        else:
            self.__credential_cache.put(cache_key, credentials)

        return credentials
