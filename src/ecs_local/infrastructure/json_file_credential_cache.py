import json
import os
import tempfile
from datetime import datetime
from logging import Logger
from time import sleep
from typing import Any, Dict, Optional

from ecs_local.domain.credential_cache import CredentialCache
from ecs_local.domain.credentials import Credentials

DEFAULT_CREDENTIAL_CACHE_PATH = os.path.join('~', '.ecs-local', 'credential-cache.json')
CREDENTIAL_CACHE_PATH_ENV_VAR = 'ECS_LOCAL_CREDENTIAL_CACHE_PATH'


def default_credential_cache_path() -> str:
    return os.path.expanduser(os.environ.get(CREDENTIAL_CACHE_PATH_ENV_VAR, DEFAULT_CREDENTIAL_CACHE_PATH))


class JsonFileCredentialCache(CredentialCache):
    """Credential records kept in a single JSON document, one entry per cache key.

    The file is only ever replaced whole (temporary file plus rename), so a reader sees either the
    previous or the next version. Anything that cannot be read back is reported as a miss.
    """

    def __init__(self, cache_file_path: str, logger: Logger, read_attempts: int = 2,
                 read_retry_interval_seconds: float = 0.05):
        self.__cache_file_path = cache_file_path
        self.__logger = logger
        self.__read_attempts = read_attempts
        self.__read_retry_interval_seconds = read_retry_interval_seconds

    def get(self, cache_key: str) -> Optional[Credentials]:
        record = self.__read_entries().get(cache_key)

        if record is None:
            return None

        try:
            return _credentials_from_record(record)
        except (KeyError, TypeError, ValueError) as e:
            self.__logger.debug('Ignoring malformed credential cache entry "%s": %s', cache_key, e)
            return None

    def put(self, cache_key: str, credentials: Credentials) -> None:
        entries = self.__read_entries()
        entries[cache_key] = _record_from_credentials(credentials)

        try:
            self.__replace_file(entries)
        except OSError as e:
            self.__logger.warning('Unable to write credential cache %s: %s', self.__cache_file_path, e)

    def __read_entries(self) -> Dict[str, Any]:
        for attempt in range(1, self.__read_attempts + 1):
            try:
                with open(self.__cache_file_path, 'r', encoding='utf-8') as f:
                    document = json.load(f)
            except FileNotFoundError:
                return dict()
            except OSError as e:
                self.__logger.debug('Unable to read credential cache %s: %s', self.__cache_file_path, e)
                return dict()
            except ValueError as e:
                self.__logger.debug('Credential cache %s is not valid JSON (attempt %d): %s',
                                    self.__cache_file_path, attempt, e)
                sleep(self.__read_retry_interval_seconds)
                continue

            if isinstance(document, dict):
                return document

            self.__logger.debug('Credential cache %s does not contain a JSON object', self.__cache_file_path)
            return dict()

        return dict()

    def __replace_file(self, entries: Dict[str, Any]) -> None:
        cache_directory = os.path.dirname(os.path.abspath(self.__cache_file_path))
        os.makedirs(cache_directory, mode=0o700, exist_ok=True)

        # mkstemp creates the file readable and writable by the owner only
        file_descriptor, temporary_file_path = tempfile.mkstemp(
            dir=cache_directory, prefix='.credential-cache-', suffix='.tmp'
        )

        try:
            with os.fdopen(file_descriptor, 'w', encoding='utf-8') as f:
                json.dump(entries, f, indent=2, sort_keys=True)
                f.flush()
                os.fsync(f.fileno())

            os.replace(temporary_file_path, self.__cache_file_path)
        except BaseException:
            if os.path.exists(temporary_file_path):
                os.remove(temporary_file_path)
            raise


def _record_from_credentials(credentials: Credentials) -> Dict[str, Any]:
    return dict(
        AccessKeyId=credentials.access_key,
        SecretAccessKey=credentials.secret_key,
        SessionToken=credentials.session_token,
        Expiration=credentials.expiry.isoformat() if credentials.expiry else None,
        ProviderName=credentials.provider_name
    )


def _credentials_from_record(record: Dict[str, Any]) -> Credentials:
    expiration = record['Expiration']
    expiry = datetime.fromisoformat(expiration) if expiration else None

    if expiry is not None and expiry.tzinfo is None:
        raise ValueError(f'expiry "{expiration}" has no time zone')

    return Credentials(
        access_key=record['AccessKeyId'],
        secret_key=record['SecretAccessKey'],
        session_token=record.get('SessionToken'),
        expiry=expiry,
        provider_name=record.get('ProviderName') or 'cache'
    )
