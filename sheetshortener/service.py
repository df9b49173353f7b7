"""Short URL service: the operations consumed by the HTTP layer

Wires a storage backend (ShortURLBaseDAO) to the short code generator and
exposes the six record operations of the service.

This service follows this procedure to create a record:
- Step 1: Use the requested short code, or generate one with the configured strategy
          (the generator asks the DAO whether each candidate is taken)
- Step 2: Stamp id, createdAt and updatedAt, count = 0
- Step 3: Insert the record (the DAO runs its own, independent uniqueness check)

The generator check and the insert check are two separate guards. A code found
free by the generator can still be taken by a concurrent writer before the
insert; the insert then raises ShortURLAlreadyExistsError and nothing is retried.

Classes:
    ShortURLService:
        create_record / find_record / update_url / resolve_and_increment /
        delete_record / list_records

Example:
    >>> service = ShortURLService.from_config(load_config())
    >>> record = service.create_record('https://example.com/a', 'abc123')
    >>> service.resolve_and_increment('abc123')
    'https://example.com/a'
    >>> service.find_record('abc123').count
    1
"""

import logging
from typing import Optional

from botocore.client import BaseClient

from sheetshortener.dao.base import ShortURLBaseDAO
from sheetshortener.dao.redis import ShortURLRedisDAO
from sheetshortener.dao.sheets import ShortURLSheetsDAO
from sheetshortener.exceptions import BadConfigurationError
from sheetshortener.models import ShortURLModel
from sheetshortener.types import AppConfig
from sheetshortener.utils.config import app_prefix, load_config, validate_code_length
from sheetshortener.utils.helpers import generate_record_id, utc_timestamp
from sheetshortener.utils.shortener import (
    ALPHANUMERIC_CHARSET,
    ShortcodeStrategy,
    generate_unique_shortcode,
    hash_shortcode,
    hybrid_shortcode,
)
from sheetshortener.constants import Shortcode


logger = logging.getLogger(__name__)


class ShortURLService:
    """Short URL operations on top of a storage backend.

    Attributes:
        dao (ShortURLBaseDAO):
            Storage backend (spreadsheet or Redis).
        strategy (ShortcodeStrategy):
            How codes are generated when the caller does not request one.
        code_length (int):
            Length of generated codes.
        salt (str):
            Salt of deterministic (hash / hybrid) codes.
        max_attempts (int | None):
            Candidate budget of random generation. Defaults to 5 * code_length.
        charset (str):
            Alphabet of generated codes.

    Methods:
        create_record(url: str, desired_code: str | None = None) -> ShortURLModel
            Raises ShortURLAlreadyExistsError if the code is taken.
            Raises GenerationExhaustedError if no free code was generated.
        find_record(code: str) -> ShortURLModel
        update_url(code: str, new_url: str) -> None
        resolve_and_increment(code: str) -> str
        delete_record(code: str) -> None
            Each raises ShortURLNotFoundError if the code has no live record.
        list_records() -> list[ShortURLModel]
    """

    def __init__(
        self,
        dao: ShortURLBaseDAO,
        strategy: ShortcodeStrategy | str = ShortcodeStrategy.RANDOM,
        code_length: int = Shortcode.RANDOM_LENGTH,
        salt: str = '',
        max_attempts: Optional[int] = None,
        charset: str = ALPHANUMERIC_CHARSET,
    ):
        try:
            self.strategy = ShortcodeStrategy(strategy)
        except ValueError as e:
            raise BadConfigurationError(f"Unknown short code strategy '{strategy}'.") from e

        self.dao = dao
        self.code_length = validate_code_length(code_length)
        self.salt = salt
        self.max_attempts = max_attempts
        self.charset = charset

    @classmethod
    def from_config(cls, config: Optional[AppConfig] = None, secrets_client: Optional[BaseClient] = None) -> 'ShortURLService':
        """Build the service and its storage backend from configuration

        Args:
            config (Optional[AppConfig]):
                Output of load_config(). Loaded from the environment when None.
            secrets_client (Optional[BaseClient]):
                boto3 Secrets Manager client, forwarded to load_config().

        Returns:
            ShortURLService: service over a ShortURLSheetsDAO or ShortURLRedisDAO.

        Raises:
            BadConfigurationError:
                If the configuration names no known backend.
        """
        config = config if config is not None else load_config(secrets_client=secrets_client)

        if 'sheets' in config:
            sheets_config = config['sheets']
            dao = ShortURLSheetsDAO(
                spreadsheet_id=sheets_config['spreadsheet_id'],
                client_email=sheets_config['client_email'],
                private_key=sheets_config['private_key'],
                sheet_name=sheets_config.get('sheet_name'),
            )
        elif 'redis' in config:
            redis_config = {f'redis_{k}': v for k, v in config['redis'].items()}
            dao = ShortURLRedisDAO(**redis_config, prefix=app_prefix())
        else:
            raise BadConfigurationError('Configuration holds neither a "sheets" nor a "redis" section.')

        shortener = config.get('shortener', {})
        return cls(
            dao,
            strategy=shortener.get('strategy', ShortcodeStrategy.RANDOM),
            code_length=shortener.get('length', Shortcode.RANDOM_LENGTH),
            salt=shortener.get('salt', ''),
        )

    def generate_code(self, url: str) -> str:
        """Generate a short code for `url` with the configured strategy

        Random and hybrid codes are checked against the backend. Hash codes
        are returned as-is; a collision surfaces later as a conflict on insert.
        """
        if self.strategy == ShortcodeStrategy.HASH:
            return hash_shortcode(url, length=self.code_length, charset=self.charset, salt=self.salt)
        if self.strategy == ShortcodeStrategy.HYBRID:
            # fmt: off
            return hybrid_shortcode(
                url, self.dao.exists,
                deterministic_length=self.code_length,
                charset=self.charset,
                salt=self.salt,
                max_attempts=self.max_attempts,
            )
            # fmt: on
        return generate_unique_shortcode(
            self.dao.exists,
            length=self.code_length,
            charset=self.charset,
            max_attempts=self.max_attempts,
        )

    def create_record(self, url: str, desired_code: Optional[str] = None) -> ShortURLModel:
        shortcode = (desired_code or '').strip() or self.generate_code(url)
        now = utc_timestamp()
        record = ShortURLModel(
            id=generate_record_id(),
            url=url,
            shortcode=shortcode,
            created_at=now,
            updated_at=now,
            count=0,
        )

        self.dao.insert(record)
        logger.info('Created short URL.', extra={'shortcode': shortcode, 'requested': desired_code is not None})
        return record

    def find_record(self, code: str) -> ShortURLModel:
        return self.dao.get(code)

    def update_url(self, code: str, new_url: str) -> None:
        self.dao.update(code, new_url)

    def resolve_and_increment(self, code: str) -> str:
        return self.dao.hit(code)

    def delete_record(self, code: str) -> None:
        self.dao.delete(code)

    def list_records(self) -> list[ShortURLModel]:
        return self.dao.list()
