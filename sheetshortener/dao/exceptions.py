"""Exceptions related to Data Access Objects (DAO) operations.

Classes:
    DAOError:
        Generic base class for DAO-related exceptions.

    ShortURLNotFoundError:
        Raised when an operation targets a short code with no live record.

    ShortURLAlreadyExistsError:
        Raised when creating a record whose short code is already live.

    DataStoreError:
        Raised when the data store is unreachable (connection issues, timeouts, etc.).

    TransportError:
        Raised when the Google Sheets API answers with a non-2xx status.

Example:
    >>> from sheetshortener.dao.exceptions import ShortURLNotFoundError
    >>> raise ShortURLNotFoundError("Short URL with code 'abc123' not found.")
    Traceback (most recent call last):
        ...
    sheetshortener.dao.exceptions.ShortURLNotFoundError: Short URL with code 'abc123' not found.
"""

from sheetshortener.exceptions import SheetShortenerError


class DAOError(SheetShortenerError):
    """Generic base class for DAO-related exceptions."""

    error_code = 'dao:dao_error'


class ShortURLNotFoundError(DAOError):
    """Exception raised when a short code has no live record in the data store."""

    error_code = 'dao:short_url_not_found_error'


class ShortURLAlreadyExistsError(DAOError):
    """Exception raised when a live record with the same short code already exists."""

    error_code = 'dao:short_url_already_exists_error'


class DataStoreError(DAOError):
    """Exception raised when there is an error in the data store.

    e.g. connection issues, timeouts, unexpected responses, etc.
    """

    error_code = 'dao:data_store_error'


class TransportError(DataStoreError):
    """Exception raised when the spreadsheet API responds with a non-2xx status.

    The request is never retried automatically: no idempotency guarantee is
    assumed for writes, so the caller decides based on `status` and `body`.

    Attributes:
        status (int): HTTP status code.
        body (str): Raw response body.
    """

    error_code = 'dao:transport_error'

    def __init__(self, status: int, body: str = '', operation: str = 'request'):
        self.status = status
        self.body = body
        self.operation = operation
        super().__init__(f'Sheets {operation} failed: {status} {body}')
