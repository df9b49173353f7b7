"""Sheets mixin providing shared client initialization and connectivity checks.

Responsibilities:
    - Initialize the service account signer, token provider and Sheets client
    - Healthcheck the spreadsheet (header row readable and well-formed)

Classes:
    - SheetsClientMixin: Base mixin to inject A1 range management, client setup & healthcheck.

Example:
    Typical usage with a DAO implementation:

        >>> class ShortURLSheetsDAO(SheetsClientMixin, ShortURLBaseDAO):
        ...     pass
        ...
        >>> dao = ShortURLSheetsDAO(spreadsheet_id='1AbC...', client_email='...', private_key='...')
        >>> dao._healthcheck()
        True
"""

import logging
from typing import Optional

import requests

from sheetshortener.auth import AccessTokenProvider, ServiceAccountSigner
from sheetshortener.constants import Sheet
from sheetshortener.dao.exceptions import DataStoreError
from sheetshortener.sheets import SheetRangeSchema, SheetsClient


logger = logging.getLogger(__name__)


class SheetsClientMixin:
    """Mixin Sheets client setup and health check for Sheets-backed DAOs.

    Attributes:
        client (SheetsClient):
            Active Sheets values API client used by subclasses.

        ranges (SheetRangeSchema):
            Helper class for generating sheet-qualified A1 ranges.

    Methods:
        _healthcheck(raise_error: bool = True) -> bool:
            Read the header row to verify the spreadsheet is reachable.
            Optionally raise a DataStoreError if unreachable.
    """

    def __init__(
        self,
        spreadsheet_id: Optional[str] = None,
        client_email: Optional[str] = None,
        private_key: Optional[str] = None,
        sheet_name: Optional[str] = None,
        session: Optional[requests.Session] = None,
        token_provider: Optional[AccessTokenProvider] = None,
        sheets_client: Optional[SheetsClient] = None,
        healthcheck: bool = False,
    ):
        """Initialize a Sheets-based DAO for short URL management

        The option is given to either use an existing SheetsClient instance or
        create one (with its own signer and token provider) from the service
        account credentials.

        Args:
            spreadsheet_id (Optional[str]):
                ID of the spreadsheet. Required unless `sheets_client` is given.

            client_email (Optional[str]):
                Service account email. Required unless a token provider or client is given.

            private_key (Optional[str]):
                Service account PEM private key (PKCS8). Literal '\\n' sequences are accepted.

            sheet_name (Optional[str]):
                Tab holding the records. Defaults to 'Sheet1'.

            session (Optional[requests.Session]):
                HTTP session shared by the token provider and the client.

            token_provider (Optional[AccessTokenProvider]):
                Pre-initialized token provider (shares its token cache).

            sheets_client (Optional[SheetsClient]):
                Pre-initialized Sheets client. If None, a new client is created.

            healthcheck (bool):
                If True, read the header row right away. Defaults to False
                (every healthcheck costs a token exchange and an API call).

        Raises:
            ValueError:
                If neither a client nor the parameters needed to build one are given.
            DataStoreError:
                If healthcheck=True and the spreadsheet cannot be read.
        """
        if sheets_client is None:
            if token_provider is None:
                if not client_email or not private_key:
                    raise ValueError('Service account client_email and private_key are required to build a Sheets client.')
                signer = ServiceAccountSigner(client_email=client_email, private_key=private_key)
                token_provider = AccessTokenProvider(signer, session=session)
            if not spreadsheet_id:
                raise ValueError('Spreadsheet ID is required to build a Sheets client.')
            sheets_client = SheetsClient(spreadsheet_id, token_provider, session=session)

        self.client = sheets_client
        self.ranges = SheetRangeSchema(sheet_name=sheet_name)

        if healthcheck:
            self._healthcheck()

    def _healthcheck(self, raise_error: bool = True) -> bool:
        """Read the header row to healthcheck connectivity

        A header row that does not match the A..F layout is logged but not
        treated as a failure.

        Args:
            raise_error (bool):
                If True, raises DataStoreError on failure. Defaults to True.

        Returns:
            bool:
                True if the spreadsheet is reachable, False otherwise (only if raise_error=False).

        Raises:
            DataStoreError:
                If the spreadsheet cannot be read and raise_error=True.
        """
        try:
            header = self.client.get_values(self.ranges.header_range())
        except (DataStoreError, requests.exceptions.RequestException) as e:
            if raise_error:
                raise DataStoreError(
                    f"Can't read spreadsheet '{self.client.spreadsheet_id}' ({self.ranges.sheet_name}). Check the provided configuration parameters."
                ) from e
            return False

        if not header or tuple(header[0]) != Sheet.HEADER:
            logger.warning('Unexpected header row.', extra={'header': header[0] if header else None})
        return True
