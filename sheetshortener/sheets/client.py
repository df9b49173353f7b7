"""Google Sheets values API client (raw REST)

Range-oriented primitives over `spreadsheets.values`, authenticated with a
bearer token from AccessTokenProvider.

Requests:
    get_values(range)           GET   <base>/<id>/values/<range>?majorDimension=ROWS
    append_values(range, rows)  POST  <base>/<id>/values/<range>:append?valueInputOption=USER_ENTERED&insertDataOption=INSERT_ROWS
    update_values(range, rows)  PUT   <base>/<id>/values/<range>?valueInputOption=USER_ENTERED
    clear_range(range)          POST  <base>/<id>/values/<range>:clear

Every request carries `Authorization: Bearer <token>` and
`Content-Type: application/json`. A non-2xx response raises TransportError
with the status and body. Nothing is retried: writes are not assumed to be
idempotent.

Example:
    >>> client = SheetsClient(spreadsheet_id='1AbC...', token_provider=provider)
    >>> client.get_values('Sheet1!C:C')
    [['shortCode'], ['abc123'], [], ['xyz789']]
    >>> client.clear_range('Sheet1!A3:F3')
"""

import logging
from typing import Any, Optional
from urllib.parse import quote

import requests

from sheetshortener.auth.token_provider import AccessTokenProvider
from sheetshortener.constants import Google, HTTP
from sheetshortener.dao.exceptions import TransportError
from sheetshortener.types import SheetValues


logger = logging.getLogger(__name__)


class SheetsClient:
    """Minimal client for one spreadsheet's values API.

    Attributes:
        spreadsheet_id (str):
            ID of the target spreadsheet (from its URL).
        token_provider (AccessTokenProvider):
            Source of bearer tokens.
        session (requests.Session):
            HTTP session used for all requests.
        base_url (str):
            Sheets API spreadsheets endpoint.
        timeout (float):
            Per-request timeout in seconds.

    Methods:
        get_values(cells: str) -> list[list[str]]
        append_values(cells: str, rows: list[list[str]]) -> dict
        update_values(cells: str, rows: list[list[str]]) -> dict
        clear_range(cells: str) -> dict
    """

    def __init__(
        self,
        spreadsheet_id: str,
        token_provider: AccessTokenProvider,
        session: Optional[requests.Session] = None,
        base_url: str = Google.SHEETS_BASE_URL,
        timeout: float = HTTP.TIMEOUT_SECONDS,
    ):
        if not spreadsheet_id:
            raise ValueError('Spreadsheet ID must be a non-empty string.')

        self.spreadsheet_id = spreadsheet_id
        self.token_provider = token_provider
        self.session = session or requests.Session()
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout

    def _values_url(self, cells: str, action: str = '') -> str:
        return f'{self.base_url}/{self.spreadsheet_id}/values/{quote(cells, safe="")}{action}'

    def _request(
        self,
        method: str,
        url: str,
        operation: str,
        params: dict[str, str] | None = None,
        body: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        headers = {
            'Authorization': f'Bearer {self.token_provider.get_access_token()}',
            'Content-Type': 'application/json',
        }
        response = self.session.request(method, url, params=params, json=body, headers=headers, timeout=self.timeout)

        if not 200 <= response.status_code < 300:
            logger.warning('Sheets request failed.', extra={'operation': operation, 'status': response.status_code})
            raise TransportError(response.status_code, response.text, operation=operation)

        if not response.content:
            return {}
        return response.json()

    def get_values(self, cells: str) -> SheetValues:
        """Read a rectangular range, row by row

        Returns:
            list[list[str]]: rows of cells; [] if the range holds no values.
                The API omits trailing empty cells and trailing empty rows,
                so rows may be shorter than the range (cleared rows are []).
        """
        payload = self._request('GET', self._values_url(cells), 'values get', params={'majorDimension': 'ROWS'})
        return payload.get('values') or []

    def append_values(self, cells: str, rows: SheetValues) -> dict[str, Any]:
        """Append rows after the last populated row of `cells`"""
        logger.debug('Appending rows.', extra={'range': cells, 'rowCount': len(rows)})
        return self._request(
            'POST',
            self._values_url(cells, ':append'),
            'append',
            params={'valueInputOption': 'USER_ENTERED', 'insertDataOption': 'INSERT_ROWS'},
            body={'range': cells, 'majorDimension': 'ROWS', 'values': rows},
        )

    def update_values(self, cells: str, rows: SheetValues) -> dict[str, Any]:
        """Overwrite exactly the addressed cells"""
        logger.debug('Updating range.', extra={'range': cells})
        return self._request(
            'PUT',
            self._values_url(cells),
            'update',
            params={'valueInputOption': 'USER_ENTERED'},
            body={'range': cells, 'majorDimension': 'ROWS', 'values': rows},
        )

    def clear_range(self, cells: str) -> dict[str, Any]:
        """Blank the cells of `cells` without removing rows"""
        logger.debug('Clearing range.', extra={'range': cells})
        return self._request('POST', self._values_url(cells, ':clear'), 'clear')
