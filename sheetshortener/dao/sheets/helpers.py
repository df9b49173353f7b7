import functools
from typing import TypeVar, Any
from collections.abc import Callable

import requests

from sheetshortener.dao.exceptions import DataStoreError


__all__ = []

F = TypeVar('F', bound=Callable[..., Any])


def handle_sheets_connection_error[F](method: F) -> F:
    """Wrap Sheets-interacting DAO methods to handle connectivity errors

    HTTP error statuses are already raised as TransportError by SheetsClient and
    pass through untouched. Only failures to get any response at all
    (DNS, refused connections, timeouts) are converted here.

    Args:
        method (Callable[..., Any]):
            DAO method performing Sheets API calls which may raise
            requests.exceptions.ConnectionError or requests.exceptions.Timeout.

    Returns:
        Callable[..., Any]:
            Wrapped method which raises DataStoreError on connectivity issues with the Sheets API.

    Example:
        >>> @handle_sheets_connection_error
        ... def list(self):
        ...     return self.client.get_values(self.ranges.table_range())
    """

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except (requests.exceptions.ConnectionError, requests.exceptions.Timeout) as e:
            spreadsheet_id = getattr(getattr(self, 'client', None), 'spreadsheet_id', None)
            raise DataStoreError(f"Can't reach Google Sheets API for spreadsheet '{spreadsheet_id}'.") from e

    return wrapper
