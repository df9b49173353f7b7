"""Unit tests for handle_sheets_connection_error decorator.

Test coverage includes:
    1. Normal function execution
       - Ensures the wrapped method executes and returns its result.
    2. Connection error handling
       - Ensures requests connection errors and timeouts become DataStoreError.
       - Ensures TransportError (HTTP status errors) passes through.
    3. Function metadata preservation
       - Confirms functools.wraps preserves the original function's name and docstring.
"""

from unittest.mock import MagicMock

import pytest
import requests

from sheetshortener.dao.exceptions import DataStoreError, TransportError
from sheetshortener.dao.sheets.helpers import handle_sheets_connection_error


class DummyDAO:
    def __init__(self, error: Exception | None = None):
        self.client = MagicMock(spreadsheet_id='sheet-123')
        self.error = error

    @handle_sheets_connection_error
    def read(self):
        if self.error is not None:
            raise self.error
        return 'OK'


# -------------------------------
# 1. Normal execution
# -------------------------------


def test_decorator_allows_normal_execution():
    """Ensure the wrapped function executes normally when no error occurs."""
    assert DummyDAO().read() == 'OK'


# -------------------------------
# 2. Connection error handling
# -------------------------------


@pytest.mark.parametrize('error', [requests.exceptions.ConnectionError('refused'), requests.exceptions.ReadTimeout('slow')])
def test_decorator_transforms_connectivity_errors(error):
    """Ensure connectivity errors are re-raised as DataStoreError."""
    with pytest.raises(DataStoreError, match="Can't reach Google Sheets API for spreadsheet 'sheet-123'.") as exc_info:
        DummyDAO(error).read()
    assert exc_info.value.__cause__ is error


def test_decorator_keeps_transport_errors():
    """Ensure HTTP status errors are not rewrapped."""
    error = TransportError(500, 'Internal error')
    with pytest.raises(TransportError) as exc_info:
        DummyDAO(error).read()
    assert exc_info.value is error


# -------------------------------
# 3. Function metadata preservation
# -------------------------------


def test_decorator_preserves_function_metadata():
    """Ensure function name and docstring are preserved via functools.wraps."""

    @handle_sheets_connection_error
    def sample_function(self):
        """This is a sample docstring."""
        return 'OK'

    assert sample_function.__name__ == 'sample_function'
    assert 'sample docstring' in sample_function.__doc__
