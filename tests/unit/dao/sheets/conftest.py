from unittest.mock import MagicMock

import pytest

from sheetshortener.dao.sheets import ShortURLSheetsDAO
from sheetshortener.sheets import SheetsClient


@pytest.fixture
def sheets_dao(sheets):
    """Create a ShortURLSheetsDAO over the in-memory spreadsheet."""
    return ShortURLSheetsDAO(sheets_client=sheets)


@pytest.fixture
def sheets_client_mock():
    """Mock SheetsClient (for asserting exact requests)."""
    client = MagicMock(spec=SheetsClient)
    client.spreadsheet_id = 'sheet-123'
    client.get_values.return_value = []
    return client
