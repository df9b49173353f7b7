import re

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from sheetshortener.constants import Sheet


A1_PATTERN = re.compile(r'^(?:(?P<sheet>.+)!)?(?P<c1>[A-Z]+)(?P<r1>\d+)?(?::(?P<c2>[A-Z]+)(?P<r2>\d+)?)?$')
NUMBER_PATTERN = re.compile(r'^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$')


def _column_index(column: str) -> int:
    return ord(column) - ord('A')


def _user_entered(value) -> str:
    """Store a written value the way USER_ENTERED input does, read back formatted.

    A leading apostrophe forces literal text and is dropped; numeric-looking
    text becomes a number, so '012345' reads back as '12345' and '1e3' as '1000'.
    """
    value = str(value)
    if value.startswith("'"):
        return value[1:]
    if NUMBER_PATTERN.match(value):
        number = float(value)
        return str(int(number)) if number.is_integer() else str(number)
    return value


class InMemorySheetsClient:
    """In-memory stand-in for SheetsClient, mimicking the values API.

    Rows are stored 1-based (index 0 holds row 1). Like the real API, reads
    omit trailing empty cells and trailing empty rows, cleared rows read as [],
    appends land after the last populated row, and writes are parsed as
    USER_ENTERED input (see _user_entered). Tests that seed `rows` directly
    bypass that parsing.
    """

    def __init__(self, header: tuple[str, ...] = Sheet.HEADER):
        self.spreadsheet_id = 'sheet-in-memory'
        self.rows: list[list[str]] = [list(header)]
        self.calls: list[tuple[str, str]] = []

    def _parse(self, cells: str) -> tuple[int, int, int | None, int | None]:
        match = A1_PATTERN.match(cells)
        assert match, f'unsupported range {cells!r}'
        first = _column_index(match['c1'])
        last = _column_index(match['c2'] or match['c1'])
        first_row = int(match['r1']) if match['r1'] else None
        last_row = int(match['r2']) if match['r2'] else first_row
        return first, last, first_row, last_row

    def _ensure_row(self, row: int) -> list[str]:
        while len(self.rows) < row:
            self.rows.append([])
        cells = self.rows[row - 1]
        if len(cells) < len(Sheet.HEADER):
            cells.extend([''] * (len(Sheet.HEADER) - len(cells)))
        return cells

    @staticmethod
    def _trim(cells: list[str]) -> list[str]:
        cells = list(cells)
        while cells and cells[-1] == '':
            cells.pop()
        return cells

    def get_values(self, cells: str) -> list[list[str]]:
        self.calls.append(('get', cells))
        first, last, first_row, last_row = self._parse(cells)
        first_row = first_row or 1
        last_row = last_row or len(self.rows)

        values = []
        for row in range(first_row, last_row + 1):
            stored = self.rows[row - 1] if row <= len(self.rows) else []
            values.append(self._trim(stored[first : last + 1]))
        while values and not values[-1]:
            values.pop()
        return values

    def append_values(self, cells: str, rows: list[list[str]]) -> dict:
        self.calls.append(('append', cells))
        last_populated = max((index + 1 for index, row in enumerate(self.rows) if any(row)), default=0)
        for offset, values in enumerate(rows, start=1):
            target = self._ensure_row(last_populated + offset)
            target[: len(values)] = [_user_entered(value) for value in values]
        return {'updates': {'updatedRows': len(rows)}}

    def update_values(self, cells: str, rows: list[list[str]]) -> dict:
        self.calls.append(('update', cells))
        first, _, first_row, _ = self._parse(cells)
        for offset, values in enumerate(rows):
            target = self._ensure_row(first_row + offset)
            target[first : first + len(values)] = [_user_entered(value) for value in values]
        return {'updatedCells': sum(len(values) for values in rows)}

    def clear_range(self, cells: str) -> dict:
        self.calls.append(('clear', cells))
        first, last, first_row, last_row = self._parse(cells)
        for row in range(first_row, last_row + 1):
            if row <= len(self.rows):
                target = self._ensure_row(row)
                target[first : last + 1] = [''] * (last - first + 1)
        return {'clearedRange': cells}


@pytest.fixture(scope='session')
def rsa_private_key() -> rsa.RSAPrivateKey:
    """Generate one throwaway 2048-bit RSA key for the whole test session."""
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope='session')
def private_key_pem(rsa_private_key) -> str:
    """PKCS8 PEM encoding of the session RSA key (as found in a service account key file)."""
    return rsa_private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode('ascii')


@pytest.fixture
def client_email() -> str:
    return 'shortener@test-project.iam.gserviceaccount.com'


@pytest.fixture
def sheets():
    """Provide an empty in-memory spreadsheet holding only the header row."""
    return InMemorySheetsClient()
