"""Data Access Object (DAO) implementation for managing shortened URLs in Google Sheets

This module provides a spreadsheet-backed implementation of ShortURLBaseDAO.
One record occupies one row, columns A..F:

    A: id   B: url   C: shortCode   D: createdAt   E: updatedAt   F: count

Row 1 is a header and is never read as data. The row position is the only
index: a short code is resolved by a linear scan of column C.

Writes use USER_ENTERED input, which would turn a code like '012345' into
the number 12345. Every text cell (id, url, shortCode and both timestamps)
is therefore written with a leading apostrophe so it reads back verbatim.
Only the count is left for the sheet to parse.

Responsibilities:
    - Insert, read, update, count visits and delete short URL records;
    - Keep deleted rows in place as empty gaps (tombstones) so row numbers never shift;
    - Skip gaps in every scan, and malformed rows when listing;
    - Raise appropriate DAO exceptions.

Malformed rows:
    A row whose column C holds a code but whose id or url is empty (e.g. edited
    by hand) still occupies that code: insert() reports it as taken, while
    get() and hit() raise ShortURLNotFoundError and list() leaves it out.
    delete() clears such a row like any other, which frees the code again.

Concurrency:
    The spreadsheet has no transactions. Every mutating operation is a
    read (or scan) followed by one or more independent writes, so concurrent
    callers can interleave:

    - insert():  two creates of the same code can both pass the scan before
                 either appends, leaving two live rows with that code;
    - hit():     two visits can read the same count and both write count+1,
                 losing one increment;
    - update():  url and updatedAt are two separate writes; a failure in
                 between leaves the new url with a stale updatedAt.

    These races are known limitations of the spreadsheet backend and are not
    prevented here. Use ShortURLRedisDAO where they matter.

Classes:
    ShortURLSheetsDAO:
        DAO for storing and retrieving ShortURLModel in a Google spreadsheet.

Example:
    >>> dao = ShortURLSheetsDAO(spreadsheet_id='1AbC...', client_email='...', private_key='...')
    >>> dao.insert(ShortURLModel(id='id_1', url='https://example.com/a', shortcode='abc123'))
    <ShortURLSheetsDAO>
    >>> dao.find_row_number('abc123')
    7
    >>> dao.hit('abc123')
    'https://example.com/a'
    >>> dao.delete('abc123').exists('abc123')
    False
"""

import logging

from beartype import beartype

from sheetshortener.constants import Sheet
from sheetshortener.models import ShortURLModel
from sheetshortener.dao.base import ShortURLBaseDAO
from sheetshortener.dao.sheets.mixins import SheetsClientMixin
from sheetshortener.dao.sheets.helpers import handle_sheets_connection_error
from sheetshortener.dao.exceptions import ShortURLAlreadyExistsError, ShortURLNotFoundError
from sheetshortener.utils.helpers import utc_timestamp


logger = logging.getLogger(__name__)


def _is_gap(cells: list[str]) -> bool:
    return not any(str(cell).strip() for cell in cells)


def _as_text(value: str) -> str:
    return f'{Sheet.TEXT_PREFIX}{value}' if value else value


def _to_cells(short_url: ShortURLModel) -> list[str]:
    *text_cells, count = short_url.to_row()
    return [_as_text(cell) for cell in text_cells] + [count]


class ShortURLSheetsDAO(SheetsClientMixin, ShortURLBaseDAO):
    """Google Sheets-based Data Access Object (DAO) for managing short URL mappings

    This class implements the ShortURLBaseDAO interface using a spreadsheet as a data store.

    Attributes (see SheetsClientMixin):
        client (SheetsClient):
            Sheets values API client.
        ranges (SheetRangeSchema):
            A1 range helper for the configured sheet.

    Methods:
        find_row_number(shortcode: str) -> int | None:
            1-based row holding the short code, or None.

        insert(short_url: ShortURLModel, **kwargs) -> ShortURLSheetsDAO:
            Scan for the code, then append a row.
            Raises ShortURLAlreadyExistsError when the code is live.

        get(shortcode: str, **kwargs) -> ShortURLModel:
            Raises ShortURLNotFoundError when the code is not live.

        exists(shortcode: str, **kwargs) -> bool

        update(shortcode: str, url: str, **kwargs) -> ShortURLSheetsDAO:
            Write url, then updatedAt (two separate writes).
            Raises ShortURLNotFoundError when the code is not live.

        hit(shortcode: str, **kwargs) -> str:
            Read the row, write count+1 and updatedAt, return the url.
            Raises ShortURLNotFoundError when the code is not live.

        delete(shortcode: str, **kwargs) -> ShortURLSheetsDAO:
            Clear the row's six cells in place.
            Raises ShortURLNotFoundError when the code is not live.

        list(**kwargs) -> list[ShortURLModel]:
            Every live, well-formed record.

        All methods raise TransportError on non-2xx API responses and
        DataStoreError when the API cannot be reached.
    """

    def __repr__(self) -> str:
        return f'<ShortURLSheetsDAO spreadsheet={self.client.spreadsheet_id!r} sheet={self.ranges.sheet_name!r}>'

    @handle_sheets_connection_error
    @beartype
    def find_row_number(self, shortcode: str) -> int | None:
        """Resolve a short code to its 1-based row number

        Reads the whole short code column and scans it linearly for an exact
        match, skipping the header row and gaps. Cost grows with every row ever
        written, deleted rows included.

        Args:
            shortcode (str):
                Short code to look for.

        Returns:
            int | None:
                Row number in the sheet (header is row 1), or None if not found.

        Example:
            >>> dao.find_row_number('abc123')
            7
        """
        column = self.client.get_values(self.ranges.column_range(Sheet.Column.SHORTCODE))
        for index, cells in enumerate(column):
            row_number = index + 1
            if row_number == Sheet.HEADER_ROW or not cells:
                continue
            if cells[0] == shortcode:
                return row_number
        return None

    def _require_row_number(self, shortcode: str) -> int:
        row_number = self.find_row_number(shortcode)
        if row_number is None:
            raise ShortURLNotFoundError(f"Short URL with code '{shortcode}' not found.")
        return row_number

    def _read_row(self, shortcode: str, row_number: int) -> ShortURLModel:
        values = self.client.get_values(self.ranges.row_range(row_number))
        record = ShortURLModel.from_row(values[0] if values else None)
        if record is None:
            raise ShortURLNotFoundError(f"Short URL with code '{shortcode}' not found.")
        return record

    @handle_sheets_connection_error
    @beartype
    def insert(self, short_url: ShortURLModel, **kwargs) -> 'ShortURLSheetsDAO':
        """Append a short URL record

        Args:
            short_url (ShortURLModel):
                Record to store. Its id, timestamps and count are written as given.
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            ShortURLSheetsDAO: self (for method chaining)

        Raises:
            ShortURLAlreadyExistsError:
                If a live row already holds the short code.

        Example:
            >>> dao.insert(ShortURLModel(id='id_1', url='https://example.com', shortcode='abc123'))
            <ShortURLSheetsDAO>
        """
        if self.find_row_number(short_url.shortcode) is not None:
            logger.info('Short code already in use.', extra={'shortcode': short_url.shortcode})
            raise ShortURLAlreadyExistsError(f"Short URL with code '{short_url.shortcode}' already exists.")

        # NOTE: The scan above and the append below are two separate requests.
        #       Two concurrent inserts of the same code can interleave like this:
        #
        #       (request 1): ShortURLSheetsDAO.insert():
        #                    -> GET  Sheet1!C:C         => 'abc123' not found
        #                    ... interruption
        #       (request 2): ShortURLSheetsDAO.insert():
        #                    -> GET  Sheet1!C:C         => 'abc123' not found
        #                    -> POST Sheet1!A:F:append  => row 8 = abc123
        #       (request 1): ShortURLSheetsDAO.insert() continued...:
        #                    -> POST Sheet1!A:F:append  => row 9 = abc123
        #
        #       Both rows stay live; find_row_number() then resolves to the first one.
        self.client.append_values(self.ranges.table_range(), [_to_cells(short_url)])
        logger.info('Inserted short URL.', extra={'shortcode': short_url.shortcode, 'id': short_url.id})
        return self

    @handle_sheets_connection_error
    @beartype
    def get(self, shortcode: str, **kwargs) -> ShortURLModel:
        """Retrieve a stored short URL record by short code

        Raises:
            ShortURLNotFoundError:
                If no live row holds the short code.

        Example:
            >>> dao.get('abc123')
            ShortURLModel(id='id_1', url='https://example.com', shortcode='abc123', ...)
        """
        return self._read_row(shortcode, self._require_row_number(shortcode))

    @handle_sheets_connection_error
    @beartype
    def exists(self, shortcode: str, **kwargs) -> bool:
        return self.find_row_number(shortcode) is not None

    @handle_sheets_connection_error
    @beartype
    def update(self, shortcode: str, url: str, **kwargs) -> 'ShortURLSheetsDAO':
        """Point a short code at a new destination URL

        The url cell and the updatedAt cell are written by two separate
        requests, url first.

        Raises:
            ShortURLNotFoundError:
                If no live row holds the short code.
        """
        row_number = self._require_row_number(shortcode)
        self.client.update_values(self.ranges.cell_range(Sheet.Column.URL, row_number), [[_as_text(url)]])
        self.client.update_values(self.ranges.cell_range(Sheet.Column.UPDATED_AT, row_number), [[_as_text(utc_timestamp())]])
        logger.info('Updated short URL.', extra={'shortcode': shortcode, 'row': row_number})
        return self

    @handle_sheets_connection_error
    @beartype
    def hit(self, shortcode: str, **kwargs) -> str:
        """Count a visit and return the destination URL

        Reads the current row, then writes count+1 together with a fresh
        updatedAt (columns E..F).

        Return:
            str:
                destination URL of the short code.

        Raises:
            ShortURLNotFoundError:
                If no live row holds the short code, or the row was cleared
                between the scan and the read.

        Example:
            >>> dao.hit('abc123')
            'https://example.com'
        """
        row_number = self._require_row_number(shortcode)
        record = self._read_row(shortcode, row_number)
        visited = record.with_changes(count=record.count + 1, updated_at=utc_timestamp())

        # NOTE: read-then-write, not atomic. Two concurrent visits can both read
        #       count=N and both write N+1, dropping one increment.
        # fmt: off
        self.client.update_values(
            self.ranges.span_range(Sheet.Column.UPDATED_AT, Sheet.Column.COUNT, row_number),
            [[_as_text(visited.updated_at), str(visited.count)]],
        )
        # fmt: on
        return record.url

    @handle_sheets_connection_error
    @beartype
    def delete(self, shortcode: str, **kwargs) -> 'ShortURLSheetsDAO':
        """Clear the record's row in place

        The row is left as an empty gap so later row numbers do not shift.

        Raises:
            ShortURLNotFoundError:
                If no live row holds the short code.
        """
        row_number = self._require_row_number(shortcode)
        self.client.clear_range(self.ranges.row_range(row_number))
        logger.info('Deleted short URL.', extra={'shortcode': shortcode, 'row': row_number})
        return self

    # NOTE: defined last, it shadows the builtin `list` inside the class body
    @handle_sheets_connection_error
    @beartype
    def list(self, **kwargs) -> list[ShortURLModel]:
        """Return every live record

        Skips the header row and gaps; malformed rows (missing id, url or
        short code) are dropped silently.
        """
        values = self.client.get_values(self.ranges.table_range())
        records = []
        for index, cells in enumerate(values):
            if index + 1 == Sheet.HEADER_ROW or _is_gap(cells):
                continue
            record = ShortURLModel.from_row(cells)
            if record is not None:
                records.append(record)
        return records
