import functools
from collections.abc import Callable

from sheetshortener.constants import Sheet


__all__ = ['SheetRangeSchema']  # hide internal decorator qualify_range from imports


def qualify_range(func: Callable) -> Callable:
    @functools.wraps(func)
    def wrapper(self, *args, **kwargs) -> str:
        cells = func(self, *args, **kwargs)
        return f'{self.quoted_sheet_name}!{cells}'

    return wrapper


def _validate_row(row: int) -> int:
    if isinstance(row, bool) or not isinstance(row, int):
        raise TypeError(f'Row number must be of type integer (given type: {type(row)}).')
    if row < 1:
        raise ValueError(f'Row numbers are 1-based (given value: {row}).')
    return row


class SheetRangeSchema:
    """Provide standardized A1 ranges for the short URL sheet.

    Every range is qualified with the sheet (tab) name, e.g. "Sheet1!A5:F5".
    Names containing anything other than letters, digits and underscores are
    single-quoted as A1 notation requires ("'My Links'!C:C").

    Layout: A=id, B=url, C=shortCode, D=createdAt, E=updatedAt, F=count.
    """

    def __init__(self, sheet_name: str | None = None):
        if sheet_name is not None and not isinstance(sheet_name, str):
            raise TypeError(f'Sheet name must be of type string (given type: {type(sheet_name)}).')

        self.sheet_name = sheet_name.strip() if sheet_name and sheet_name.strip() else Sheet.DEFAULT_NAME

    @property
    def quoted_sheet_name(self) -> str:
        if self.sheet_name.replace('_', '').isalnum():
            return self.sheet_name
        escaped = self.sheet_name.replace("'", "''")
        return f"'{escaped}'"

    @qualify_range
    def table_range(self) -> str:
        return f'{Sheet.FIRST_COLUMN}:{Sheet.LAST_COLUMN}'

    @qualify_range
    def header_range(self) -> str:
        return f'{Sheet.FIRST_COLUMN}{Sheet.HEADER_ROW}:{Sheet.LAST_COLUMN}{Sheet.HEADER_ROW}'

    @qualify_range
    def column_range(self, column: str) -> str:
        return f'{column}:{column}'

    @qualify_range
    def row_range(self, row: int) -> str:
        row = _validate_row(row)
        return f'{Sheet.FIRST_COLUMN}{row}:{Sheet.LAST_COLUMN}{row}'

    @qualify_range
    def cell_range(self, column: str, row: int) -> str:
        return f'{column}{_validate_row(row)}'

    @qualify_range
    def span_range(self, first_column: str, last_column: str, row: int) -> str:
        row = _validate_row(row)
        return f'{first_column}{row}:{last_column}{row}'
