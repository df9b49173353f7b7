from sheetshortener.sheets.range_schema import SheetRangeSchema
from sheetshortener.sheets.client import SheetsClient


__all__ = [
    'SheetRangeSchema',
    'SheetsClient',
]
