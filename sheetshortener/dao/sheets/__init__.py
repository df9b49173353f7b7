from sheetshortener.dao.sheets.short_url_sheets_dao import ShortURLSheetsDAO
from sheetshortener.dao.sheets.mixins import SheetsClientMixin


__all__ = [
    'ShortURLSheetsDAO',
    'SheetsClientMixin',
]
