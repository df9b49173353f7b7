from dataclasses import dataclass, replace
from typing import Optional


@dataclass(frozen=True)
class ShortURLModel:
    """Represent a shortened URL mapping.

    One record maps to one spreadsheet row, columns A..F:
    id, url, shortCode, createdAt, updatedAt, count.

    Attributes:
        id (str):
            Opaque identifier generated at creation. Never reused.
        url (str):
            The destination URL that the short code redirects to.
        shortcode (str):
            The unique short identifier of the shortened URL.
        created_at (str):
            ISO-8601 creation timestamp.
        updated_at (str):
            ISO-8601 timestamp of the last url change or visit.
        count (int):
            Visit counter. Never decreases after creation.

    Example:
        >>> url = ShortURLModel(
        ...     id='id_4b1c...',
        ...     url='https://example.com/article/123',
        ...     shortcode='abc123',
        ...     created_at='2025-10-15T00:00:00.000Z',
        ...     updated_at='2025-10-15T00:00:00.000Z',
        ... )
        >>> url.to_row()
        ['id_4b1c...', 'https://example.com/article/123', 'abc123', '2025-10-15T00:00:00.000Z', '2025-10-15T00:00:00.000Z', '0']
        >>> ShortURLModel.from_row(url.to_row()) == url
        True
    """

    id: str
    url: str
    shortcode: str
    created_at: str = ''
    updated_at: str = ''
    count: int = 0

    def to_row(self) -> list[str]:
        """Render the record as the six cells of a spreadsheet row."""
        return [self.id, self.url, self.shortcode, self.created_at, self.updated_at, str(self.count)]

    @classmethod
    def from_row(cls, values: list[str] | None) -> Optional['ShortURLModel']:
        """Parse a spreadsheet row into a record

        Rows with fewer than 3 cells, or with an empty id, url or short code,
        are considered malformed (this includes cleared rows) and yield None.
        A missing or unparsable count is read as 0.

        Args:
            values (list[str] | None):
                Cells of a single row, as returned by the values API.
                Trailing empty cells are usually omitted by the API.

        Returns:
            ShortURLModel | None: parsed record, or None for malformed rows.
        """
        if not values or len(values) < 3:
            return None

        cells = [str(value) if value is not None else '' for value in values] + [''] * (6 - len(values))
        id_, url, shortcode, created_at, updated_at, count = cells[:6]
        if not id_ or not url or not shortcode:
            return None

        try:
            parsed_count = int(count or '0')
        except ValueError:
            parsed_count = 0

        return cls(
            id=id_,
            url=url,
            shortcode=shortcode,
            created_at=created_at,
            updated_at=updated_at,
            count=max(parsed_count, 0),
        )

    def with_changes(self, **changes) -> 'ShortURLModel':
        """Return a copy of this (frozen) record with the given fields replaced."""
        return replace(self, **changes)
