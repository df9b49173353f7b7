"""Abstract base class for ShortURL data access objects (DAOs).

This class establishes a consistent contract for all ShortURL DAO implementations,
regardless of the underlying storage mechanism (e.g., Google Sheets, Redis).

Responsibilities:
    - Provide an interface for creating, reading, updating and deleting ShortURLModel records.
    - Standardize error handling across multiple data store implementations.
    - Let an index-capable backend replace the spreadsheet without touching call sites.

Example:
    Typical usage with a datastore-specific implementation:

        >>> from sheetshortener.models import ShortURLModel
        >>> from sheetshortener.dao.sheets import ShortURLSheetsDAO

        >>> dao = ShortURLSheetsDAO(...)

        >>> dao.insert(ShortURLModel(id='id_1', url='https://example.com/a', shortcode='abc123'))

        >>> dao.hit('abc123')
        'https://example.com/a'

        >>> dao.get('abc123').count
        1
"""

from abc import ABC, abstractmethod

from sheetshortener.models import ShortURLModel


class ShortURLBaseDAO(ABC):
    """Interface for ShortURL data access objects (DAOs).

    Methods:
        insert(short_url: ShortURLModel, **kwargs) -> ShortURLBaseDAO:
            Insert a new record.
            Raises ShortURLAlreadyExistsError if the short code is live.

        get(shortcode: str, **kwargs) -> ShortURLModel:
            Retrieve a record by short code.
            Raises ShortURLNotFoundError if it does not exist.

        exists(shortcode: str, **kwargs) -> bool:
            True if a live record holds the short code.

        update(shortcode: str, url: str, **kwargs) -> ShortURLBaseDAO:
            Point a short code at a new URL and refresh its updated_at.
            Raises ShortURLNotFoundError if it does not exist.

        hit(shortcode: str, **kwargs) -> str:
            Increment the visit counter and return the destination URL.
            Raises ShortURLNotFoundError if it does not exist.

        delete(shortcode: str, **kwargs) -> ShortURLBaseDAO:
            Remove a record, freeing its short code.
            Raises ShortURLNotFoundError if it does not exist.

        list(**kwargs) -> list[ShortURLModel]:
            All live records.

        Every method raises DataStoreError on connection or transport failures.

    Subclassing:
        Datastore-specific implementations (e.g., ShortURLSheetsDAO or
        ShortURLRedisDAO) must extend this class and implement all
        abstract methods.
    """

    @abstractmethod
    def insert(self, short_url: ShortURLModel, **kwargs) -> 'ShortURLBaseDAO':
        """Insert a new ShortURLModel into the data store.

        Args:
            short_url (ShortURLModel):
                The ShortURLModel instance to be inserted.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            ShortURLBaseDAO: self (for method chaining)

        Raises:
            ShortURLAlreadyExistsError:
                If a live record with the same short code already exists.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def get(self, shortcode: str, **kwargs) -> ShortURLModel:
        """Retrieve a ShortURLModel from the data store by its short code.

        Raises:
            ShortURLNotFoundError:
                If no live record holds the short code.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def exists(self, shortcode: str, **kwargs) -> bool:
        """Return True if a live record holds the short code."""
        pass

    @abstractmethod
    def update(self, shortcode: str, url: str, **kwargs) -> 'ShortURLBaseDAO':
        """Point `shortcode` at `url` and refresh its updated_at timestamp.

        id, shortcode, created_at and count are left unchanged.

        Raises:
            ShortURLNotFoundError:
                If no live record holds the short code.
        """
        pass

    @abstractmethod
    def hit(self, shortcode: str, **kwargs) -> str:
        """Increment the visit counter of `shortcode` and return its destination URL.

        Raises:
            ShortURLNotFoundError:
                If no live record holds the short code.
        """
        pass

    @abstractmethod
    def delete(self, shortcode: str, **kwargs) -> 'ShortURLBaseDAO':
        """Delete the record of `shortcode`. The short code becomes reusable.

        Raises:
            ShortURLNotFoundError:
                If no live record holds the short code.
        """
        pass

    @abstractmethod
    def list(self, **kwargs) -> list[ShortURLModel]:
        """Return every live record."""
        pass
