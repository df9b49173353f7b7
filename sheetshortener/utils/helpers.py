"""Helper utilities shared across the application.

Functions:
    utc_timestamp(now: datetime | None = None) -> str
        ISO-8601 UTC timestamp with millisecond precision and a 'Z' suffix
    generate_record_id() -> str
        Generate an opaque, never reused record identifier
    b64url_encode(data: bytes | str) -> str
        Base64url encoding without padding (JWT segments)
    require_environment(*names: str) -> Callable
        Decorator: Ensure required environment variables are present

Example:
    >>> from sheetshortener.utils.helpers import utc_timestamp, b64url_encode
    >>> utc_timestamp(datetime(2025, 10, 15, 12, 0, tzinfo=UTC))
    '2025-10-15T12:00:00.000Z'
    >>> b64url_encode('{"alg":"RS256"}')
    'eyJhbGciOiJSUzI1NiJ9'
"""

import os
import base64
import functools
import uuid
from datetime import datetime, UTC
from collections.abc import Callable

from sheetshortener.exceptions import MissingEnvironmentVariableError


def utc_timestamp(now: datetime | None = None) -> str:
    """Return an ISO-8601 UTC timestamp, e.g. '2025-10-15T12:00:00.000Z'

    Args:
        now (datetime | None):
            Moment to format. Defaults to the current time in UTC.

    Returns:
        str: millisecond precision timestamp with a trailing 'Z'.
    """
    # fmt: off
    return (now or datetime.now(UTC)).astimezone(UTC) \
                                     .isoformat(timespec='milliseconds') \
                                     .replace('+00:00', 'Z')
    # fmt: on


def generate_record_id() -> str:
    """Generate an opaque record identifier, e.g. 'id_9f1c2b...'

    Backed by a random UUID4, so identifiers are never reused even when
    records are deleted and their short codes recycled.
    """
    return f'id_{uuid.uuid4().hex}'


def b64url_encode(data: bytes | str) -> str:
    """Base64url-encode `data` without '=' padding

    Strings are UTF-8 encoded first.
    """
    raw = data.encode('utf-8') if isinstance(data, str) else data
    return base64.urlsafe_b64encode(raw).rstrip(b'=').decode('ascii')


def require_environment(*names: str) -> Callable:
    """Decorator ensuring required environment variables are present.

    Args:
        *names (str):
            Names of required environment variables.

    Raises:
        MissingEnvironmentVariableError:
            If any required environment variable is missing or empty.

    Example:
        >>> @require_environment('SPREADSHEET_ID', 'GOOGLE_CLIENT_EMAIL')
        ... def my_function():
        ...     pass
        >>> my_function()
        MissingEnvironmentVariableError: Missing required environment variables: 'SPREADSHEET_ID', 'GOOGLE_CLIENT_EMAIL'
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            missing = [name for name in names if not os.environ.get(name)]
            if missing:
                missing_list = ', '.join(f"'{name}'" for name in missing)
                raise MissingEnvironmentVariableError(f'Missing required environment variables: {missing_list}')
            return func(*args, **kwargs)

        return wrapper

    return decorator
