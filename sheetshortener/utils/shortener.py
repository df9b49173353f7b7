"""Shortcode generation utility

This module provides random, deterministic (hash-based) and hybrid short code
generators, plus a uniqueness loop driven by a caller-supplied existence check.

Charsets:
    ALPHANUMERIC_CHARSET:  Base62 [A-Za-z0-9] (default)
    URL_FRIENDLY_CHARSET:  Base62 minus visually ambiguous characters (0, O, o, 1, l, I)
    EXTENDED_URL_CHARSET:  Base62 plus '_' and '-' (still URL safe without encoding)

Functions:
    secure_random_int(max_exclusive) -> int:
        Unbiased cryptographically strong integer in [0, max_exclusive).

    generate_shortcode(length=6, charset=ALPHANUMERIC_CHARSET, random_int=secure_random_int) -> str:
        Random short code. Does NOT check uniqueness.

    generate_unique_shortcode(check_exists, length=6, ...) -> str:
        Random short code which `check_exists` reports as unused.

    hash_shortcode(value, length=8, charset=ALPHANUMERIC_CHARSET, salt='') -> str:
        Deterministic short code derived from SHA-256(salt + value).

    hybrid_shortcode(value, check_exists, deterministic_length=6, ...) -> str:
        Deterministic code when unused, random unique code otherwise.

Example:
    >>> from sheetshortener.utils import generate_unique_shortcode
    >>> generate_unique_shortcode(check_exists=lambda candidate: dao.exists(candidate), length=7)
    'Qm3ZpXa'
    >>> hash_shortcode('https://example.com/page', salt='my_secret')
    'Y6zIEaem'
"""

import hashlib
import logging
import secrets
import string
from enum import StrEnum

from sheetshortener.constants import Shortcode
from sheetshortener.exceptions import GenerationExhaustedError
from sheetshortener.types import ExistsCheck, RandomInt


logger = logging.getLogger(__name__)

ALPHANUMERIC_CHARSET = string.ascii_uppercase + string.ascii_lowercase + string.digits
URL_FRIENDLY_CHARSET = 'ABCDEFGHJKMNPQRSTUVWXYZabcdefghjkmnpqrstuvwxyz23456789'
EXTENDED_URL_CHARSET = ALPHANUMERIC_CHARSET + '_-'

UINT32_RANGE = 2**32


class ShortcodeStrategy(StrEnum):
    """Short code generation modes available to the service layer."""

    RANDOM = 'random'
    HASH = 'hash'
    HYBRID = 'hybrid'


def secure_random_int(max_exclusive: int) -> int:
    """Return an unbiased random integer in [0, max_exclusive)

    Draws a 32-bit value from the OS CSPRNG. Values at or above the largest
    multiple of `max_exclusive` that fits in 32 bits are rejected and a new
    value is drawn, so every residue is equally likely.

    Args:
        max_exclusive (int): upper bound (exclusive), 1 <= max_exclusive <= 2**32.

    Returns:
        int: random integer in [0, max_exclusive).
    """
    if not 1 <= max_exclusive <= UINT32_RANGE:
        raise ValueError(f'max_exclusive must be within [1, 2**32] (given value: {max_exclusive}).')

    limit = (UINT32_RANGE // max_exclusive) * max_exclusive
    value = secrets.randbits(32)
    if value < limit:
        return value % max_exclusive
    return secure_random_int(max_exclusive)


def _validate_length(length: int) -> None:
    if isinstance(length, bool) or not isinstance(length, int):
        raise TypeError(f'Length must be of type integer (given type: {type(length)}).')
    if length <= 0:
        raise ValueError(f'Length must be a positive integer (given value: {length}).')


def generate_shortcode(
    length: int = Shortcode.RANDOM_LENGTH,
    charset: str = ALPHANUMERIC_CHARSET,
    random_int: RandomInt = secure_random_int,
) -> str:
    """Generate a random short code (does NOT check uniqueness).

    Args:
        length (int, optional):
            Number of characters. Defaults to 6.

        charset (str, optional):
            Characters to sample from. Must contain at least 2 characters.
            Defaults to ALPHANUMERIC_CHARSET.

        random_int (Callable[[int], int], optional):
            Source of integers in [0, n). Defaults to secure_random_int.
            Mainly for injecting deterministic values in tests.

    Returns:
        str: random short code of exactly `length` characters.

    Raises:
        TypeError: if length is not an integer.
        ValueError: if length is not positive or charset is too small.
    """
    _validate_length(length)
    if not charset or len(charset) < 2:
        raise ValueError('Charset must contain at least 2 characters.')

    return ''.join(charset[random_int(len(charset))] for _ in range(length))


def generate_unique_shortcode(
    check_exists: ExistsCheck,
    length: int = Shortcode.RANDOM_LENGTH,
    charset: str = ALPHANUMERIC_CHARSET,
    max_attempts: int | None = None,
    random_int: RandomInt = secure_random_int,
) -> str:
    """Generate a random short code which `check_exists` reports as unused.

    Args:
        check_exists (Callable[[str], bool]):
            Returns True if the candidate is ALREADY taken (i.e. collision).

        length (int, optional):
            Number of characters. Defaults to 6.

        charset (str, optional):
            Characters to sample from. Defaults to ALPHANUMERIC_CHARSET.

        max_attempts (int | None, optional):
            Candidates to try before giving up. Defaults to 5 * length.

        random_int (Callable[[int], int], optional):
            Source of integers in [0, n). Defaults to secure_random_int.

    Returns:
        str: the first candidate reported absent.

    Raises:
        GenerationExhaustedError:
            If every candidate within the attempt budget was taken.

    NOTE:
        The existence check and the later insert are not atomic. A code found
        free here may still be taken by a concurrent writer before insertion;
        the insert performs its own, independent check.
    """
    if not callable(check_exists):
        raise TypeError('check_exists callback is required for uniqueness checks.')
    _validate_length(length)

    attempts = Shortcode.ATTEMPTS_PER_CHAR * length if max_attempts is None else max_attempts
    for attempt in range(1, attempts + 1):
        candidate = generate_shortcode(length=length, charset=charset, random_int=random_int)
        if not check_exists(candidate):
            return candidate
        logger.debug('Short code candidate already taken.', extra={'attempt': attempt, 'maxAttempts': attempts})

    logger.warning('Short code generation exhausted.', extra={'maxAttempts': attempts, 'length': length})
    raise GenerationExhaustedError(attempts)


def hash_shortcode(
    value: str,
    length: int = Shortcode.HASH_LENGTH,
    charset: str = ALPHANUMERIC_CHARSET,
    salt: str = '',
) -> str:
    """Create a deterministic short code derived from `value` (e.g. a URL).

    Computes SHA-256 over the UTF-8 bytes of `salt + value` and maps each digest
    byte to `charset[byte % len(charset)]`, truncated to `length`. The same
    (value, salt, length, charset) always yields the same code.

    Args:
        value (str): input to derive the code from.
        length (int, optional): Code length. Defaults to 8. At most 32 (digest size), ValueError beyond.
        charset (str, optional): Must contain at least 4 characters.
        salt (str, optional): Prefix mixed into the digest. Defaults to ''.

    Returns:
        str: deterministic short code.

    NOTE:
        - Collisions are possible by construction (truncated hash space).
          Pair with `hybrid_shortcode` when uniqueness matters.
        - The mapping keeps the modulo bias of `256 % len(charset)`; this is
          part of the output format and must not change.
    """
    if not isinstance(value, str):
        raise TypeError(f'Value must be of type string (given type: {type(value)}).')
    if not isinstance(salt, str):
        raise TypeError(f'Salt must be of type string (given type: {type(salt)}).')
    _validate_length(length)
    if not charset or len(charset) < 4:
        raise ValueError('Charset must contain at least 4 characters.')

    digest = hashlib.sha256((salt + value).encode('utf-8')).digest()
    if length > len(digest):
        raise ValueError(f'Hash short codes are at most {len(digest)} characters long (given length: {length}).')
    return ''.join(charset[byte % len(charset)] for byte in digest[:length])


def hybrid_shortcode(
    value: str,
    check_exists: ExistsCheck,
    deterministic_length: int = Shortcode.RANDOM_LENGTH,
    random_length: int | None = None,
    charset: str = ALPHANUMERIC_CHARSET,
    salt: str = '',
    max_attempts: int | None = None,
) -> str:
    """Deterministic short code when unused, random unique short code otherwise.

    Gives idempotent codes (same URL => same code) while the deterministic slot
    is free, and avoids accidental reuse when it is already taken.

    Args:
        value (str): input to derive the deterministic code from.
        check_exists (Callable[[str], bool]): Returns True if a candidate is taken.
        deterministic_length (int, optional): Defaults to 6.
        random_length (int | None, optional): Defaults to deterministic_length.
        charset (str, optional): Defaults to ALPHANUMERIC_CHARSET.
        salt (str, optional): Salt for the deterministic code. Defaults to ''.
        max_attempts (int | None, optional): Budget of the random fallback.

    Returns:
        str: chosen short code.

    Raises:
        GenerationExhaustedError: if the random fallback runs out of attempts.
    """
    deterministic = hash_shortcode(value, length=deterministic_length, charset=charset, salt=salt)
    if not check_exists(deterministic):
        return deterministic

    logger.debug('Deterministic short code taken, falling back to random generation.')
    return generate_unique_shortcode(
        check_exists,
        length=deterministic_length if random_length is None else random_length,
        charset=charset,
        max_attempts=max_attempts,
    )
