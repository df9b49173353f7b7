"""OAuth2 access token provider (JWT-bearer grant)

Exchanges a signed service account assertion for a bearer access token and
caches it in process memory until shortly before it expires.

Responsibilities:
    - Return the cached token while it is valid for more than `refresh_skew` seconds;
    - Otherwise sign a fresh assertion and POST it to the token endpoint;
    - Refresh single-flight: concurrent callers on a cold or stale cache share one exchange;
    - Raise AuthError (status + body) when the token endpoint rejects the assertion.

Classes:
    CachedToken:
        Access token and its expiry (epoch seconds).

    AccessTokenProvider:
        Token cache owned by one provider instance.

Example:
    >>> provider = AccessTokenProvider(signer)
    >>> provider.get_access_token()
    'ya29.c.b0Aaek...'
    >>> provider.get_access_token()  # served from cache, no network call
    'ya29.c.b0Aaek...'
"""

import time
import logging
import threading
from dataclasses import dataclass
from typing import Optional

import requests

from sheetshortener.auth.signer import ServiceAccountSigner
from sheetshortener.constants import Google, HTTP, TTL
from sheetshortener.exceptions import AuthError


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CachedToken:
    token: str
    expires_at: float  # epoch seconds

    def is_fresh(self, now: float, skew: float = TTL.REFRESH_SKEW) -> bool:
        return self.expires_at - now > skew


class AccessTokenProvider:
    """Bearer token source for the Google Sheets API.

    Attributes:
        signer (ServiceAccountSigner):
            Builds the signed assertion for each exchange.
        token_uri (str):
            OAuth2 token endpoint.
        refresh_skew (int):
            Tokens expiring within this many seconds are refreshed.

    Methods:
        get_access_token() -> str:
            Cached token, or a freshly exchanged one.
            Raises SigningError if the assertion cannot be signed.
            Raises AuthError if the token endpoint rejects the assertion.
        invalidate() -> None:
            Drop the cached token.

    NOTE:
        The cache lives only as long as the provider instance. Share one
        provider between clients to share its token.
    """

    def __init__(
        self,
        signer: ServiceAccountSigner,
        session: Optional[requests.Session] = None,
        token_uri: str = Google.TOKEN_URI,
        refresh_skew: int = TTL.REFRESH_SKEW,
        timeout: float = HTTP.TIMEOUT_SECONDS,
        clock=time.time,
    ):
        self.signer = signer
        self.session = session or requests.Session()
        self.token_uri = token_uri
        self.refresh_skew = refresh_skew
        self.timeout = timeout
        self._clock = clock
        self._cached: CachedToken | None = None
        self._lock = threading.Lock()

    @property
    def cached(self) -> CachedToken | None:
        return self._cached

    def get_access_token(self) -> str:
        """Return a bearer access token, refreshing it when stale

        Returns:
            str: access token.

        Raises:
            SigningError:
                If the assertion cannot be signed.
            AuthError:
                If the token endpoint answers with a non-2xx status or an unusable body.
        """
        cached = self._cached
        if cached is not None and cached.is_fresh(self._clock(), self.refresh_skew):
            return cached.token

        with self._lock:
            # Another caller may have refreshed while we waited for the lock
            cached = self._cached
            if cached is not None and cached.is_fresh(self._clock(), self.refresh_skew):
                return cached.token

            self._cached = self._exchange()
            return self._cached.token

    def invalidate(self) -> None:
        with self._lock:
            self._cached = None

    def _exchange(self) -> CachedToken:
        """POST a fresh assertion to the token endpoint (jwt-bearer grant)"""
        now = self._clock()
        assertion = self.signer.sign(now=int(now))

        response = self.session.post(
            self.token_uri,
            data={'grant_type': Google.JWT_BEARER_GRANT, 'assertion': assertion},
            headers={'Content-Type': 'application/x-www-form-urlencoded'},
            timeout=self.timeout,
        )
        if not 200 <= response.status_code < 300:
            logger.error('Token exchange rejected.', extra={'status': response.status_code, 'tokenUri': self.token_uri})
            raise AuthError(response.status_code, response.text)

        try:
            payload = response.json()
            token = payload['access_token']
            expires_in = payload.get('expires_in')
            expires_in = TTL.ACCESS_TOKEN if expires_in is None else int(expires_in)
        except (ValueError, KeyError, TypeError) as e:
            raise AuthError(response.status_code, response.text) from e

        logger.info('Refreshed Google access token.', extra={'expiresIn': expires_in})
        return CachedToken(token=token, expires_at=now + expires_in)
