"""Service account JWT assertion signing (RS256)

Builds the self-signed assertion exchanged at Google's OAuth2 token endpoint
for an access token (JWT-bearer grant).

Assertion layout:
    base64url(header) . base64url(claims) . base64url(signature)

    header: {"alg": "RS256", "typ": "JWT"}
    claims: {"iss": <client email>, "scope": <scope>, "aud": <token uri>, "iat": now, "exp": now + 3600}

Signature: RSASSA-PKCS1-v1_5 with SHA-256 over the ASCII bytes of
`<header>.<claims>`, using the PKCS8 RSA key of the service account.

Classes:
    ServiceAccountSigner:
        Holds the service account identity and signs assertions.

Functions:
    normalize_private_key(pem: str) -> str:
        Turn literal '\\n' escape sequences (common in env vars) into newlines.

    pem_to_der(pem: str) -> bytes:
        Strip PEM armor and whitespace and base64-decode to PKCS8 DER.

Example:
    >>> signer = ServiceAccountSigner(
    ...     client_email='shortener@project.iam.gserviceaccount.com',
    ...     private_key=os.environ['GOOGLE_PRIVATE_KEY'],
    ... )
    >>> assertion = signer.sign()
    >>> assertion.count('.')
    2
"""

import re
import json
import time
import base64
import binascii
import logging

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from sheetshortener.constants import Google, TTL
from sheetshortener.exceptions import SigningError
from sheetshortener.utils.helpers import b64url_encode


logger = logging.getLogger(__name__)

PEM_ARMOR_PATTERN = re.compile(r'-----(BEGIN|END) [^-]+-----')
JWT_HEADER = {'alg': 'RS256', 'typ': 'JWT'}


def normalize_private_key(pem: str) -> str:
    """Replace literal '\\n' escape sequences with real newlines"""
    return pem.replace('\\n', '\n')


def pem_to_der(pem: str) -> bytes:
    """Convert a PEM-encoded PKCS8 key into raw DER bytes

    Raises:
        SigningError: if the PEM body is not valid base64.
    """
    body = re.sub(r'\s+', '', PEM_ARMOR_PATTERN.sub('', normalize_private_key(pem)))
    if not body:
        raise SigningError('Private key is empty.')
    try:
        return base64.b64decode(body, validate=True)
    except (binascii.Error, ValueError) as e:
        raise SigningError('Private key is not valid base64 PEM.') from e


def _encode_segment(payload: dict) -> str:
    return b64url_encode(json.dumps(payload, separators=(',', ':')).encode('utf-8'))


class ServiceAccountSigner:
    """Sign JWT assertions for a Google service account.

    Attributes:
        client_email (str):
            Service account email, used as the `iss` claim.
        audience (str):
            Token endpoint URL, used as the `aud` claim.
        scope (str):
            OAuth2 scope requested by the assertion.
        lifetime (int):
            Seconds between `iat` and `exp`.

    Methods:
        claims(now: int) -> dict:
            Claims set for an assertion issued at `now`.
        sign(now: int | None = None) -> str:
            Compact, signed JWT assertion.
            Raises SigningError if the key cannot be imported or signing fails.
    """

    def __init__(
        self,
        client_email: str,
        private_key: str,
        audience: str = Google.TOKEN_URI,
        scope: str = Google.SHEETS_SCOPE,
        lifetime: int = TTL.ASSERTION,
    ):
        self.client_email = client_email
        self.audience = audience
        self.scope = scope
        self.lifetime = lifetime
        self._private_key_pem = private_key
        self._private_key: rsa.RSAPrivateKey | None = None

    def __repr__(self) -> str:
        # never render key material
        return f'ServiceAccountSigner(client_email={self.client_email!r}, audience={self.audience!r})'

    def _load_private_key(self) -> rsa.RSAPrivateKey:
        """Import the PKCS8 RSA private key (cached after the first call)

        Raises:
            SigningError: if the key cannot be parsed or is not an RSA key.
        """
        if self._private_key is not None:
            return self._private_key

        der = pem_to_der(self._private_key_pem)
        try:
            key = serialization.load_der_private_key(der, password=None)
        except (ValueError, TypeError, UnsupportedAlgorithm) as e:
            raise SigningError('Unable to import service account private key (expected PKCS8 RSA).') from e

        if not isinstance(key, rsa.RSAPrivateKey):
            raise SigningError(f'Service account private key must be an RSA key (given type: {type(key).__name__}).')

        self._private_key = key
        return key

    def claims(self, now: int) -> dict:
        return {
            'iss': self.client_email,
            'scope': self.scope,
            'aud': self.audience,
            'iat': now,
            'exp': now + self.lifetime,
        }

    def sign(self, now: int | None = None) -> str:
        """Build and sign a JWT assertion

        Args:
            now (int | None):
                Issue time as epoch seconds. Defaults to the current time.

        Returns:
            str: `<header>.<claims>.<signature>`, each segment base64url without padding.

        Raises:
            SigningError:
                If the private key cannot be imported or the signing primitive fails.
        """
        issued_at = int(time.time()) if now is None else int(now)
        signing_input = f'{_encode_segment(JWT_HEADER)}.{_encode_segment(self.claims(issued_at))}'

        key = self._load_private_key()
        try:
            signature = key.sign(signing_input.encode('ascii'), padding.PKCS1v15(), hashes.SHA256())
        except (ValueError, TypeError) as e:
            raise SigningError('Unable to sign service account assertion.') from e

        logger.debug('Signed service account assertion.', extra={'clientEmail': self.client_email, 'issuedAt': issued_at})
        return f'{signing_input}.{b64url_encode(signature)}'
