from sheetshortener.auth.signer import ServiceAccountSigner, normalize_private_key, pem_to_der
from sheetshortener.auth.token_provider import AccessTokenProvider, CachedToken


__all__ = [
    'ServiceAccountSigner',
    'AccessTokenProvider',
    'CachedToken',
    'normalize_private_key',
    'pem_to_der',
]
