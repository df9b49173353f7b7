"""Application-wide exceptions.

Classes:
    SheetShortenerError:
        Base class for all application-specific errors.

    ConfigurationError / MissingEnvironmentVariableError / BadConfigurationError:
        Raised while loading configuration.

    CredentialsError / SigningError / AuthError:
        Raised while obtaining Google OAuth2 credentials.

    ShortcodeGenerationError / GenerationExhaustedError:
        Raised when a unique short code cannot be produced.

Storage errors live in `sheetshortener.dao.exceptions`.

Example:
    >>> from sheetshortener.exceptions import AuthError
    >>> raise AuthError(400, '{"error": "invalid_grant"}')
    Traceback (most recent call last):
        ...
    sheetshortener.exceptions.AuthError: Token exchange failed with status 400: {"error": "invalid_grant"}
"""


class SheetShortenerError(Exception):
    """Base exception for all application-specific errors."""

    error_code = 'app:sheetshortener_error'


class ConfigurationError(SheetShortenerError):
    """Base exception for all configuration errors."""

    error_code = 'config:configuration_error'


class MissingEnvironmentVariableError(ConfigurationError):
    """Raised when a required environment variable is missing."""

    error_code = 'config:missing_environment_variable_error'


class BadConfigurationError(ConfigurationError):
    """Raised when the application is configured with invalid parameters."""

    error_code = 'config:bad_configuration_error'


class CredentialsError(SheetShortenerError):
    """Base exception for service account credential errors."""

    error_code = 'auth:credentials_error'


class SigningError(CredentialsError):
    """Raised when the private key cannot be imported or the assertion cannot be signed."""

    error_code = 'auth:signing_error'


class AuthError(CredentialsError):
    """Raised when the OAuth2 token endpoint rejects the signed assertion.

    Attributes:
        status (int | None): HTTP status returned by the token endpoint.
        body (str): Raw response body.
    """

    error_code = 'auth:auth_error'

    def __init__(self, status: int | None, body: str = ''):
        self.status = status
        self.body = body
        super().__init__(f'Token exchange failed with status {status}: {body}')


class ShortcodeGenerationError(SheetShortenerError):
    """Base exception for short code generation errors."""

    error_code = 'shortcode:generation_error'


class GenerationExhaustedError(ShortcodeGenerationError):
    """Raised when no unused short code was found within the attempt budget."""

    error_code = 'shortcode:generation_exhausted_error'

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(f'Unable to generate unique short code after {attempts} attempts')
