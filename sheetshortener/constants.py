from enum import StrEnum


class Google:
    """Google OAuth2 and Sheets API endpoints."""

    TOKEN_URI = 'https://oauth2.googleapis.com/token'
    SHEETS_BASE_URL = 'https://sheets.googleapis.com/v4/spreadsheets'
    SHEETS_SCOPE = 'https://www.googleapis.com/auth/spreadsheets'
    JWT_BEARER_GRANT = 'urn:ietf:params:oauth:grant-type:jwt-bearer'


class TTL:
    """Token lifetimes in seconds."""

    # Lifetime requested for a signed service account assertion (1 hour)
    ASSERTION = 3_600
    # Fallback access token lifetime when the token endpoint omits `expires_in`
    ACCESS_TOKEN = 3_600
    # Cached tokens closer than this to expiry are refreshed
    REFRESH_SKEW = 60


class Sheet:
    """Fixed spreadsheet layout: one short URL per row, row 1 is a header."""

    DEFAULT_NAME = 'Sheet1'
    HEADER_ROW = 1
    FIRST_COLUMN = 'A'
    LAST_COLUMN = 'F'
    HEADER = ('id', 'url', 'shortCode', 'createdAt', 'updatedAt', 'count')
    # A leading apostrophe stores a USER_ENTERED value as literal text; reads return it without the apostrophe
    TEXT_PREFIX = "'"

    class Column(StrEnum):
        ID = 'A'
        URL = 'B'
        SHORTCODE = 'C'
        CREATED_AT = 'D'
        UPDATED_AT = 'E'
        COUNT = 'F'


class Shortcode:
    """Short code generation defaults."""

    RANDOM_LENGTH = 6
    HASH_LENGTH = 8
    MIN_LENGTH = 3
    MAX_LENGTH = 30
    # Unique generation tries `ATTEMPTS_PER_CHAR * length` candidates before giving up
    ATTEMPTS_PER_CHAR = 5


class HTTP:
    """Outbound HTTP defaults."""

    TIMEOUT_SECONDS = 10


class ENV:
    """Environment variable names."""

    class App(StrEnum):
        APP_ENV = 'APP_ENV'
        APP_NAME = 'APP_NAME'
        ACTIVE_BACKEND = 'ACTIVE_BACKEND'
        LOG_LEVEL = 'LOG_LEVEL'
        AWS_SAM_LOCAL = 'AWS_SAM_LOCAL'

    class Sheets(StrEnum):
        SPREADSHEET_ID = 'SPREADSHEET_ID'
        SHEET_NAME = 'SHEET_NAME'
        CLIENT_EMAIL = 'GOOGLE_CLIENT_EMAIL'
        PRIVATE_KEY = 'GOOGLE_PRIVATE_KEY'  # noqa: S105
        # Secrets Manager name holding the service account key file JSON:
        # {"client_email": "...", "private_key": "..."}
        CREDENTIALS_SECRET = 'GOOGLE_CREDENTIALS_SECRET'  # noqa: S105

    class Redis(StrEnum):
        HOST = 'REDIS_HOST'
        PORT = 'REDIS_PORT'
        DB = 'REDIS_DB'
        USERNAME = 'REDIS_USERNAME'
        PASSWORD = 'REDIS_PASSWORD'  # noqa: S105

    class Shortcode(StrEnum):
        STRATEGY = 'SHORTCODE_STRATEGY'
        LENGTH = 'SHORTCODE_LENGTH'
        SALT = 'SHORTCODE_SALT'

    class LocalStack(StrEnum):
        ENDPOINT = 'LOCALSTACK_ENDPOINT'  # usually http://localstack:4566
