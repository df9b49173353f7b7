"""Application-wide logging initialization

IMPORTANT: Call `initialize_logging()` once at process start-up, before
any other logging is done.

Logging format:
{
    "timestamp": "2025-10-15T12:00:00.000Z",
    "level": "INFO",
    "logger": "sheetshortener.auth.token_provider",
    "message": "Refreshed Google access token.",
    "expiresIn": 3599
}

Fields passed through `extra={...}` are attached to the JSON document.
Exceptions are rendered under "exception".
"""

import os
import json
import logging
import logging.config
from datetime import datetime, UTC

from sheetshortener.constants import ENV
from sheetshortener.utils.helpers import utc_timestamp


class JsonFormatter(logging.Formatter):
    """JSON formatter that includes LogRecord extras"""

    STANDARD_ATTRS = frozenset(vars(logging.LogRecord('', 0, '', 0, '', (), None)).keys()) | {'message', 'asctime'}

    def format(self, record: logging.LogRecord) -> str:
        log = {
            'timestamp': utc_timestamp(datetime.fromtimestamp(record.created, tz=UTC)),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }

        # Attach `extra` fields
        for key, value in record.__dict__.items():
            if key not in self.STANDARD_ATTRS:
                log[key] = value

        if record.exc_info:
            log['exception'] = self.formatException(record.exc_info)

        return json.dumps(log, default=str)


def initialize_logging(level: str | None = None) -> None:
    """Install the JSON stdout handler on the root logger

    Args:
        level (str | None):
            Log level name. Defaults to the LOG_LEVEL environment variable, then INFO.
    """
    log_level = (level or os.getenv(ENV.App.LOG_LEVEL, 'INFO')).upper()
    logging.config.dictConfig(
        {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {
                'json': {
                    '()': JsonFormatter,
                }
            },
            'handlers': {
                'stdout': {
                    'class': 'logging.StreamHandler',
                    'formatter': 'json',
                    'stream': 'ext://sys.stdout',
                }
            },
            'loggers': {
                # urllib3 logs full request URLs at DEBUG level
                'urllib3': {'level': 'WARNING'},
            },
            'root': {
                'level': log_level,
                'handlers': ['stdout'],
            },
        }
    )
