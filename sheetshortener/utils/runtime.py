"""Runtime utilities

Functions:
    running_locally() -> bool:
        True if the service runs on a developer machine (APP_ENV=local or SAM local).

Example:
    >>> from sheetshortener.utils.runtime import running_locally
    >>> os.environ['APP_ENV'] = 'local'
    >>> running_locally()
    True
    >>> os.environ['APP_ENV'] = 'prod'
    >>> running_locally()
    False
"""

import os

from sheetshortener.constants import ENV


def running_locally() -> bool:
    """Check if the service is running locally

    Local runs resolve AWS secrets through LocalStack instead of AWS.

    Returns:
        bool: True if running locally, False otherwise.
    """
    env = os.getenv(ENV.App.APP_ENV, '').lower()
    return env == 'local' or os.getenv(ENV.App.AWS_SAM_LOCAL) == 'true'
