from sheetshortener.utils.config import app_env, app_name, app_prefix, load_config
from sheetshortener.utils.helpers import utc_timestamp, generate_record_id, b64url_encode, require_environment
from sheetshortener.utils.shortener import (
    generate_shortcode,
    generate_unique_shortcode,
    hash_shortcode,
    hybrid_shortcode,
)
from sheetshortener.utils.logging import initialize_logging


__all__ = [
    'generate_shortcode',
    'generate_unique_shortcode',
    'hash_shortcode',
    'hybrid_shortcode',
    'app_env',
    'app_name',
    'app_prefix',
    'load_config',
    'utc_timestamp',
    'generate_record_id',
    'b64url_encode',
    'require_environment',
    'initialize_logging',
]
