"""
Environment configuration for civic-compass.

Values come from the process environment, with a .env file loaded if present.
"""

import os

from dotenv import load_dotenv

# Load environment variables from .env file if present
load_dotenv()

DEFAULT_FEC_API_BASE_URL = "https://api.open.fec.gov/v1"
DEFAULT_FEC_API_KEY = "DEMO_KEY"

# api.data.gov allows far fewer calls on the shared demo key
DEMO_KEY_RATE_LIMIT_PER_HOUR = 30
DEFAULT_FEC_RATE_LIMIT_PER_HOUR = 1000


def get_supabase_url() -> str:
    url = os.environ.get("SUPABASE_URL")
    if not url:
        raise ValueError(
            "Supabase URL required. Set the SUPABASE_URL environment variable."
        )
    return url


def get_supabase_key() -> str:
    key = os.environ.get("SUPABASE_KEY") or os.environ.get("SUPABASE_ANON_KEY")
    if not key:
        raise ValueError(
            "Supabase key required. Set the SUPABASE_KEY (or SUPABASE_ANON_KEY) "
            "environment variable."
        )
    return key


def get_fec_api_key() -> str:
    return os.environ.get("FEC_API_KEY", DEFAULT_FEC_API_KEY)


def get_fec_base_url() -> str:
    return os.environ.get("FEC_API_BASE_URL", DEFAULT_FEC_API_BASE_URL)


def get_fec_rate_limit(api_key: str) -> int:
    """Requests/hour for the FEC client; FEC_RATE_LIMIT_PER_HOUR wins if set."""
    configured = os.environ.get("FEC_RATE_LIMIT_PER_HOUR")
    if configured:
        return int(configured)
    if api_key == DEFAULT_FEC_API_KEY:
        return DEMO_KEY_RATE_LIMIT_PER_HOUR
    return DEFAULT_FEC_RATE_LIMIT_PER_HOUR


def get_log_level() -> str:
    return os.environ.get("CIVIC_LOG_LEVEL", "INFO").upper()
