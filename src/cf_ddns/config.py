# --- Standard library imports ---
import os
from pathlib import Path

# --- Third-party imports ---
from dotenv import load_dotenv


# Load .env once
load_dotenv()

def _env_int(name: str, default: int, minimum: int | None = None) -> int:
    try:
        value = int(os.getenv(name, default))
    except ValueError:
        return default
    if minimum is not None and value < minimum:
        return default
    return value

class Config:
    """Centralized config for file locations, retry policy and API access"""

    # --- File Layout ---
    CONFIG_FILE = Path(
        os.getenv("CF_DDNS_CONFIG", Path.home() / ".config" / "cf_ddns" / "config.json")
    ).expanduser()
    CACHE_DIR = Path(
        os.getenv("CF_DDNS_CACHE_DIR", Path.home() / ".cache" / "cf_ddns")
    ).expanduser()
    LOG_FILE = Path(
        os.getenv("CF_DDNS_LOG_FILE", CACHE_DIR / "cf_ddns.log")
    ).expanduser()

    # --- Observability Policy ---
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
    LOG_MAX_LINES = _env_int("LOG_MAX_LINES", 1000, minimum=1)

    # --- Retry Policy ---
    MAX_RETRIES = _env_int("MAX_RETRIES", 3, minimum=1)
    RETRY_DELAY = _env_int("RETRY_DELAY", 5, minimum=0)   # seconds

    # --- Cloudflare ---
    API_BASE_URL = os.getenv(
        "CLOUDFLARE_API_BASE_URL", "https://api.cloudflare.com/client/v4"
    )

    # --- Network Policy (NOT user configurable) ---
    API_TIMEOUT = 8   # seconds (safe, balanced)

    # --- DNS Constants (NOT user configurable) ---
    CLOUDFLARE_AUTO_TTL = 1
    CLOUDFLARE_MIN_TTL = 60      # seconds (non-enterprise minimum)
    CLOUDFLARE_MAX_TTL = 86400
