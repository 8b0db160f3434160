# --- Standard library imports ---
from pathlib import Path
from typing import Optional

# --- Project imports ---
from .config import Config
from .logger import get_logger


logger = get_logger("cache")

# --- Cache layout ---
def cache_file(domain: str, record_type: str, cache_dir=None) -> Path:
    """One plain-text file per (domain, record type), e.g. `home.example.com.AAAA`."""
    return Path(cache_dir or Config.CACHE_DIR) / f"{domain}.{record_type}"

# --- Last-applied IP cache ---
def load_cached_ip(domain: str, record_type: str, cache_dir=None) -> Optional[str]:
    """
    Return the last IP successfully applied to Cloudflare for this record.

    Failure or an empty file is treated as a cache miss.
    """
    try:
        ip = cache_file(domain, record_type, cache_dir).read_text().strip()
    except OSError:
        return None
    return ip or None

def store_ip(domain: str, record_type: str, ip: str, cache_dir=None) -> bool:
    """
    Persist the IP just applied to Cloudflare.

    Returns False (and logs) if the cache could not be written; the next
    run will then repeat the update.
    """
    path = cache_file(domain, record_type, cache_dir)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(f"{ip}\n")
        return True
    except OSError as e:
        logger.warning(f"Could not write IP cache {path}: {e}")
        return False
