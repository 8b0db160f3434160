import importlib

from .logger import get_logger

# Define the logger once for the entire module
logger = get_logger("sanity")

# Module name → what it is needed for
REQUIRED_MODULES = {
    "fcntl": "file locking (POSIX platform)",
    "requests": "HTTP client",
    "dotenv": ".env support (python-dotenv)",
}


def missing_dependencies() -> list[str]:
    """Return the required modules that cannot be imported."""
    missing = []
    for name in REQUIRED_MODULES:
        try:
            importlib.import_module(name)
        except ImportError:
            missing.append(name)
    return missing

def run_sanity_checks() -> bool:
    """
    Verify runtime prerequisites before touching config, cache or network.

    Must run before any module importing `requests` or `dotenv` is loaded.
    Every missing dependency is logged as fatal.

    Returns:
        True if the environment is usable, False otherwise.
    """
    missing = missing_dependencies()
    for name in missing:
        logger.critical(f"Missing dependency: {name} ({REQUIRED_MODULES[name]})")

    if missing:
        return False

    logger.debug("🧩 All sanity checks passed")
    return True
