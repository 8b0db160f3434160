# --- Standard library imports ---
import logging


def tlog(
    logger: logging.Logger,
    emoji: str,
    subsystem: str,
    state: str,
    primary: str = "—--",
    meta: str | None = None,
    level: int = logging.INFO,
) -> None:
    """
    Emit a standardized telemetry log "tlog" line.

    Format:
        SUBSYSTEM STATE PRIMARY | meta data
    """
    msg = f"{subsystem:<24} {state:<10} {primary:<16}"
    if meta:
        msg += f" | {meta}"

    logger.log(level, f"{emoji} {msg}", stacklevel=2)
