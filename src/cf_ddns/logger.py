# --- Standard library imports ---
import sys
import logging
from pathlib import Path

# --- Project imports ---
from .lock import FileLock


# --- Format configuration constants ---
LOG_LEVEL_EMOJIS = {
    logging.DEBUG: "🧱",
    logging.INFO: "🟢",
    logging.WARNING: "⚠️ ",
    logging.ERROR: "❌",
    logging.CRITICAL: "🔥",
}

LEVEL_NAME_MAP = {
    "WARNING": "WARN",
    "CRITICAL": "FATAL",
}

FILE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
FILE_DATEFMT = "%Y-%m-%d %H:%M:%S"

# --- Formatters ---
class EmojiFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        """
        Formatter that prepends an emoji per
        log level and shortens log level names.
        """
        record.levelemoji = LOG_LEVEL_EMOJIS.get(record.levelno, "")
        record.levelname = LEVEL_NAME_MAP.get(record.levelname, record.levelname)
        return super().format(record)

# --- Handlers ---
class BoundedFileHandler(logging.Handler):
    """
    Append log lines to a file that never grows past `max_lines`.

    Each write happens under an exclusive file lock so concurrent
    invocations cannot interleave appends or trims. After appending,
    the oldest lines are dropped until the ceiling holds.
    """

    def __init__(self, filename, max_lines: int = 1000, encoding: str = "utf-8"):
        super().__init__()
        if max_lines < 1:
            raise ValueError(f"max_lines must be positive, got {max_lines}")

        self.filename = Path(filename)
        self.max_lines = max_lines
        self.encoding = encoding
        self.file_lock = FileLock(self.filename.with_name(self.filename.name + ".lock"))

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
            with self.file_lock:
                self._append_and_trim(msg)
        except Exception:
            self.handleError(record)

    def _append_and_trim(self, msg: str) -> None:
        self.filename.parent.mkdir(parents=True, exist_ok=True)

        with open(self.filename, "a", encoding=self.encoding) as fh:
            fh.write(msg + "\n")

        with open(self.filename, "r", encoding=self.encoding) as fh:
            lines = fh.readlines()

        if len(lines) > self.max_lines:
            with open(self.filename, "w", encoding=self.encoding) as fh:
                fh.writelines(lines[-self.max_lines:])

# --- Public logging setup API ---
def setup_logging(
    level=logging.INFO,
    log_file=None,
    max_lines: int = 1000,
) -> None:
    """
    Configure global logging: emoji console output on stdout and,
    when `log_file` is given, a bounded plain-text log file.
    """
    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(EmojiFormatter(
        fmt="%(asctime)s %(levelemoji)s %(name)s:%(funcName)s → %(message)s",
        datefmt="%H:%M:%S",
    ))
    root.addHandler(console)

    if log_file is not None:
        file_handler = BoundedFileHandler(log_file, max_lines=max_lines)
        file_handler.setFormatter(logging.Formatter(fmt=FILE_FORMAT, datefmt=FILE_DATEFMT))
        root.addHandler(file_handler)

def get_logger(name: str) -> logging.Logger:
    """
    Return a namespaced logger for any module.
    """
    return logging.getLogger(f"cf_ddns.{name}")

