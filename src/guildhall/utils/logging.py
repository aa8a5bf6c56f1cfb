"""Root logger setup for the server process."""

import logging
import sys
from pathlib import Path

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"

LEVEL_COLORS = {
    logging.DEBUG: "\033[36m",      # cyan
    logging.INFO: "\033[32m",       # green
    logging.WARNING: "\033[33m",    # yellow
    logging.ERROR: "\033[31m",      # red
    logging.CRITICAL: "\033[1;31m", # bold red
}
RESET = "\033[0m"


class ColorFormatter(logging.Formatter):
    """Colors the level name for terminal output."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        color = LEVEL_COLORS.get(record.levelno)
        if not color:
            return message
        return message.replace(f"[{record.levelname}]", f"[{color}{record.levelname}{RESET}]", 1)


def setup_logging(
    level: str | int = "INFO",
    log_file: Path | str | None = None,
    enable_color: bool = True,
) -> logging.Logger:
    """
    Configure the root logger and return the package logger.

    Args:
        level: Level name or number for the root logger.
        log_file: Optional file that receives an uncolored copy of every record.
        enable_color: Color level names on the console when it is a TTY.
    """
    if isinstance(level, str):
        level = getattr(logging, level.strip().upper(), logging.INFO)

    console = logging.StreamHandler(sys.stderr)
    if enable_color and sys.stderr.isatty():
        console.setFormatter(ColorFormatter(LOG_FORMAT, DATE_FORMAT))
    else:
        console.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    handlers: list[logging.Handler] = [console]

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
        handlers.append(file_handler)

    root = logging.getLogger()
    root.handlers = handlers
    root.setLevel(level)

    # Chatty third-party loggers
    for name in ("httpx", "engineio", "socketio", "werkzeug"):
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    return logging.getLogger("guildhall")
