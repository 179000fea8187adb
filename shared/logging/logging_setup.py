"""Logging for the retrieval engine.

Console output is colored and prefixed per level; the optional file log under
``LOG_DIR`` is plain text. Timestamps use ``TIMEZONE`` (pytz name).
"""

from datetime import datetime
from pytz import timezone
import logging.config
import logging
import os

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"
LOG_FILE_NAME = "rag_engine.log"

# quiet unless LOG_LEVEL=debug
NOISY_LOGGERS = ("httpx", "httpcore")

_ANSI_RESET = "\033[0m"
_COLOR_MAP: dict[str, str] = {
    "cyan":    "\033[36m",
    "green":   "\033[32m",
    "yellow":  "\033[33m",
    "red":     "\033[31m",
    "magenta": "\033[35m",
    "blue":    "\033[34m",
    "white":   "\033[37m",
}

_LEVEL_PREFIXES: dict[int, str] = {
    logging.CRITICAL: "⛔ ",
    logging.ERROR: "⛔ ",
    logging.WARNING: "⚠️ ",
}


def resolve_level() -> int:
    """Map ``LOG_LEVEL`` (debug, info, warning, error) to a logging level. Unknown names mean INFO."""
    name = os.getenv("LOG_LEVEL", "info").strip().upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


class CustomFormatter(logging.Formatter):
    """Timezone-aware formatter that prefixes warnings and errors with a marker."""

    def __init__(self, tz_name, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.tz = timezone(tz_name)

    def formatTime(self, record, datefmt=None):
        stamp = datetime.fromtimestamp(record.created, self.tz)
        return stamp.strftime(datefmt) if datefmt else stamp.isoformat()

    def format(self, record):
        # copy, handlers share the record
        record = logging.makeLogRecord(record.__dict__)
        record.msg = _LEVEL_PREFIXES.get(record.levelno, "") + record.getMessage()
        record.args = ()
        return super().format(record)


class ColoredFormatter(CustomFormatter):
    """Console formatter; wraps a line in ANSI color when the record carries ``color``."""

    def format(self, record) -> str:
        line = super().format(record)
        ansi = _COLOR_MAP.get(getattr(record, "color", None) or "", "")
        return f"{ansi}{line}{_ANSI_RESET}" if ansi else line


class ColorLogger:
    """Wraps a :class:`logging.Logger` so every log call accepts ``color=<name>``.

    Usage::

        logger.info("Index ready: %d chunks.", 42, color="green")

    Everything else (setLevel, handlers, isEnabledFor ...) is delegated.
    """

    def __init__(self, logger: logging.Logger):
        self._logger = logger

    def _log(self, level: int, msg, args, color: str | None, kwargs: dict) -> None:
        if color is not None:
            kwargs["extra"] = {**(kwargs.get("extra") or {}), "color": color}
        # report the caller, not this wrapper
        kwargs.setdefault("stacklevel", 3)
        self._logger.log(level, msg, *args, **kwargs)

    def debug(self, msg, *args, color: str | None = None, **kwargs):
        self._log(logging.DEBUG, msg, args, color, kwargs)

    def info(self, msg, *args, color: str | None = None, **kwargs):
        self._log(logging.INFO, msg, args, color, kwargs)

    def warning(self, msg, *args, color: str | None = None, **kwargs):
        self._log(logging.WARNING, msg, args, color, kwargs)

    def error(self, msg, *args, color: str | None = None, **kwargs):
        self._log(logging.ERROR, msg, args, color, kwargs)

    def exception(self, msg, *args, color: str | None = None, **kwargs):
        kwargs.setdefault("exc_info", True)
        self._log(logging.ERROR, msg, args, color, kwargs)

    def __getattr__(self, name):
        return getattr(self._logger, name)


def _formatter(factory: type, tz_name: str) -> dict:
    return {"()": factory, "format": LOG_FORMAT, "datefmt": LOG_DATEFMT, "tz_name": tz_name}


def setup_logging(name: str = "rag_engine") -> ColorLogger:
    """Configure root logging and return the application logger.

    Environment:
        LOG_LEVEL: debug, info (default), warning or error.
        LOG_DIR:   if set, also write ``rag_engine.log`` there.
        TIMEZONE:  pytz zone for timestamps, default Europe/Berlin.
    """
    level = resolve_level()
    tz_name = os.getenv("TIMEZONE", "Europe/Berlin")
    log_dir = os.getenv("LOG_DIR") or None

    handlers: dict = {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "colored",
            "level": level,
            "stream": "ext://sys.stdout",
        },
    }
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        handlers["file"] = {
            "class": "logging.FileHandler",
            "formatter": "plain",
            "level": level,
            "filename": os.path.join(log_dir, LOG_FILE_NAME),
            "encoding": "utf-8",
        }

    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "plain": _formatter(CustomFormatter, tz_name),
            "colored": _formatter(ColoredFormatter, tz_name),
        },
        "handlers": handlers,
        "root": {"handlers": list(handlers), "level": level},
    })

    for noisy in NOISY_LOGGERS:
        logging.getLogger(noisy).setLevel(logging.DEBUG if level <= logging.DEBUG else logging.WARNING)

    return ColorLogger(logging.getLogger(name))
