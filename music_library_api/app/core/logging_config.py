"""
Logging setup for the music library service.

Records go to stderr and, when ``LOG_FILE`` is set, to that file too.
Each request is already logged by ``RequestLoggingMiddleware``, so
uvicorn's access logger is limited to warnings.
"""

import logging
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

CONSOLE_HANDLER = "music_library.console"
FILE_HANDLER = "music_library.file"

# Loggers that would duplicate the request middleware output.
QUIET_LOGGERS = ("uvicorn.access",)


def _level_from_name(level: str) -> int:
    numeric_level = logging.getLevelName(level.upper())
    return numeric_level if isinstance(numeric_level, int) else logging.INFO


def _attach(root: logging.Logger, handler: logging.Handler, name: str) -> None:
    handler.set_name(name)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    root.addHandler(handler)


def setup_logging(level: str = "INFO", logfile: Optional[str] = None) -> None:
    """Configure the root logger from the ``LOG_LEVEL``/``LOG_FILE`` settings.

    Handlers are recognised by name and added only once, so building
    several applications in one process does not duplicate output; the
    level is applied on every call.  Unknown level names mean ``INFO``.
    The log file's directory is created if needed.
    """
    root = logging.getLogger()
    numeric_level = _level_from_name(level)
    root.setLevel(numeric_level)

    attached = {handler.get_name() for handler in root.handlers}
    if CONSOLE_HANDLER not in attached:
        _attach(root, logging.StreamHandler(), CONSOLE_HANDLER)
    if logfile and FILE_HANDLER not in attached:
        log_path = Path(logfile).expanduser().resolve()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        _attach(root, logging.FileHandler(log_path, encoding="utf-8"), FILE_HANDLER)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))
