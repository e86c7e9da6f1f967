import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Union

from dsmovie.config.environment import LOG_DIR, LOG_LEVEL

INFO_LOG_NAME = "info.log"
ERROR_LOG_NAME = "error.log"

MAX_BYTES = 5 * 1024 * 1024
BACKUP_COUNT = 1

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# SQLAlchemy echoes every statement at INFO
QUIET_LOGGERS = ("sqlalchemy.engine",)

# marks handlers installed here so a second call can replace them
_HANDLER_ATTR = "_dsmovie_handler"


def _file_handler(path: Path, level: int, formatter: logging.Formatter) -> RotatingFileHandler:
    handler = RotatingFileHandler(path, maxBytes=MAX_BYTES, backupCount=BACKUP_COUNT, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging(logs_dir: Path = LOG_DIR, level: Union[int, str] = LOG_LEVEL) -> logging.Logger:
    """Send application logs to the console and to rotating files in ``logs_dir``.

    ``info.log`` gets everything at ``level`` and above, ``error.log`` only
    errors. Calling it again swaps the handlers instead of stacking them.
    """
    logs_dir = Path(logs_dir)
    logs_dir.mkdir(parents=True, exist_ok=True)
    level = logging.getLevelName(level.upper()) if isinstance(level, str) else level

    formatter = logging.Formatter(LOG_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)

    handlers = [
        _file_handler(logs_dir / INFO_LOG_NAME, level, formatter),
        _file_handler(logs_dir / ERROR_LOG_NAME, logging.ERROR, formatter),
        console_handler,
    ]

    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        if getattr(handler, _HANDLER_ATTR, False):
            root_logger.removeHandler(handler)
            handler.close()

    root_logger.setLevel(level)
    for handler in handlers:
        setattr(handler, _HANDLER_ATTR, True)
        root_logger.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    root_logger.info(f"Logging to {logs_dir} at {logging.getLevelName(level)}")
    return root_logger
