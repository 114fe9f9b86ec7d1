"""
Logging setup for the face shape analyzer.
Console and rotating file handlers driven by the `logging` config section;
missing keys fall back to the defaults below.

Handlers live on the package logger only; module loggers
(face_shape_analyzer.*) propagate to it.
"""
import logging
import logging.handlers
from pathlib import Path

from .config_loader import get_config

PACKAGE_LOGGER = 'face_shape_analyzer'
DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DEFAULT_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

_configured = False


def _level(value, default: int) -> int:
    if not value:
        return default
    return getattr(logging, str(value).upper(), default)


def _console_handler(config, formatter: logging.Formatter) -> logging.Handler:
    handler = logging.StreamHandler()
    handler.setLevel(_level(config.get('logging.console.level'), logging.INFO))
    handler.setFormatter(formatter)
    return handler


def _file_handler(config, formatter: logging.Formatter) -> logging.Handler:
    log_dir = Path(config.get('logging.file.directory', 'logs'))
    log_dir.mkdir(parents=True, exist_ok=True)

    handler = logging.handlers.RotatingFileHandler(
        log_dir / config.get('logging.file.filename', 'face_shape_analyzer.log'),
        maxBytes=config.get('logging.file.max_bytes', 10 * 1024 * 1024),
        backupCount=config.get('logging.file.backup_count', 5),
        encoding='utf-8'
    )
    handler.setLevel(_level(config.get('logging.file.level'), logging.DEBUG))
    handler.setFormatter(formatter)
    return handler


def setup_logging() -> logging.Logger:
    """
    (Re)configure the package logger from the current global config

    Call again after load_config() to apply a different `logging` section;
    previous handlers are closed and replaced.

    Returns:
        the package logger
    """
    global _configured

    config = get_config()
    package_logger = logging.getLogger(PACKAGE_LOGGER)

    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    package_logger.setLevel(_level(config.get('logging.level'), logging.INFO))

    formatter = logging.Formatter(
        config.get('logging.format', DEFAULT_FORMAT),
        datefmt=config.get('logging.date_format', DEFAULT_DATE_FORMAT)
    )

    if config.get('logging.console.enabled', True):
        package_logger.addHandler(_console_handler(config, formatter))

    if config.get('logging.file.enabled', False):
        package_logger.addHandler(_file_handler(config, formatter))

    _configured = True
    return package_logger


def get_logger(name: str = None) -> logging.Logger:
    """
    Logger for a module (usually __name__)

    The package logger is configured on first use.
    """
    if not _configured:
        setup_logging()
    return logging.getLogger(name or PACKAGE_LOGGER)
