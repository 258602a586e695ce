"""Process-wide logging setup.

loguru owns every sink. Records from the standard ``logging`` module
(uvicorn, SQLAlchemy) are routed into it so there is one output stream.
"""

import logging
import sys
from pathlib import Path

from loguru import logger

from src.storefront.runtime.config.config_data import ConfigData, LoggingConfig

_PLAIN_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "[<cyan>{extra[request_id]}</cyan>] | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)

# stdlib loggers kept at a fixed level regardless of logging.level
_PINNED_LEVELS = {
    "sqlalchemy.engine": logging.WARNING,
    "sqlalchemy.pool": logging.WARNING,
    "uvicorn": logging.INFO,
    "uvicorn.error": logging.INFO,
    "uvicorn.access": logging.CRITICAL,
}


class InterceptHandler(logging.Handler):
    """Forward standard ``logging`` records to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        # log_requests already records every request
        if record.name == "uvicorn.access":
            return
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        logger.opt(depth=2, exception=record.exc_info).bind(
            logger_name=record.name
        ).log(level, record.getMessage())


def _add_sinks(cfg: LoggingConfig, verbose_tracebacks: bool) -> None:
    logger.add(
        sys.stderr,
        level=cfg.level,
        format=_PLAIN_FORMAT,
        colorize=True,
        backtrace=verbose_tracebacks,
        diagnose=verbose_tracebacks,
    )
    if not cfg.file:
        return

    path = Path(cfg.file)
    path.parent.mkdir(parents=True, exist_ok=True)
    as_json = cfg.format == "json"
    logger.add(
        str(path),
        level=cfg.level,
        format="{message}" if as_json else _PLAIN_FORMAT,
        serialize=as_json,
        rotation=f"{cfg.max_size_mb} MB",
        retention=cfg.backup_count,
        compression="zip",
        enqueue=True,
        backtrace=verbose_tracebacks,
        diagnose=verbose_tracebacks,
    )


def _route_stdlib_logging() -> None:
    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    for name in list(logging.root.manager.loggerDict):
        stdlib_logger = logging.getLogger(name)
        stdlib_logger.handlers = []
        stdlib_logger.propagate = True
    for name, level in _PINNED_LEVELS.items():
        logging.getLogger(name).setLevel(level)


def configure_logging(main_config: ConfigData) -> None:
    """Replace all loguru sinks according to ``main_config.logging``.

    The console sink is always plain text. The optional file sink rotates at
    ``max_size_mb`` and is JSON when ``format`` is ``json``. Variable values
    are left out of tracebacks in production.
    """
    cfg = main_config.logging
    env = main_config.app.environment

    logger.remove()
    # sinks format {extra[request_id]} outside requests too
    logger.configure(extra={"request_id": "-"})
    _add_sinks(cfg, verbose_tracebacks=env != "production")
    _route_stdlib_logging()

    logger.info(
        "Logging configured",
        app_level=cfg.level,
        app_format=cfg.format,
        app_file=cfg.file,
        environment=env,
    )
