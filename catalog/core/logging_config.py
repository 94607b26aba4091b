"""Process-wide logging setup.

Modules log through ``logging.getLogger(__name__)``; the app entry point
logs through structlog. Both end up on the stdlib root handler so one
level setting governs everything.
"""

import logging

import structlog

from catalog.core.config import settings

_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Configure stdlib and structlog logging.

    Args:
        level: Log level name. Defaults to settings.log_level.
    """
    level_name = (level or settings.log_level).upper()
    logging.basicConfig(level=level_name, format=_LOG_FORMAT)
    logging.getLogger().setLevel(level_name)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.KeyValueRenderer(
                key_order=["event", "level", "logger"]
            ),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
