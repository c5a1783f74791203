import logging
import sys
from typing import Optional

import structlog
from pythonjsonlogger import jsonlogger

from ..config import Settings, get_settings

_HANDLER_NAME = "meditrack-stdout"


def setup_logging(settings: Optional[Settings] = None):
    """Structured logging setup: structlog on top of a JSON stdlib handler"""
    settings = settings or get_settings()

    json_formatter = jsonlogger.JsonFormatter(
        fmt="%(asctime)s %(name)s %(levelname)s %(message)s"
    )

    renderer = structlog.processors.JSONRenderer() if settings.log_json else structlog.dev.ConsoleRenderer()
    structlog.configure(
        processors=[
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Setup root logger once; repeated calls only adjust the level
    logger = logging.getLogger()
    if not any(getattr(h, "name", None) == _HANDLER_NAME for h in logger.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.set_name(_HANDLER_NAME)
        handler.setFormatter(json_formatter)
        logger.addHandler(handler)
    logger.setLevel(getattr(logging, settings.log_level, logging.INFO))

    return structlog.get_logger("meditrack")
