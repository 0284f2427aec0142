"""
Logging setup

Module loggers are created with ``logging.getLogger(__name__)``; this only
installs the root handler and format.
"""

import logging
import sys

from ledger_auth.core.config import Settings

JSON_FORMAT = '{"timestamp": "%(asctime)s", "level": "%(levelname)s", "module": "%(name)s", "message": "%(message)s"}'
TEXT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL),
        format=JSON_FORMAT if settings.LOG_FORMAT == "json" else TEXT_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )
    # passlib logs a harmless traceback when probing newer bcrypt builds
    logging.getLogger("passlib").setLevel(logging.ERROR)
