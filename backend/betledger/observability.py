"""Logging setup and Logfire cloud observability."""

import logging

import logfire
from fastapi import FastAPI

from betledger import __version__
from betledger.config import Settings

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(settings: Settings) -> None:
    """Configure root logging from settings. Safe to call more than once."""
    logging.basicConfig(level=settings.log_level.upper(), format=LOG_FORMAT)
    logging.getLogger().setLevel(settings.log_level.upper())

    # SQL statements are logged only when db_echo is set
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def initialize_logfire(settings: Settings, app: FastAPI | None = None) -> None:
    """
    Initialize Logfire and bridge stdlib logging into it.

    Call once at application startup. Without a token this only logs a
    warning; the ledger runs the same with or without observability.

    Instruments:
    - FastAPI request handling (when an app is given)
    - SQLAlchemy queries
    - Python logging (ledger, settlement and auth loggers)
    """
    if not settings.logfire_token:
        logger.warning("Logfire token not set - observability disabled")
        return

    try:
        logfire.configure(
            token=settings.logfire_token,
            service_name="betledger",
            service_version=__version__,
            environment=settings.environment,
        )

        if app is not None:
            logfire.instrument_fastapi(app)

        logfire.instrument_sqlalchemy()

        root_logger = logging.getLogger()
        root_logger.addHandler(logfire.LogfireLoggingHandler())

        logger.info("Logfire cloud tracking initialized")

    except Exception as e:
        logger.warning(f"Failed to initialize Logfire: {e}")
