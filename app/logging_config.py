import logging

from app.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str | None = None) -> None:
    """
    Configure root logging once at application startup.

    Modules log through ``logging.getLogger(__name__)``; this only sets the
    handler, format and level (LOG_LEVEL setting unless overridden).
    """
    logging.basicConfig(
        level=(level or settings.LOG_LEVEL).upper(),
        format=LOG_FORMAT,
    )
    # SQL echo is controlled by DEBUG on the engine, keep the logger quiet otherwise
    if not settings.DEBUG:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
