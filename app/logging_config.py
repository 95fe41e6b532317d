import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_configured = False


def configure_logging(level: str = "INFO") -> None:
    global _configured
    if _configured:
        return

    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)
    # SQL echo is controlled by the engine, keep the driver quiet otherwise.
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    _configured = True
