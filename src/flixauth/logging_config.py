import logging
import warnings

import structlog


def configure_logging(level: int = logging.INFO):
    logging.basicConfig(level=level, format="%(message)s")
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
    )

    # passlib probes bcrypt metadata on first use and warns on newer bcrypt builds
    logging.getLogger("passlib").setLevel(logging.ERROR)
    logging.getLogger("passlib.handlers").setLevel(logging.ERROR)
    logging.getLogger("passlib.handlers.bcrypt").setLevel(logging.ERROR)

    warnings.filterwarnings(
        "ignore",
        category=PendingDeprecationWarning,
        module=r"starlette\.formparsers",
    )


def get_logger(name: str | None = None):
    if not structlog.is_configured():
        configure_logging()
    return structlog.get_logger(name)
