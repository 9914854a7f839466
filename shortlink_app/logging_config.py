import logging

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """
    Attach a stream handler to the package logger.

    Safe to call more than once; the handler is only added the first time.
    """
    app_logger = logging.getLogger("shortlink_app")
    app_logger.setLevel(level.upper())

    if not app_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        app_logger.addHandler(handler)
