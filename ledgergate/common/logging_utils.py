"""
Logging setup for the gateway process.

Everything under the ``ledgergate`` logger shares one stream handler. The
HTTP client libraries used to reach the certificate authority and the peer
stay at WARNING unless the gateway runs at DEBUG.
"""

import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
HTTP_CLIENT_LOGGERS = ("urllib3", "requests")


def setup_logger(logger: logging.Logger, log_level: int) -> None:
    """
    Attach the gateway's stream handler to logger and apply log_level.

    Calling it again only moves the level; no second handler is added.

    Args:
        logger: Usually the ``ledgergate`` package logger
        log_level: Numeric level, as resolved by Config
    """
    logger.setLevel(log_level)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    for handler in logger.handlers:
        handler.setLevel(log_level)

    client_level = logging.DEBUG if log_level <= logging.DEBUG else logging.WARNING
    for name in HTTP_CLIENT_LOGGERS:
        logging.getLogger(name).setLevel(client_level)
