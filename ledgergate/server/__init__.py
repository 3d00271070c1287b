"""
Entry point for the ledger gateway.
"""

import logging

import uvicorn

from ledgergate.common.config import Config

from .core import LedgerGateway


def start_server(config: Config | None = None) -> None:
    """Start the ledger gateway."""
    if config is None:
        config = Config()
    logging.basicConfig(level=config.LOG_LEVEL)
    gateway = LedgerGateway.from_config(config)
    gateway.logger.info(
        "Gateway listening on %s:%s", gateway.server_host, gateway.server_port
    )
    try:
        uvicorn.run(gateway.app, host=gateway.server_host, port=gateway.server_port)
    finally:
        gateway.channel.close()
