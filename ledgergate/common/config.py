"""
Configuration settings for the ledger gateway.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from ledgergate.common.exceptions import ConfigurationError


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Config:
    """Central configuration class for all gateway settings."""

    REQUIRED: tuple[str, ...] = (
        "NETWORK_CONFIG_PATH",
        "MSP_ID",
        "CA_NAME",
        "CHANNEL_NAME",
        "CHAINCODE_NAME",
    )

    def __init__(self) -> None:
        # Server settings
        self.HOST: str = os.getenv("HOST", "0.0.0.0")  # noqa: S104
        self.PORT: int = int(os.getenv("PORT", "3004"))

        # Network topology
        network_config_path = os.getenv("NETWORK_CONFIG_PATH")
        self.NETWORK_CONFIG_PATH: Path | None = (
            Path(network_config_path) if network_config_path else None
        )
        self.MSP_ID: str | None = os.getenv("MSP_ID")
        self.CA_NAME: str | None = os.getenv("CA_NAME")
        self.HLF_USER: str = os.getenv("HLF_USER", "admin")
        self.CHANNEL_NAME: str | None = os.getenv("CHANNEL_NAME")
        self.CHAINCODE_NAME: str | None = os.getenv("CHAINCODE_NAME")
        self.VERIFY_TLS: bool = _env_flag("VERIFY_TLS")
        # Overrides the peer url found in the network document
        self.LEDGER_GATEWAY_URL: str | None = os.getenv("LEDGER_GATEWAY_URL")

        # Token bootstrapped with Initialize at startup
        self.TOKEN_NAME: str = os.getenv("TOKEN_NAME", "CDC")
        self.TOKEN_SYMBOL: str = os.getenv("TOKEN_SYMBOL", "$")

        # Logging
        self.LOG_LEVEL: int = logging.getLevelName(
            os.getenv("LOG_LEVEL", "INFO").upper()
        )
        if not isinstance(self.LOG_LEVEL, int):
            self.LOG_LEVEL = logging.INFO

    def check(self) -> None:
        """Raise ConfigurationError when a required setting is missing."""
        missing = [name for name in self.REQUIRED if not getattr(self, name)]
        if missing:
            msg = f"Missing required configuration: {', '.join(missing)}"
            raise ConfigurationError(msg)
