"""
Gateway assembly: one shared ledger channel, a default identity, and the
identity-scoped session layer behind a FastAPI app.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ledgergate.common.config import Config
from ledgergate.common.logging_utils import setup_logger
from ledgergate.server.identity_directory import IdentityDirectory
from ledgergate.server.ledger_channel import HttpLedgerChannel
from ledgergate.server.network_config import NetworkConfig, load_network_config
from ledgergate.server.registrar import RegistrarClient
from ledgergate.server.routes import GatewayRoutes
from ledgergate.server.services import GatewayService
from ledgergate.server.session_builder import (
    DEFAULT_DEADLINES,
    DeadlinePolicy,
    SessionCache,
    build_session,
)
from ledgergate.server.session_resolver import SessionResolver
from ledgergate.server.transaction_proxy import TransactionProxy

if TYPE_CHECKING:
    from ledgergate.common.entities import Identity
    from ledgergate.common.interfaces import ILedgerChannel, IRegistrarClient


class LedgerGateway:
    """Main gateway class wiring the session layer to HTTP routes."""

    def __init__(  # noqa: PLR0913
        self,
        config: Config,
        registrar: IRegistrarClient,
        channel: ILedgerChannel,
        default_identity: Identity,
        deadlines: DeadlinePolicy = DEFAULT_DEADLINES,
        initialize_on_start: bool = True,  # noqa: FBT001, FBT002
    ):
        self.logger = logging.getLogger("ledgergate")
        setup_logger(self.logger, config.LOG_LEVEL)
        self.config = config
        self.server_host = config.HOST
        self.server_port = config.PORT

        # The one transport channel of this process
        self.channel = channel
        self.registrar = registrar
        self.default_session = build_session(default_identity, channel, deadlines)
        self.default_contract = self.default_session.contract(
            config.CHANNEL_NAME, config.CHAINCODE_NAME
        )

        self.directory = IdentityDirectory(registrar, default_identity.msp_id)
        self.sessions = SessionCache(channel, deadlines)
        self.resolver = SessionResolver(
            self.directory, self.sessions, self.default_contract
        )
        self.proxy = TransactionProxy()
        self.service = GatewayService(
            directory=self.directory,
            proxy=self.proxy,
            default_contract=self.default_contract,
            token_name=config.TOKEN_NAME,
            token_symbol=config.TOKEN_SYMBOL,
        )

        self.app = FastAPI(title="ledgergate")
        self.app.state.resolver = self.resolver
        self.app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_methods=["*"],
            allow_headers=["*"],
        )
        GatewayRoutes(self.service).setup_routes(self.app)

        if initialize_on_start:
            self.service.initialize()

    @classmethod
    def from_config(cls, config: Config | None = None) -> LedgerGateway:
        """Load the network document, enroll the registrar, connect the channel.

        Raises:
            ConfigurationError: settings or the network document are invalid.
        """
        config = config or Config()
        config.check()
        network: NetworkConfig = load_network_config(
            config.NETWORK_CONFIG_PATH,
            config.MSP_ID,
            config.CA_NAME,
            config.HLF_USER,
        )

        registrar = RegistrarClient(
            network.ca, network.msp_id, verify_tls=config.VERIFY_TLS
        )
        registrar_identity = registrar.enroll_registrar()
        default_identity = network.admin_identity or registrar_identity

        channel = HttpLedgerChannel(
            config.LEDGER_GATEWAY_URL or network.peer.url,
            verify_tls=config.VERIFY_TLS,
        )
        return cls(
            config=config,
            registrar=registrar,
            channel=channel,
            default_identity=default_identity,
        )
