"""Business logic services for the ledger gateway.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ledgergate.common.models import Credentials, TransactionRequest
    from ledgergate.server.identity_directory import IdentityDirectory
    from ledgergate.server.session_builder import ContractHandle
    from ledgergate.server.session_resolver import RequestContext
    from ledgergate.server.transaction_proxy import InitOutcome, TransactionProxy

logger = logging.getLogger(__name__)

PING_FCN = "Ping"


class GatewayService:
    """Handles business logic for the gateway endpoints."""

    def __init__(
        self,
        directory: IdentityDirectory,
        proxy: TransactionProxy,
        default_contract: ContractHandle,
        token_name: str,
        token_symbol: str,
    ):
        self.directory = directory
        self.proxy = proxy
        self.default_contract = default_contract
        self.token_name = token_name
        self.token_symbol = token_symbol

    def health(self) -> dict[str, Any]:
        return {"status": "ok", "timestamp": int(time.time())}

    def initialize(self) -> InitOutcome:
        """Attempt Initialize under the default identity and log the outcome."""
        outcome = self.proxy.initialize_if_needed(
            self.default_contract, self.token_name, self.token_symbol
        )
        if outcome.ok:
            logger.info("Initialize: %s %s", outcome.status.value, outcome.message)
        else:
            logger.warning("Initialize failed: %s", outcome.message)
        return outcome

    def signup(self, credentials: Credentials) -> None:
        self.directory.register(credentials.username, credentials.password)

    def login(self, credentials: Credentials) -> None:
        self.directory.login(credentials.username, credentials.password)

    def ping(self, ctx: RequestContext) -> bytes:
        return self.proxy.evaluate(ctx.contract, PING_FCN)

    def evaluate(self, ctx: RequestContext, req: TransactionRequest) -> bytes:
        return self.proxy.evaluate(ctx.contract, req.fcn, req.args)

    def submit(self, ctx: RequestContext, req: TransactionRequest) -> bytes:
        return self.proxy.submit(ctx.contract, req.fcn, req.args)
