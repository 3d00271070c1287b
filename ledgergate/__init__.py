# Identity-scoped gateway to a shared ledger network

from ledgergate.server.core import LedgerGateway
from ledgergate.server.session_builder import (
    ConnectionSession,
    ContractHandle,
    DeadlinePolicy,
    build_session,
)

__all__ = [
    "ConnectionSession",
    "ContractHandle",
    "DeadlinePolicy",
    "LedgerGateway",
    "build_session",
]
