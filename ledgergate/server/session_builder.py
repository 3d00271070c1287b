"""
Construction of identity-bound connection sessions and contract handles.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from ledgergate.common.crypto import Signer, derive_signer

if TYPE_CHECKING:
    from ledgergate.common.entities import Identity
    from ledgergate.common.interfaces import ILedgerChannel


class OperationKind(str, Enum):
    EVALUATE = "evaluate"
    ENDORSE = "endorse"
    SUBMIT = "submit"
    COMMIT_STATUS = "commit_status"


@dataclass(frozen=True)
class DeadlinePolicy:
    """Per-operation deadlines in seconds, identical for every identity."""

    evaluate: float = 5.0
    endorse: float = 15.0
    submit: float = 5.0
    commit_status: float = 60.0

    def for_kind(self, kind: OperationKind) -> float:
        return float(getattr(self, kind.value))


DEFAULT_DEADLINES = DeadlinePolicy()


@dataclass(frozen=True)
class ConnectionSession:
    """An identity and its signer over the process-wide ledger channel."""

    channel: ILedgerChannel
    signer: Signer
    identity: Identity
    deadlines: DeadlinePolicy = DEFAULT_DEADLINES

    def contract(self, channel_name: str, chaincode_name: str) -> ContractHandle:
        return ContractHandle(
            session=self, channel_name=channel_name, chaincode_name=chaincode_name
        )


@dataclass(frozen=True)
class ContractHandle:
    """A session bound to one ledger channel and chaincode."""

    session: ConnectionSession
    channel_name: str
    chaincode_name: str


def build_session(
    identity: Identity,
    channel: ILedgerChannel,
    deadlines: DeadlinePolicy = DEFAULT_DEADLINES,
) -> ConnectionSession:
    """Derive the identity's signer and bind it to the shared channel."""
    return ConnectionSession(
        channel=channel,
        signer=derive_signer(identity.private_key_pem),
        identity=identity,
        deadlines=deadlines,
    )


class SessionCache:
    """Reuses sessions per username until the user's identity changes."""

    def __init__(
        self, channel: ILedgerChannel, deadlines: DeadlinePolicy = DEFAULT_DEADLINES
    ):
        self.channel = channel
        self.deadlines = deadlines
        self._sessions: dict[str, ConnectionSession] = {}
        self._lock = threading.Lock()

    def get(self, username: str, identity: Identity) -> ConnectionSession:
        with self._lock:
            session = self._sessions.get(username)
            if session is None or session.identity != identity:
                session = build_session(identity, self.channel, self.deadlines)
                self._sessions[username] = session
            return session

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
