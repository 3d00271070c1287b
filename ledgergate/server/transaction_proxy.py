"""
Evaluate and submit transactions on a resolved contract handle.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from ledgergate.common.exceptions import CommitError, LedgerError, TransportTimeout
from ledgergate.common.models import CommitStatusRequest, Proposal, SignedEnvelope
from ledgergate.server.session_builder import OperationKind

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ledgergate.server.session_builder import ContractHandle

logger = logging.getLogger(__name__)

INITIALIZE_FCN = "Initialize"


class InitStatus(str, Enum):
    INITIALIZED = "initialized"
    ALREADY_INITIALIZED = "already_initialized"
    FAILED = "failed"


@dataclass(frozen=True)
class InitOutcome:
    status: InitStatus
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.status is not InitStatus.FAILED


class TransactionProxy:
    """Runs proposals through the ledger under the handle's identity."""

    def evaluate(
        self, handle: ContractHandle, fcn: str, args: Sequence[str] = ()
    ) -> bytes:
        """Read-only query; nothing is sent for ordering."""
        proposal = self._proposal(handle, fcn, args)
        session = handle.session
        response = session.channel.evaluate(
            self._seal(handle, proposal.to_bytes()),
            session.deadlines.for_kind(OperationKind.EVALUATE),
        )
        return response.result_bytes()

    def submit(
        self, handle: ContractHandle, fcn: str, args: Sequence[str] = ()
    ) -> bytes:
        """Endorse, order and wait for commit; returns the endorsed result."""
        session = handle.session
        deadlines = session.deadlines
        proposal = self._proposal(handle, fcn, args)

        endorsed = session.channel.endorse(
            self._seal(handle, proposal.to_bytes()),
            deadlines.for_kind(OperationKind.ENDORSE),
        )
        session.channel.submit(
            self._seal(handle, endorsed.transaction_bytes()),
            deadlines.for_kind(OperationKind.SUBMIT),
        )

        status_request = CommitStatusRequest(
            channel_name=handle.channel_name,
            tx_id=endorsed.tx_id,
            creator=proposal.creator,
        )
        status = session.channel.commit_status(
            self._seal(handle, status_request.to_bytes()),
            deadlines.for_kind(OperationKind.COMMIT_STATUS),
        )
        if not status.successful:
            raise CommitError(status.tx_id, status.status)
        logger.debug(
            "Transaction %s committed in block %s", status.tx_id, status.block_number
        )
        return endorsed.result_bytes()

    def initialize_if_needed(
        self, handle: ContractHandle, token_name: str, token_symbol: str
    ) -> InitOutcome:
        """Submit Initialize and classify the outcome instead of raising."""
        try:
            result = self.submit(handle, INITIALIZE_FCN, [token_name, token_symbol])
        except LedgerError as err:
            text = err.detail_text()
            if "already" in text.lower():
                return InitOutcome(InitStatus.ALREADY_INITIALIZED, text)
            return InitOutcome(InitStatus.FAILED, text)
        except TransportTimeout as err:
            return InitOutcome(InitStatus.FAILED, str(err))
        return InitOutcome(InitStatus.INITIALIZED, result.decode(errors="replace"))

    @staticmethod
    def _proposal(
        handle: ContractHandle, fcn: str, args: Sequence[str]
    ) -> Proposal:
        return Proposal.create(
            channel_name=handle.channel_name,
            chaincode_name=handle.chaincode_name,
            fcn=fcn,
            args=list(args),
            creator=handle.session.identity.creator(),
        )

    @staticmethod
    def _seal(handle: ContractHandle, payload: bytes) -> SignedEnvelope:
        return SignedEnvelope.seal(payload, handle.session.signer.sign(payload))
