"""
Interfaces and protocols for dependency injection.
"""

from __future__ import annotations

from typing import Protocol

from ledgergate.common.entities import Enrollment, Identity, RegistrarIdentity
from ledgergate.common.models import (
    CommitStatusResponse,
    EndorseResponse,
    EvaluateResponse,
    SignedEnvelope,
    SubmitResponse,
)


class ILedgerChannel(Protocol):
    """Transport channel to the ledger network, shared by every session."""

    def evaluate(self, envelope: SignedEnvelope, timeout: float) -> EvaluateResponse: ...

    def endorse(self, envelope: SignedEnvelope, timeout: float) -> EndorseResponse: ...

    def submit(self, envelope: SignedEnvelope, timeout: float) -> SubmitResponse: ...

    def commit_status(
        self, envelope: SignedEnvelope, timeout: float
    ) -> CommitStatusResponse: ...

    def close(self) -> None: ...


class IRegistrarClient(Protocol):
    """Protocol for certificate authority operations."""

    def register(self, enrollment_id: str, secret: str, role: str) -> None: ...

    def enroll(self, enrollment_id: str, secret: str) -> Enrollment: ...

    def get_identity(
        self, enrollment_id: str, as_registrar: Identity | None = None
    ) -> RegistrarIdentity: ...
