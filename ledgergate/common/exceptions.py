"""
Custom exceptions for the ledger gateway.
"""

from __future__ import annotations


class GatewayError(Exception):
    """Base exception for failures surfaced to HTTP callers."""

    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(message)
        self.status_code = status_code


class ConfigurationError(GatewayError):
    """Missing settings or malformed network topology. Fatal at startup."""

    def __init__(self, message: str) -> None:
        super().__init__(message, 500)


class InvalidKeyMaterial(GatewayError):
    """Private key material could not be turned into a signer."""


class UsernameTaken(GatewayError):
    def __init__(self, username: str) -> None:
        super().__init__("Username already taken")
        self.username = username


class UnknownUser(GatewayError):
    def __init__(self, username: str) -> None:
        super().__init__("Username not found")
        self.username = username


class RegistrarError(GatewayError):
    """Failure reported by (or while talking to) the certificate authority."""


class IdentityNotFound(RegistrarError):
    """The certificate authority has no identity with the requested id."""

    def __init__(self, enrollment_id: str) -> None:
        super().__init__(f"Identity '{enrollment_id}' not found")
        self.enrollment_id = enrollment_id


class LedgerError(GatewayError):
    """Endorsement, ordering or commit failure reported by the ledger."""

    def __init__(self, message: str, details: list[str] | None = None) -> None:
        super().__init__(message)
        self.details = details or []

    def detail_text(self) -> str:
        """Ledger-provided detail when present, else the plain message."""
        if self.details:
            return "\n".join(self.details)
        return str(self)


class CommitError(LedgerError):
    """Transaction reached the ledger but was not committed as valid."""

    def __init__(self, tx_id: str, status: str) -> None:
        super().__init__(
            f"Transaction {tx_id} failed to commit with status code: {status}"
        )
        self.tx_id = tx_id
        self.status = status


class TransportTimeout(GatewayError):
    """A ledger call exceeded its deadline."""

    def __init__(self, operation: str, deadline: float) -> None:
        super().__init__(f"{operation} deadline of {deadline:g}s exceeded")
        self.operation = operation
        self.deadline = deadline
