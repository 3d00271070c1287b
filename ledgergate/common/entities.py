"""Domain layer: identities and enrolled users.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Identity:
    """Member service provider id plus the certificate/key pair used to sign."""

    msp_id: str
    certificate_pem: bytes
    private_key_pem: bytes = field(default=b"", repr=False)

    def creator(self) -> dict[str, str]:
        """Public half of the identity as it appears in proposals."""
        return {"msp_id": self.msp_id, "certificate": self.certificate_pem.decode()}


@dataclass(frozen=True)
class Enrollment:
    """Certificate and key handed back by the certificate authority."""

    certificate_pem: bytes
    private_key_pem: bytes = field(repr=False)


@dataclass(frozen=True)
class RegistrarIdentity:
    """Identity record as known by the certificate authority."""

    enrollment_id: str
    type: str = "client"
    affiliation: str = ""
    max_enrollments: int = -1


@dataclass(frozen=True)
class EnrolledUser:
    """A user that logged in through the gateway."""

    username: str
    identity: Identity
    enrollment_secret: str = field(repr=False)
