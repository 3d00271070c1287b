import base64
import datetime
import json
import threading

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.x509.oid import NameOID

from ledgergate.common.config import Config
from ledgergate.common.entities import Enrollment, Identity, RegistrarIdentity
from ledgergate.common.exceptions import (
    IdentityNotFound,
    LedgerError,
    RegistrarError,
    TransportTimeout,
)
from ledgergate.common.models import (
    CommitStatusRequest,
    CommitStatusResponse,
    EndorseResponse,
    EvaluateResponse,
    Proposal,
    SubmitResponse,
)

MSP_ID = "Org1MSP"


def make_key_and_cert(common_name: str) -> tuple[bytes, bytes]:
    """Self-signed P-256 certificate; returns (key_pem, cert_pem)."""
    key = ec.generate_private_key(ec.SECP256R1())
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, common_name)])
    now = datetime.datetime.now(datetime.timezone.utc)
    cert = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now)
        .not_valid_after(now + datetime.timedelta(days=1))
        .sign(key, hashes.SHA256())
    )
    key_pem = key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption(),
    )
    return key_pem, cert.public_bytes(serialization.Encoding.PEM)


def make_identity(common_name: str, msp_id: str = MSP_ID) -> Identity:
    key_pem, cert_pem = make_key_and_cert(common_name)
    return Identity(msp_id=msp_id, certificate_pem=cert_pem, private_key_pem=key_pem)


def verify_envelope(envelope, certificate_pem: str) -> None:
    """Raise InvalidSignature unless the envelope was signed by the cert's key."""
    cert = x509.load_pem_x509_certificate(certificate_pem.encode())
    cert.public_key().verify(
        envelope.signature_bytes(),
        envelope.payload_bytes(),
        ec.ECDSA(hashes.SHA256()),
    )


class MockResponse:
    def __init__(self, status_code, json_data=None, text=""):
        self.status_code = status_code
        self._json = json_data
        self.text = text or (json.dumps(json_data) if json_data is not None else "")
        self.content = self.text.encode()
        self.reason = ""
        self.closed = False

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        if self._json is None:
            raise ValueError("no json")
        return self._json

    def iter_content(self, chunk_size=1):
        for start in range(0, len(self.content), chunk_size):
            yield self.content[start : start + chunk_size]

    def close(self):
        self.closed = True


class FakeRegistrar:
    """In-memory certificate authority."""

    def __init__(self):
        self.secrets: dict[str, str] = {}
        self.enrollments: list[str] = []

    def register(self, enrollment_id, secret, role="client"):
        if enrollment_id in self.secrets:
            raise RegistrarError(f"Identity '{enrollment_id}' is already registered")
        self.secrets[enrollment_id] = secret

    def enroll(self, enrollment_id, secret):
        if self.secrets.get(enrollment_id) != secret:
            raise RegistrarError("Authentication failure")
        self.enrollments.append(enrollment_id)
        key_pem, cert_pem = make_key_and_cert(enrollment_id)
        return Enrollment(certificate_pem=cert_pem, private_key_pem=key_pem)

    def get_identity(self, enrollment_id, as_registrar=None):
        if enrollment_id not in self.secrets:
            raise IdentityNotFound(enrollment_id)
        return RegistrarIdentity(enrollment_id=enrollment_id)


class FakeLedgerChannel:
    """Tiny key/value chaincode behind the four ledger phases.

    Every envelope's signature is checked against the creator certificate it
    carries, so a handle mixing one user's signer with another's identity
    fails loudly.
    """

    def __init__(self):
        self.calls: list[tuple[str, str, float]] = []
        self.state: dict[str, str] = {}
        self.initialized = False
        self.commit_status_value = "VALID"
        self.timeout_on: str | None = None
        self._pending: dict[str, Proposal] = {}
        self._lock = threading.Lock()

    def _record(self, operation, creator, timeout):
        with self._lock:
            self.calls.append((operation, creator, timeout))
        if self.timeout_on == operation:
            raise TransportTimeout(operation, timeout)

    def _run(self, proposal: Proposal, *, write: bool) -> bytes:
        fcn, args = proposal.fcn, proposal.args
        if fcn == "Ping":
            return b"pong"
        if fcn == "WhoAmI":
            return proposal.creator.certificate.encode()
        if fcn == "Get":
            return self.state.get(args[0], "").encode()
        if fcn == "Set":
            if write:
                self._pending[proposal.tx_id] = proposal
            return args[1].encode()
        if fcn == "Initialize":
            if self.initialized:
                raise LedgerError(
                    "endorsement failed",
                    ["chaincode response 500, contract options are already set"],
                )
            if write:
                self._pending[proposal.tx_id] = proposal
            return b"true"
        raise LedgerError(f"Unknown function {fcn}")

    def _commit(self, proposal: Proposal) -> None:
        if proposal.fcn == "Set":
            self.state[proposal.args[0]] = proposal.args[1]
        elif proposal.fcn == "Initialize":
            self.initialized = True

    def evaluate(self, envelope, timeout):
        proposal = Proposal.model_validate_json(envelope.payload_bytes())
        verify_envelope(envelope, proposal.creator.certificate)
        self._record("evaluate", proposal.creator.certificate, timeout)
        result = self._run(proposal, write=False)
        return EvaluateResponse(result=_b64(result))

    def endorse(self, envelope, timeout):
        proposal = Proposal.model_validate_json(envelope.payload_bytes())
        verify_envelope(envelope, proposal.creator.certificate)
        self._record("endorse", proposal.creator.certificate, timeout)
        result = self._run(proposal, write=True)
        return EndorseResponse(
            tx_id=proposal.tx_id,
            transaction=envelope.payload,
            result=_b64(result),
        )

    def submit(self, envelope, timeout):
        proposal = Proposal.model_validate_json(envelope.payload_bytes())
        verify_envelope(envelope, proposal.creator.certificate)
        self._record("submit", proposal.creator.certificate, timeout)
        return SubmitResponse()

    def commit_status(self, envelope, timeout):
        request = CommitStatusRequest.model_validate_json(envelope.payload_bytes())
        verify_envelope(envelope, request.creator.certificate)
        self._record("commit_status", request.creator.certificate, timeout)
        proposal = self._pending.pop(request.tx_id, None)
        if proposal is not None and self.commit_status_value == "VALID":
            self._commit(proposal)
        return CommitStatusResponse(
            tx_id=request.tx_id, status=self.commit_status_value, block_number=7
        )

    def close(self):
        pass

    def operations(self) -> list[str]:
        return [operation for operation, _, _ in self.calls]


def _b64(data: bytes) -> str:
    return base64.b64encode(data).decode()


@pytest.fixture
def gateway_env(monkeypatch):
    monkeypatch.setenv("CHANNEL_NAME", "mychannel")
    monkeypatch.setenv("CHAINCODE_NAME", "token")
    monkeypatch.setenv("MSP_ID", MSP_ID)
    monkeypatch.setenv("CA_NAME", "org1-ca")
    monkeypatch.setenv("NETWORK_CONFIG_PATH", "/nonexistent/network.yaml")
    monkeypatch.delenv("HOST", raising=False)
    monkeypatch.delenv("PORT", raising=False)
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    return Config()


@pytest.fixture
def admin_identity() -> Identity:
    return make_identity("admin")


@pytest.fixture
def registrar() -> FakeRegistrar:
    return FakeRegistrar()


@pytest.fixture
def channel() -> FakeLedgerChannel:
    return FakeLedgerChannel()
