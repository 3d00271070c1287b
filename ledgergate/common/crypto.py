"""Common cryptographic utilities.
"""

from __future__ import annotations

import base64
import hashlib

from cryptography import x509
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey
from cryptography.hazmat.primitives.asymmetric.utils import (
    decode_dss_signature,
    encode_dss_signature,
)
from cryptography.x509.oid import NameOID

from ledgergate.common.exceptions import InvalidKeyMaterial

# Curve orders, used to normalise ECDSA signatures to low-S form
CURVE_ORDERS: dict[str, int] = {
    "secp256r1": int(
        "FFFFFFFF00000000FFFFFFFFFFFFFFFFBCE6FAADA7179E84F3B9CAC2FC632551", 16
    ),
    "secp384r1": int(
        "FFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFC7634D81F4372DDF"
        "581A0DB248B0A77AECEC196ACCC52973",
        16,
    ),
}


class Signer:
    """Signs transaction payloads with a single private key."""

    def __init__(self, private_key: ec.EllipticCurvePrivateKey | Ed25519PrivateKey):
        self._private_key = private_key

    def sign(self, message: bytes) -> bytes:
        """Sign message bytes, returning a DER (ECDSA) or raw (Ed25519) signature."""
        if isinstance(self._private_key, Ed25519PrivateKey):
            return self._private_key.sign(message)
        signature = self._private_key.sign(message, ec.ECDSA(hashes.SHA256()))
        return self._to_low_s(signature)

    def _to_low_s(self, signature: bytes) -> bytes:
        order = CURVE_ORDERS[self._private_key.curve.name]
        r, s = decode_dss_signature(signature)
        if s > order // 2:
            s = order - s
        return encode_dss_signature(r, s)

    def public_key(self):  # noqa: ANN201
        return self._private_key.public_key()

    @property
    def public_key_fingerprint(self) -> str:
        der = self.public_key().public_bytes(
            serialization.Encoding.DER,
            serialization.PublicFormat.SubjectPublicKeyInfo,
        )
        return hashlib.sha256(der).hexdigest()


def derive_signer(private_key_pem: bytes | str) -> Signer:
    """Build a Signer from PEM private key material.

    Raises:
        InvalidKeyMaterial: the PEM is unreadable, encrypted, or not an
            EC/Ed25519 private key.
    """
    if isinstance(private_key_pem, str):
        private_key_pem = private_key_pem.encode()
    try:
        private_key = serialization.load_pem_private_key(private_key_pem, None)
    except (ValueError, TypeError, UnsupportedAlgorithm) as err:
        msg = f"Invalid private key material: {err}"
        raise InvalidKeyMaterial(msg) from err

    if isinstance(private_key, ec.EllipticCurvePrivateKey):
        if private_key.curve.name not in CURVE_ORDERS:
            msg = f"Unsupported curve: {private_key.curve.name}"
            raise InvalidKeyMaterial(msg)
        return Signer(private_key)
    if isinstance(private_key, Ed25519PrivateKey):
        return Signer(private_key)
    msg = f"Unsupported private key type: {type(private_key).__name__}"
    raise InvalidKeyMaterial(msg)


class CryptoUtils:
    """Utility class for certificate authority cryptographic operations."""

    @staticmethod
    def generate_key_and_csr(common_name: str) -> tuple[bytes, bytes]:
        """Generate a P-256 key and a CSR for it; returns (key_pem, csr_pem)."""
        private_key = ec.generate_private_key(ec.SECP256R1())
        csr = (
            x509.CertificateSigningRequestBuilder()
            .subject_name(
                x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, common_name)])
            )
            .sign(private_key, hashes.SHA256())
        )
        key_pem = private_key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        )
        return key_pem, csr.public_bytes(serialization.Encoding.PEM)

    @staticmethod
    def ca_auth_token(
        signer: Signer, certificate_pem: bytes, method: str, uri: str, body: bytes
    ) -> str:
        """Authorization token accepted by the certificate authority REST API.

        The signed payload is ``method.b64(uri).b64(body).b64(cert)`` and the
        token is ``b64(cert).b64(signature)``.
        """
        b64_cert = base64.b64encode(certificate_pem).decode()
        b64_uri = base64.b64encode(uri.encode()).decode()
        b64_body = base64.b64encode(body).decode()
        payload = f"{method}.{b64_uri}.{b64_body}.{b64_cert}".encode()
        signature = base64.b64encode(signer.sign(payload)).decode()
        return f"{b64_cert}.{signature}"
