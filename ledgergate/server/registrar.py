"""
Client for the certificate authority REST API.
"""

from __future__ import annotations

import base64
import json
import logging
from typing import Any
from urllib.parse import quote

import requests

from ledgergate.common.crypto import CryptoUtils, derive_signer
from ledgergate.common.entities import Enrollment, Identity, RegistrarIdentity
from ledgergate.common.exceptions import IdentityNotFound, RegistrarError
from ledgergate.server.network_config import CertificateAuthorityConfig

logger = logging.getLogger(__name__)

REGISTRAR_TIMEOUT = 30.0
# Error code the CA reports when an identity lookup has no match
CA_IDENTITY_NOT_FOUND = 63


class RegistrarClient:
    """Shapes register/enroll/lookup calls for the certificate authority."""

    def __init__(
        self,
        ca_config: CertificateAuthorityConfig,
        msp_id: str,
        verify_tls: bool = False,  # noqa: FBT001, FBT002
        timeout: float = REGISTRAR_TIMEOUT,
        session: requests.Session | None = None,
    ):
        self.ca_config = ca_config
        self.msp_id = msp_id
        self.verify_tls = verify_tls
        self.timeout = timeout
        self.http = session or requests.Session()
        self.registrar: Identity | None = None

    def enroll_registrar(self) -> Identity:
        """Enroll the registrar configured for the CA and keep it for later calls."""
        enrollment = self.enroll(
            self.ca_config.registrar_enroll_id,
            self.ca_config.registrar_enroll_secret,
        )
        self.registrar = Identity(
            msp_id=self.msp_id,
            certificate_pem=enrollment.certificate_pem,
            private_key_pem=enrollment.private_key_pem,
        )
        logger.info("Enrolled registrar %s", self.ca_config.registrar_enroll_id)
        return self.registrar

    def register(self, enrollment_id: str, secret: str, role: str = "client") -> None:
        """Register a new identity with an unlimited number of enrollments."""
        body = {
            "id": enrollment_id,
            "type": role,
            "secret": secret,
            "affiliation": "",
            "max_enrollments": -1,
            "attrs": [],
            "caname": self.ca_config.ca_name,
        }
        self._request("POST", "/api/v1/register", body=body)
        logger.info("Registered %s with role %s", enrollment_id, role)

    def enroll(self, enrollment_id: str, secret: str) -> Enrollment:
        """Exchange an enrollment secret for a certificate over a local key."""
        key_pem, csr_pem = CryptoUtils.generate_key_and_csr(enrollment_id)
        body = {
            "certificate_request": csr_pem.decode(),
            "caname": self.ca_config.ca_name,
        }
        result = self._request(
            "POST",
            "/api/v1/enroll",
            body=body,
            basic_auth=(enrollment_id, secret),
        )
        try:
            certificate_pem = base64.b64decode(result["Cert"])
        except (KeyError, TypeError, ValueError) as err:
            msg = f"Enrollment response for {enrollment_id} carries no certificate"
            raise RegistrarError(msg) from err
        return Enrollment(certificate_pem=certificate_pem, private_key_pem=key_pem)

    def get_identity(
        self, enrollment_id: str, as_registrar: Identity | None = None
    ) -> RegistrarIdentity:
        """Look up an identity; raises IdentityNotFound when the CA has none."""
        uri = (
            f"/api/v1/identities/{quote(enrollment_id, safe='')}"
            f"?ca={quote(self.ca_config.ca_name, safe='')}"
        )
        result = self._request(
            "GET", uri, registrar=as_registrar, lookup_id=enrollment_id
        )
        if not result:
            raise IdentityNotFound(enrollment_id)
        return RegistrarIdentity(
            enrollment_id=result.get("id", enrollment_id),
            type=result.get("type", "client"),
            affiliation=result.get("affiliation", ""),
            max_enrollments=result.get("max_enrollments", -1),
        )

    def _request(
        self,
        method: str,
        uri: str,
        body: dict[str, Any] | None = None,
        basic_auth: tuple[str, str] | None = None,
        registrar: Identity | None = None,
        lookup_id: str | None = None,
    ) -> Any:
        """Send one CA request and unwrap its {success, result, errors} envelope."""
        data = json.dumps(body).encode() if body is not None else b""
        headers = {"Content-Type": "application/json"}
        if basic_auth is None:
            headers["Authorization"] = self._token(method, uri, data, registrar)

        try:
            response = self.http.request(
                method,
                self.ca_config.url + uri,
                data=data or None,
                headers=headers,
                auth=basic_auth,
                verify=self.verify_tls,
                timeout=self.timeout,
            )
        except requests.RequestException as err:
            msg = f"Certificate authority request failed: {err}"
            raise RegistrarError(msg) from err

        try:
            envelope = response.json()
        except ValueError:
            envelope = {}
        if not isinstance(envelope, dict):
            envelope = {}

        errors = envelope.get("errors") or []
        if lookup_id is not None and (
            response.status_code == 404  # noqa: PLR2004
            or any(e.get("code") == CA_IDENTITY_NOT_FOUND for e in errors)
        ):
            raise IdentityNotFound(lookup_id)
        if not response.ok or not envelope.get("success", False):
            messages = "; ".join(e.get("message", "") for e in errors) or response.text
            msg = f"Certificate authority error ({response.status_code}): {messages}"
            raise RegistrarError(msg)
        return envelope.get("result")

    def _token(
        self, method: str, uri: str, body: bytes, registrar: Identity | None
    ) -> str:
        identity = registrar or self.registrar
        if identity is None:
            msg = "Registrar is not enrolled"
            raise RegistrarError(msg)
        signer = derive_signer(identity.private_key_pem)
        return CryptoUtils.ca_auth_token(
            signer, identity.certificate_pem, method, uri, body
        )
