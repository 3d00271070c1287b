"""
Loading of the YAML network configuration document.

The document follows the connection-profile layout::

    organizations:
      Org1MSP:
        peers: [peer0]
        users:
          admin:
            cert: {pem: "..."}
            key: {pem: "..."}
    peers:
      peer0:
        url: grpcs://peer0:7051
    certificateAuthorities:
      ca:
        url: https://ca:7054
        caName: ca
        registrar:
          enrollId: admin
          enrollSecret: adminpw
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from ledgergate.common.entities import Identity
from ledgergate.common.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

URL_SCHEMES = {"grpcs://": "https://", "grpc://": "http://"}


@dataclass(frozen=True)
class CertificateAuthorityConfig:
    name: str
    url: str
    ca_name: str
    registrar_enroll_id: str
    registrar_enroll_secret: str


@dataclass(frozen=True)
class PeerConfig:
    name: str
    url: str


@dataclass(frozen=True)
class NetworkConfig:
    """The parts of the network document the gateway needs."""

    msp_id: str
    peer: PeerConfig
    ca: CertificateAuthorityConfig
    admin_identity: Identity | None = None


def _get(data: Any, path: str) -> Any:
    """Walk a dotted path through nested mappings, None when absent."""
    for key in path.split("."):
        if not isinstance(data, dict) or key not in data:
            return None
        data = data[key]
    return data


def _http_url(url: str) -> str:
    for scheme, replacement in URL_SCHEMES.items():
        if url.startswith(scheme):
            return replacement + url[len(scheme) :]
    return url


def parse_network_config(
    document: dict[str, Any], msp_id: str, ca_name: str, hlf_user: str
) -> NetworkConfig:
    """Extract peer, certificate authority and admin user for one organisation."""
    if not isinstance(document, dict):
        msg = "Network configuration must be a mapping"
        raise ConfigurationError(msg)

    org = _get(document, "organizations")
    org = org.get(msp_id) if isinstance(org, dict) else None
    if not isinstance(org, dict):
        msg = f"Organization {msp_id} not found in network configuration"
        raise ConfigurationError(msg)

    peer_names = org.get("peers") or []
    peers = document.get("peers") or {}
    if not peer_names or peer_names[0] not in peers:
        msg = f"Organization {msp_id} has no peer defined in network configuration"
        raise ConfigurationError(msg)
    # The first peer of the organisation is the gateway peer
    peer_name = peer_names[0]
    peer_url = _get(peers[peer_name], "url")
    if not peer_url:
        msg = f"Peer {peer_name} does not have a URL"
        raise ConfigurationError(msg)
    peer = PeerConfig(name=peer_name, url=_http_url(peer_url))

    ca = _get(document, "certificateAuthorities")
    ca = ca.get(ca_name) if isinstance(ca, dict) else None
    if not isinstance(ca, dict):
        msg = f"Certificate authority {ca_name} not found in network configuration"
        raise ConfigurationError(msg)
    if not ca.get("url"):
        msg = f"Certificate authority {ca_name} does not have a URL"
        raise ConfigurationError(msg)
    enroll_id = _get(ca, "registrar.enrollId")
    enroll_secret = _get(ca, "registrar.enrollSecret")
    if not enroll_id or enroll_secret is None:
        msg = f"Certificate authority {ca_name} does not define a registrar"
        raise ConfigurationError(msg)

    admin_identity = None
    user = _get(org, f"users.{hlf_user}")
    if user is not None:
        cert_pem = _get(user, "cert.pem")
        key_pem = _get(user, "key.pem")
        if not cert_pem or not key_pem:
            msg = f"User {hlf_user} of {msp_id} needs both cert.pem and key.pem"
            raise ConfigurationError(msg)
        admin_identity = Identity(
            msp_id=msp_id,
            certificate_pem=cert_pem.encode(),
            private_key_pem=key_pem.encode(),
        )

    return NetworkConfig(
        msp_id=msp_id,
        peer=peer,
        ca=CertificateAuthorityConfig(
            name=ca_name,
            url=ca["url"].rstrip("/"),
            ca_name=ca.get("caName", "ca"),
            registrar_enroll_id=enroll_id,
            registrar_enroll_secret=str(enroll_secret),
        ),
        admin_identity=admin_identity,
    )


def load_network_config(
    path: Path, msp_id: str, ca_name: str, hlf_user: str
) -> NetworkConfig:
    """Read and parse the YAML network document at path."""
    try:
        with path.open() as f:
            document = yaml.safe_load(f)
    except FileNotFoundError as err:
        msg = f"Network configuration not found at {path}"
        raise ConfigurationError(msg) from err
    except yaml.YAMLError as err:
        msg = f"Malformed network configuration at {path}: {err}"
        raise ConfigurationError(msg) from err

    logger.info("Loaded network configuration from %s", path)
    return parse_network_config(document, msp_id, ca_name, hlf_user)
