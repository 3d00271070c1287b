"""
In-memory directory of users enrolled through the gateway.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

from ledgergate.common.entities import EnrolledUser, Identity
from ledgergate.common.exceptions import IdentityNotFound, UnknownUser, UsernameTaken

if TYPE_CHECKING:
    from ledgergate.common.interfaces import IRegistrarClient

logger = logging.getLogger(__name__)


class IdentityDirectory:
    """Maps username to EnrolledUser for the lifetime of the process.

    The certificate authority is the source of truth for whether a username
    exists; the local map only holds users that have logged in.
    """

    def __init__(self, registrar: IRegistrarClient, msp_id: str):
        self.registrar = registrar
        self.msp_id = msp_id
        self._users: dict[str, EnrolledUser] = {}
        self._lock = threading.Lock()

    def register(self, username: str, secret: str) -> None:
        """Register username with the CA; nothing is stored until login."""
        if self._exists_at_registrar(username):
            raise UsernameTaken(username)
        self.registrar.register(username, secret, "client")

    def login(self, username: str, secret: str) -> EnrolledUser:
        """Enroll username and store (or replace) its directory entry."""
        if not self._exists_at_registrar(username):
            raise UnknownUser(username)

        enrollment = self.registrar.enroll(username, secret)
        user = EnrolledUser(
            username=username,
            identity=Identity(
                msp_id=self.msp_id,
                certificate_pem=enrollment.certificate_pem,
                private_key_pem=enrollment.private_key_pem,
            ),
            enrollment_secret=secret,
        )
        with self._lock:
            self._users[username] = user
        logger.info("User %s logged in", username)
        return user

    def lookup(self, username: str) -> EnrolledUser | None:
        with self._lock:
            return self._users.get(username)

    def __len__(self) -> int:
        with self._lock:
            return len(self._users)

    def _exists_at_registrar(self, username: str) -> bool:
        try:
            self.registrar.get_identity(username)
        except IdentityNotFound:
            logger.info("Identity %s not found at registrar", username)
            return False
        return True
