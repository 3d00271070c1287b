"""
Per-request resolution of the caller's contract handle.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ledgergate.server.identity_directory import IdentityDirectory
    from ledgergate.server.session_builder import ContractHandle, SessionCache

logger = logging.getLogger(__name__)

USER_HEADER = "x-user"


@dataclass(frozen=True)
class RequestContext:
    """What a handler needs to know about who is calling."""

    contract: ContractHandle
    username: str | None = None

    @property
    def is_default(self) -> bool:
        return self.username is None


class SessionResolver:
    """Turns the x-user header into a RequestContext.

    Absent or unknown users fall back to the default handle; resolution
    never touches the network.
    """

    def __init__(
        self,
        directory: IdentityDirectory,
        sessions: SessionCache,
        default_contract: ContractHandle,
    ):
        self.directory = directory
        self.sessions = sessions
        self.default_contract = default_contract

    def resolve(self, username: str | None) -> RequestContext:
        if not username:
            return RequestContext(contract=self.default_contract)

        user = self.directory.lookup(username)
        if user is None:
            logger.debug("Unknown user %s, using default identity", username)
            return RequestContext(contract=self.default_contract)

        session = self.sessions.get(username, user.identity)
        return RequestContext(
            contract=session.contract(
                self.default_contract.channel_name,
                self.default_contract.chaincode_name,
            ),
            username=username,
        )
