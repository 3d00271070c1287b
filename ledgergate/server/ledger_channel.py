"""
Transport channel to the ledger network's gateway peer.
"""

from __future__ import annotations

import logging
import time
from typing import TypeVar

import requests
from pydantic import BaseModel, ValidationError

from ledgergate.common.exceptions import LedgerError, TransportTimeout
from ledgergate.common.models import (
    CommitStatusResponse,
    EndorseResponse,
    EvaluateResponse,
    LedgerErrorBody,
    SignedEnvelope,
    SubmitResponse,
)

logger = logging.getLogger(__name__)

ResponseT = TypeVar("ResponseT", bound=BaseModel)

# A read returns as soon as a byte is available, so the deadline is checked
# while a slow peer is still sending.
READ_CHUNK_SIZE = 1


class HttpLedgerChannel:
    """Posts signed envelopes to the gateway peer, one endpoint per phase.

    A single instance is created per process and shared by every
    ConnectionSession; it holds no per-identity state.
    """

    def __init__(
        self,
        base_url: str,
        verify_tls: bool = False,  # noqa: FBT001, FBT002
        session: requests.Session | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.verify_tls = verify_tls
        self.http = session or requests.Session()

    def evaluate(self, envelope: SignedEnvelope, timeout: float) -> EvaluateResponse:
        return self._post("evaluate", envelope, timeout, EvaluateResponse)

    def endorse(self, envelope: SignedEnvelope, timeout: float) -> EndorseResponse:
        return self._post("endorse", envelope, timeout, EndorseResponse)

    def submit(self, envelope: SignedEnvelope, timeout: float) -> SubmitResponse:
        return self._post("submit", envelope, timeout, SubmitResponse)

    def commit_status(
        self, envelope: SignedEnvelope, timeout: float
    ) -> CommitStatusResponse:
        return self._post("commit-status", envelope, timeout, CommitStatusResponse)

    def close(self) -> None:
        self.http.close()

    def _post(
        self,
        operation: str,
        envelope: SignedEnvelope,
        timeout: float,
        response_model: type[ResponseT],
    ) -> ResponseT:
        """POST one envelope; the whole exchange must finish within timeout.

        ``requests`` only bounds the connect and each gap between reads, so
        the body is streamed and checked against a monotonic deadline.
        """
        url = f"{self.base_url}/{operation}"
        deadline = time.monotonic() + timeout
        try:
            response = self.http.post(
                url,
                json=envelope.model_dump(),
                timeout=timeout,
                verify=self.verify_tls,
                stream=True,
            )
            body = self._read_body(response, operation, timeout, deadline)
        except requests.Timeout as err:
            raise TransportTimeout(operation, timeout) from err
        except requests.RequestException as err:
            # A stalled body read surfaces as ConnectionError
            if time.monotonic() >= deadline:
                raise TransportTimeout(operation, timeout) from err
            msg = f"{operation} request to {url} failed: {err}"
            raise LedgerError(msg) from err

        if not response.ok:
            raise self._ledger_error(operation, response, body)
        try:
            return response_model.model_validate_json(body)
        except ValidationError as err:
            msg = f"Malformed {operation} response from ledger: {err}"
            raise LedgerError(msg) from err

    @staticmethod
    def _read_body(
        response: requests.Response, operation: str, timeout: float, deadline: float
    ) -> bytes:
        chunks = []
        try:
            if time.monotonic() > deadline:
                raise TransportTimeout(operation, timeout)
            for chunk in response.iter_content(chunk_size=READ_CHUNK_SIZE):
                chunks.append(chunk)
                if time.monotonic() > deadline:
                    raise TransportTimeout(operation, timeout)
        finally:
            response.close()
        return b"".join(chunks)

    @staticmethod
    def _ledger_error(
        operation: str, response: requests.Response, body: bytes
    ) -> LedgerError:
        try:
            error = LedgerErrorBody.model_validate_json(body)
        except ValidationError:
            text = body.decode("utf-8", errors="replace")
            error = LedgerErrorBody(message=text or response.reason or "")
        logger.debug("%s failed (%s): %s", operation, response.status_code, error)
        return LedgerError(error.message, error.details)
