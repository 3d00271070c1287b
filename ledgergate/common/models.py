"""
Pydantic models for request/response validation and ledger envelopes.
"""

from __future__ import annotations

import base64
import hashlib
import json
import os

from pydantic import BaseModel, Field, field_validator


class Credentials(BaseModel):
    username: str = Field(min_length=1)
    password: str


class TransactionRequest(BaseModel):
    fcn: str = Field(min_length=1)
    args: list[str] = Field(default_factory=list)


class Creator(BaseModel):
    msp_id: str
    certificate: str


class Proposal(BaseModel):
    """Chaincode invocation proposed under one creator identity."""

    channel_name: str
    chaincode_name: str
    fcn: str
    args: list[str] = Field(default_factory=list)
    creator: Creator
    nonce: str
    tx_id: str

    @classmethod
    def create(
        cls,
        channel_name: str,
        chaincode_name: str,
        fcn: str,
        args: list[str],
        creator: dict[str, str],
    ) -> Proposal:
        """Build a proposal with a fresh nonce; tx_id = sha256(nonce + creator)."""
        nonce = os.urandom(24)
        creator_bytes = json.dumps(creator, sort_keys=True).encode()
        return cls(
            channel_name=channel_name,
            chaincode_name=chaincode_name,
            fcn=fcn,
            args=list(args),
            creator=Creator(**creator),
            nonce=nonce.hex(),
            tx_id=hashlib.sha256(nonce + creator_bytes).hexdigest(),
        )

    def to_bytes(self) -> bytes:
        return json.dumps(self.model_dump(), sort_keys=True).encode()


class CommitStatusRequest(BaseModel):
    channel_name: str
    tx_id: str
    creator: Creator

    def to_bytes(self) -> bytes:
        return json.dumps(self.model_dump(), sort_keys=True).encode()


class SignedEnvelope(BaseModel):
    """Payload bytes plus the creator's signature, both base64 encoded."""

    payload: str
    signature: str

    @classmethod
    def seal(cls, payload: bytes, signature: bytes) -> SignedEnvelope:
        return cls(
            payload=base64.b64encode(payload).decode(),
            signature=base64.b64encode(signature).decode(),
        )

    def payload_bytes(self) -> bytes:
        return base64.b64decode(self.payload)

    def signature_bytes(self) -> bytes:
        return base64.b64decode(self.signature)


def _strict_base64(value: str) -> str:
    """Reject payloads that are not canonical base64."""
    base64.b64decode(value, validate=True)
    return value


class EvaluateResponse(BaseModel):
    result: str = ""

    @field_validator("result")
    @classmethod
    def result_is_base64(cls, value: str) -> str:
        return _strict_base64(value)

    def result_bytes(self) -> bytes:
        return base64.b64decode(self.result)


class EndorseResponse(BaseModel):
    """Endorsed transaction, ready to be signed and sent for ordering."""

    tx_id: str
    transaction: str
    result: str = ""

    @field_validator("transaction", "result")
    @classmethod
    def payloads_are_base64(cls, value: str) -> str:
        return _strict_base64(value)

    def transaction_bytes(self) -> bytes:
        return base64.b64decode(self.transaction)

    def result_bytes(self) -> bytes:
        return base64.b64decode(self.result)


class SubmitResponse(BaseModel):
    status: str = "SUCCESS"


class CommitStatusResponse(BaseModel):
    tx_id: str
    status: str
    block_number: int | None = None

    @property
    def successful(self) -> bool:
        return self.status == "VALID"


class LedgerErrorBody(BaseModel):
    message: str = "ledger request failed"
    details: list[str] = Field(default_factory=list)

