"""
Wire messages exchanged with the signing device.

Hashes and scripts travel as lowercase hex strings. Transaction ids are in
display (reversed) byte order.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, model_validator


class OutputScriptType(str, Enum):
    PAYTOADDRESS = "PAYTOADDRESS"
    PAYTOSCRIPTHASH = "PAYTOSCRIPTHASH"


class TransactionInput(BaseModel):
    prev_hash: str
    prev_index: int = Field(..., ge=0)
    address_n: list[int] | None = None


class TransactionOutput(BaseModel):
    address: str | None = None
    address_n: list[int] | None = None
    amount: int = Field(..., ge=0)
    script_type: OutputScriptType

    @model_validator(mode="after")
    def check_destination(self) -> TransactionOutput:
        if (self.address is None) == (self.address_n is None):
            raise ValueError("Exactly one of address and address_n must be set")
        return self


class RefTxInput(BaseModel):
    prev_hash: str
    prev_index: int = Field(..., ge=0)
    script_sig: str
    sequence: int = Field(..., ge=0, le=0xFFFFFFFF)


class RefTxOutput(BaseModel):
    amount: int = Field(..., ge=0)
    script_pubkey: str


class RefTransaction(BaseModel):
    """A previously confirmed transaction whose outputs are being spent."""

    version: int
    lock_time: int = Field(..., ge=0, le=0xFFFFFFFF)
    hash: str
    inputs: list[RefTxInput] = Field(default_factory=list)
    bin_outputs: list[RefTxOutput] = Field(default_factory=list)
    extra_data: str | None = None


class SignedTx(BaseModel):
    """Device response to a signing request."""

    serialized_tx: str
