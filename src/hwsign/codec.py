"""
Transaction serialization and parsing.

Handles legacy and segwit Bitcoin-style transactions, and Zcash Sprout
(version 2) transactions whose joinsplit descriptions trail the locktime.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from hwsign.address import sha256d
from hwsign.errors import DecodeError

# vpub_old, vpub_new, anchor, 2 nullifiers, 2 commitments, ephemeral key,
# random seed, 2 macs, PHGR13 proof, 2 ciphertexts
JOINSPLIT_SIZE = 8 + 8 + 32 + 2 * 32 + 2 * 32 + 32 + 32 + 2 * 32 + 296 + 2 * 601
JOINSPLIT_PUBKEY_SIZE = 32
JOINSPLIT_SIG_SIZE = 64

JOINSPLIT_MIN_VERSION = 2


@dataclass
class TxInput:
    prev_hash: bytes  # internal byte order
    prev_index: int
    script: bytes
    sequence: int = 0xFFFFFFFF
    witness: list[bytes] = field(default_factory=list)


@dataclass
class TxOutput:
    value: int
    script: bytes


@dataclass
class Transaction:
    version: int
    inputs: list[TxInput]
    outputs: list[TxOutput]
    locktime: int = 0
    shielded: bool = False
    joinsplits: list[bytes] = field(default_factory=list)
    joinsplit_pubkey: bytes = b""
    joinsplit_sig: bytes = b""

    @property
    def has_joinsplit_data(self) -> bool:
        return self.shielded and self.version >= JOINSPLIT_MIN_VERSION

    @property
    def has_witness(self) -> bool:
        return any(inp.witness for inp in self.inputs)

    def serialize(self, include_witness: bool = True) -> bytes:
        segwit = include_witness and self.has_witness

        parts = [self.version.to_bytes(4, "little", signed=True)]
        if segwit:
            parts.append(b"\x00\x01")

        parts.append(encode_varint(len(self.inputs)))
        for inp in self.inputs:
            parts.append(inp.prev_hash)
            parts.append(inp.prev_index.to_bytes(4, "little"))
            parts.append(encode_varint(len(inp.script)) + inp.script)
            parts.append(inp.sequence.to_bytes(4, "little"))

        parts.append(encode_varint(len(self.outputs)))
        for out in self.outputs:
            parts.append(out.value.to_bytes(8, "little"))
            parts.append(encode_varint(len(out.script)) + out.script)

        if segwit:
            for inp in self.inputs:
                parts.append(encode_varint(len(inp.witness)))
                for item in inp.witness:
                    parts.append(encode_varint(len(item)) + item)

        parts.append(self.locktime.to_bytes(4, "little"))

        if self.has_joinsplit_data:
            parts.append(self._joinsplit_bytes())

        return b"".join(parts)

    def _joinsplit_bytes(self) -> bytes:
        data = encode_varint(len(self.joinsplits)) + b"".join(self.joinsplits)
        if self.joinsplits:
            data += self.joinsplit_pubkey + self.joinsplit_sig
        return data

    def joinsplit_byte_length(self) -> int:
        """Length of the joinsplit trailer at the end of the serialized transaction."""
        if not self.has_joinsplit_data:
            return 0
        length = len(encode_varint(len(self.joinsplits))) + len(self.joinsplits) * JOINSPLIT_SIZE
        if self.joinsplits:
            length += JOINSPLIT_PUBKEY_SIZE + JOINSPLIT_SIG_SIZE
        return length

    @property
    def txid(self) -> str:
        """Transaction id in display (reversed) byte order."""
        return sha256d(self.serialize(include_witness=False))[::-1].hex()


def encode_varint(value: int) -> bytes:
    if value < 0xFD:
        return bytes([value])
    if value <= 0xFFFF:
        return b"\xfd" + value.to_bytes(2, "little")
    if value <= 0xFFFFFFFF:
        return b"\xfe" + value.to_bytes(4, "little")
    return b"\xff" + value.to_bytes(8, "little")


def read_bytes(data: bytes, offset: int, length: int) -> tuple[bytes, int]:
    end = offset + length
    if end > len(data):
        raise DecodeError(f"Unexpected end of data at offset {offset} (need {length} bytes)")
    return data[offset:end], end


def read_varint(data: bytes, offset: int) -> tuple[int, int]:
    first, offset = read_bytes(data, offset, 1)

    if first[0] < 0xFD:
        return first[0], offset
    size = {0xFD: 2, 0xFE: 4, 0xFF: 8}[first[0]]
    raw, offset = read_bytes(data, offset, size)
    return int.from_bytes(raw, "little"), offset


def deserialize_transaction(tx_bytes: bytes, shielded: bool = False) -> Transaction:
    """
    Parse a serialized transaction.

    Args:
        tx_bytes: Raw transaction
        shielded: Parse the joinsplit trailer of version >= 2 transactions

    Raises:
        DecodeError: If the bytes are not exactly one well-formed transaction
    """
    raw_version, offset = read_bytes(tx_bytes, 0, 4)
    version = int.from_bytes(raw_version, "little", signed=True)

    if shielded and version < 0:
        raise DecodeError("Overwintered transactions are not supported")

    segwit = False
    if not shielded and tx_bytes[offset : offset + 2] == b"\x00\x01":
        segwit = True
        offset += 2

    input_count, offset = read_varint(tx_bytes, offset)
    inputs: list[TxInput] = []

    for _ in range(input_count):
        prev_hash, offset = read_bytes(tx_bytes, offset, 32)
        raw, offset = read_bytes(tx_bytes, offset, 4)
        prev_index = int.from_bytes(raw, "little")

        script_len, offset = read_varint(tx_bytes, offset)
        script, offset = read_bytes(tx_bytes, offset, script_len)

        raw, offset = read_bytes(tx_bytes, offset, 4)
        sequence = int.from_bytes(raw, "little")

        inputs.append(TxInput(prev_hash, prev_index, script, sequence))

    output_count, offset = read_varint(tx_bytes, offset)
    outputs: list[TxOutput] = []

    for _ in range(output_count):
        raw, offset = read_bytes(tx_bytes, offset, 8)
        value = int.from_bytes(raw, "little")

        script_len, offset = read_varint(tx_bytes, offset)
        script, offset = read_bytes(tx_bytes, offset, script_len)

        outputs.append(TxOutput(value, script))

    if segwit:
        for inp in inputs:
            stack_count, offset = read_varint(tx_bytes, offset)
            for _ in range(stack_count):
                item_len, offset = read_varint(tx_bytes, offset)
                item, offset = read_bytes(tx_bytes, offset, item_len)
                inp.witness.append(item)

    raw, offset = read_bytes(tx_bytes, offset, 4)
    locktime = int.from_bytes(raw, "little")

    tx = Transaction(version, inputs, outputs, locktime, shielded=shielded)

    if tx.has_joinsplit_data:
        joinsplit_count, offset = read_varint(tx_bytes, offset)
        for _ in range(joinsplit_count):
            joinsplit, offset = read_bytes(tx_bytes, offset, JOINSPLIT_SIZE)
            tx.joinsplits.append(joinsplit)
        if joinsplit_count:
            tx.joinsplit_pubkey, offset = read_bytes(tx_bytes, offset, JOINSPLIT_PUBKEY_SIZE)
            tx.joinsplit_sig, offset = read_bytes(tx_bytes, offset, JOINSPLIT_SIG_SIZE)

    if offset != len(tx_bytes):
        raise DecodeError(f"{len(tx_bytes) - offset} unexpected trailing bytes")

    return tx


def transaction_from_hex(tx_hex: str, shielded: bool = False) -> Transaction:
    try:
        tx_bytes = bytes.fromhex(tx_hex)
    except ValueError as e:
        raise DecodeError(f"Invalid transaction hex: {e}") from e
    return deserialize_transaction(tx_bytes, shielded=shielded)
