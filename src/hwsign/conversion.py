"""
Conversion between wallet-side transaction data and device wire messages.

The device protocol carries transaction ids in display order, the reverse of
the internal byte order used in serialized transactions. Every id crossing
that boundary goes through ``reverse_bytes``.
"""

from __future__ import annotations

from loguru import logger

from hwsign.codec import Transaction, transaction_from_hex
from hwsign.messages import RefTransaction, RefTxInput, RefTxOutput, TransactionInput
from hwsign.models import InputInfo
from hwsign.network import NetworkParams


def reverse_bytes(data: bytes) -> bytes:
    return data[::-1]


def input_to_wire(input_info: InputInfo) -> TransactionInput:
    return TransactionInput(
        prev_index=input_info.prev_index,
        prev_hash=reverse_bytes(input_info.prev_hash).hex(),
        address_n=list(input_info.path) if input_info.path is not None else None,
    )


def get_joinsplit_data(tx: Transaction) -> bytes | None:
    """
    Trailing joinsplit bytes of a shielded transaction.

    Returns None for transactions below the joinsplit version or on chains
    without the extension.
    """
    if not tx.has_joinsplit_data:
        return None
    raw = tx.serialize()
    return raw[len(raw) - tx.joinsplit_byte_length() :]


def transaction_to_reference(tx: Transaction) -> RefTransaction:
    """Encode a confirmed transaction as a device reference transaction"""
    extra_data = get_joinsplit_data(tx)

    return RefTransaction(
        version=tx.version,
        lock_time=tx.locktime,
        hash=tx.txid,
        inputs=[
            RefTxInput(
                prev_index=inp.prev_index,
                sequence=inp.sequence,
                prev_hash=reverse_bytes(inp.prev_hash).hex(),
                script_sig=inp.script.hex(),
            )
            for inp in tx.inputs
        ],
        bin_outputs=[
            RefTxOutput(amount=out.value, script_pubkey=out.script.hex()) for out in tx.outputs
        ],
        extra_data=extra_data.hex() if extra_data is not None else None,
    )


def decode_signed_tx(serialized_tx: str, network: NetworkParams) -> Transaction:
    """
    Parse the transaction hex returned by the device.

    Raises:
        DecodeError: On malformed hex or transaction bytes
    """
    tx = transaction_from_hex(serialized_tx, shielded=network.shielded)
    logger.debug(
        f"Decoded signed transaction {tx.txid}: "
        f"{len(tx.inputs)} inputs, {len(tx.outputs)} outputs"
    )
    return tx
