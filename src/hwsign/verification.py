"""
Verification of device-signed transactions.

This is the only check standing between a compromised or buggy signing
device and the user's funds. The device could redirect an output or change
its amount; every output of the returned transaction is therefore compared,
in order, against the value and the independently re-derived script of the
request.

Inputs are only counted. Signature validity is left to the network.
"""

from __future__ import annotations

from loguru import logger

from hwsign.bip32 import HDPublicKey
from hwsign.codec import Transaction
from hwsign.derivation import expected_script
from hwsign.errors import (
    InvalidOutputSpecError,
    LengthMismatchError,
    ScriptMismatchError,
    SigningError,
    ValueMismatchError,
)
from hwsign.models import OutputInfo, TxInfo, has_destination
from hwsign.network import NetworkParams


def _fail(error: SigningError) -> SigningError:
    logger.error(f"Signed transaction verification FAILED: {error}")
    return error


def verify_output(
    index: int,
    requested: OutputInfo,
    tx: Transaction,
    network: NetworkParams,
    nodes: list[HDPublicKey],
) -> None:
    if not has_destination(requested):
        raise _fail(
            InvalidOutputSpecError(f"Output {index}: exactly one of path and address must be set")
        )

    actual = tx.outputs[index]
    if actual.value != requested.value:
        raise _fail(
            ValueMismatchError(
                f"Output {index} has wrong value: {actual.value} (expected {requested.value})"
            )
        )

    script = expected_script(requested, network, nodes)
    if script != actual.script:
        raise _fail(
            ScriptMismatchError(
                f"Output {index} script differs: {actual.script.hex()} (expected {script.hex()})"
            )
        )


def verify_signed_tx(
    request: TxInfo,
    tx: Transaction,
    network: NetworkParams,
    nodes: list[HDPublicKey],
) -> Transaction:
    """
    Check a signed transaction against the request it was built from.

    Checks run in order and the first failure is raised.

    Args:
        request: The original signing request
        tx: Decoded transaction returned by the device
        network: Network the request's addresses belong to
        nodes: Account chain nodes used to derive path outputs

    Returns:
        ``tx`` unchanged

    Raises:
        LengthMismatchError: Input or output count differs
        InvalidOutputSpecError: A requested output has no path or address set
        ValueMismatchError: An output value differs
        ScriptMismatchError: An output script differs from the re-derived script
    """
    if len(request.inputs) != len(tx.inputs):
        raise _fail(
            LengthMismatchError(
                f"Signed transaction has {len(tx.inputs)} inputs (expected {len(request.inputs)})"
            )
        )
    if len(request.outputs) != len(tx.outputs):
        raise _fail(
            LengthMismatchError(
                f"Signed transaction has {len(tx.outputs)} outputs (expected {len(request.outputs)})"
            )
        )

    for i, requested in enumerate(request.outputs):
        verify_output(i, requested, tx, network, nodes)

    logger.debug(f"All {len(tx.outputs)} outputs of {tx.txid} match the request")
    return tx
