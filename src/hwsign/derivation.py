"""
Output script derivation.

``derive_output`` is the only place that turns an OutputInfo into a
destination script. The request builder uses its wire descriptor, the
verifier uses its script bytes; both come from the same call.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from hwsign.address import address_to_script, p2pkh_script
from hwsign.bip32 import HDPublicKey, derive_pubkey_hash
from hwsign.errors import InvalidOutputSpecError, MissingDestinationError
from hwsign.messages import OutputScriptType, TransactionOutput
from hwsign.models import AddressOutput, OutputInfo, PathOutput, check_value
from hwsign.network import NetworkParams

MAX_PATH_INDEX = 0xFFFFFFFF


@dataclass(frozen=True)
class DerivedOutput:
    wire: TransactionOutput
    script: bytes


def validate_path(path: Any) -> list[int]:
    """
    Check that a derivation path is a sequence of at least two uint32 values.

    Malformed paths are rejected as a whole, never filtered down to their
    valid elements.
    """
    if isinstance(path, (str, bytes)) or not isinstance(path, Sequence):
        raise InvalidOutputSpecError(f"Derivation path must be a sequence of integers: {path!r}")
    if len(path) < 2:
        raise InvalidOutputSpecError(
            f"Derivation path needs chain and address index components: {list(path)}"
        )
    for index in path:
        if isinstance(index, bool) or not isinstance(index, int):
            raise InvalidOutputSpecError(f"Derivation path element is not an integer: {index!r}")
        if not 0 <= index <= MAX_PATH_INDEX:
            raise InvalidOutputSpecError(f"Derivation path element out of range: {index}")
    return list(path)


def derive_output(
    output: OutputInfo, network: NetworkParams, nodes: list[HDPublicKey]
) -> DerivedOutput:
    """
    Derive the wire descriptor and expected script of an output.

    Args:
        output: Requested output
        network: Address versions used to classify address outputs
        nodes: Account chain nodes (external, change) for path outputs

    Raises:
        MissingDestinationError: If the output is neither a path nor an address output
        InvalidOutputSpecError: If the path is malformed
        UnknownAddressTypeError: If the address version is not P2PKH or P2SH
    """
    if isinstance(output, PathOutput):
        path = validate_path(output.path)
        value = check_value(output.value)
        try:
            pubkey_hash = derive_pubkey_hash(nodes, path[-2], path[-1])
        except ValueError as e:
            raise InvalidOutputSpecError(f"Cannot derive key at path {path}: {e}") from e

        wire = TransactionOutput(
            address_n=path,
            amount=value,
            script_type=OutputScriptType.PAYTOADDRESS,
        )
        return DerivedOutput(wire=wire, script=p2pkh_script(pubkey_hash))

    if isinstance(output, AddressOutput):
        if not isinstance(output.address, str) or not output.address:
            raise MissingDestinationError("Output address is empty")
        value = check_value(output.value)

        script_type, script = address_to_script(output.address, network)
        wire = TransactionOutput(
            address=output.address,
            amount=value,
            script_type=script_type,
        )
        return DerivedOutput(wire=wire, script=script)

    raise MissingDestinationError("Both address and path of an output cannot be null")


def expected_script(output: OutputInfo, network: NetworkParams, nodes: list[HDPublicKey]) -> bytes:
    return derive_output(output, network, nodes).script
