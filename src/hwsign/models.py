"""
Signing request data models.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from hwsign.bip32 import parse_path
from hwsign.errors import InvalidOutputSpecError, MissingDestinationError


@dataclass(frozen=True)
class InputInfo:
    """Input spending ``prev_index`` of the transaction ``prev_hash``.

    ``prev_hash`` is 32 bytes in internal byte order. Its length is a caller
    precondition and is not checked.
    """

    prev_hash: bytes
    prev_index: int
    path: tuple[int, ...] | None = None


@dataclass(frozen=True)
class PathOutput:
    """Output paying to one of our own keys, identified by its derivation path"""

    path: tuple[int, ...]
    value: int


@dataclass(frozen=True)
class AddressOutput:
    """Output paying to an external address"""

    address: str
    value: int


OutputInfo = PathOutput | AddressOutput


def has_destination(output: Any) -> bool:
    """True if ``output`` is a path or address output with its destination set."""
    if isinstance(output, PathOutput):
        return output.path is not None
    if isinstance(output, AddressOutput):
        return isinstance(output.address, str) and bool(output.address)
    return False


def check_value(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise InvalidOutputSpecError(f"Output value must be a non-negative integer, got {value!r}")
    return value


def _as_path(path: Any) -> tuple[int, ...]:
    if isinstance(path, str):
        try:
            return tuple(parse_path(path))
        except ValueError as e:
            raise InvalidOutputSpecError(f"Invalid derivation path {path!r}: {e}") from e
    if isinstance(path, (list, tuple)):
        return tuple(path)
    raise InvalidOutputSpecError(f"Derivation path must be a sequence, got {type(path).__name__}")


def output_info(value: Any, path: Any = None, address: str | None = None) -> OutputInfo:
    """
    Build an output from loosely typed fields.

    Raises:
        MissingDestinationError: If neither path nor address is given
        InvalidOutputSpecError: If both are given, or the value is not a non-negative int
    """
    if path is None and address is None:
        raise MissingDestinationError("Both address and path of an output cannot be null")
    if path is not None and address is not None:
        raise InvalidOutputSpecError("Output cannot have both an address and a path")

    value = check_value(value)
    if address is not None:
        if not isinstance(address, str) or not address:
            raise InvalidOutputSpecError(f"Invalid address {address!r}")
        return AddressOutput(address=address, value=value)
    return PathOutput(path=_as_path(path), value=value)


@dataclass
class TxInfo:
    inputs: list[InputInfo]
    outputs: list[OutputInfo]

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TxInfo:
        """
        Load a request from JSON-style data.

        Example:
            {
                "inputs": [{"prev_hash": "<hex, internal order>", "prev_index": 0,
                            "path": "m/44'/0'/0'/0/3"}],
                "outputs": [{"address": "1A1z...", "value": 100000},
                            {"path": [2147483692, 2147483648, 2147483648, 1, 0],
                             "value": 50000}]
            }
        """
        inputs = []
        for raw in data.get("inputs", []):
            path = raw.get("path")
            try:
                prev_hash = bytes.fromhex(raw["prev_hash"])
            except (KeyError, ValueError) as e:
                raise ValueError(f"Invalid input {raw!r}: {e}") from e
            inputs.append(
                InputInfo(
                    prev_hash=prev_hash,
                    prev_index=int(raw.get("prev_index", 0)),
                    path=_as_path(path) if path is not None else None,
                )
            )

        outputs = [
            output_info(raw.get("value"), path=raw.get("path"), address=raw.get("address"))
            for raw in data.get("outputs", [])
        ]

        return cls(inputs=inputs, outputs=outputs)
