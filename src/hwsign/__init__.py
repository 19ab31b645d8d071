"""
hwsign - Sign wallet transactions on an external device and verify the result

Builds device signing requests from wallet inputs and outputs, encodes the
reference transactions the device needs, and checks every output of the
returned signed transaction against the request.
"""

__version__ = "0.3.0"

from hwsign.bip32 import HDPublicKey, account_chain_nodes, derive_pubkey_hash
from hwsign.codec import Transaction, TxInput, TxOutput, deserialize_transaction
from hwsign.conversion import (
    decode_signed_tx,
    get_joinsplit_data,
    input_to_wire,
    reverse_bytes,
    transaction_to_reference,
)
from hwsign.derivation import DerivedOutput, derive_output, expected_script
from hwsign.errors import (
    DecodeError,
    InvalidAddressError,
    InvalidOutputSpecError,
    LengthMismatchError,
    MissingDestinationError,
    ScriptMismatchError,
    SigningError,
    UnknownAddressTypeError,
    UnknownNetworkError,
    ValueMismatchError,
    VerificationError,
)
from hwsign.messages import (
    OutputScriptType,
    RefTransaction,
    RefTxInput,
    RefTxOutput,
    SignedTx,
    TransactionInput,
    TransactionOutput,
)
from hwsign.models import AddressOutput, InputInfo, OutputInfo, PathOutput, TxInfo, output_info
from hwsign.network import DEFAULT_NETWORKS, NetworkParams, NetworkTable, resolve_network
from hwsign.session import DeviceSession
from hwsign.signer import SignRequest, build_sign_request, sign_tx
from hwsign.verification import verify_signed_tx

__all__ = [
    "AddressOutput",
    "DEFAULT_NETWORKS",
    "DecodeError",
    "DerivedOutput",
    "DeviceSession",
    "HDPublicKey",
    "InputInfo",
    "InvalidAddressError",
    "InvalidOutputSpecError",
    "LengthMismatchError",
    "MissingDestinationError",
    "NetworkParams",
    "NetworkTable",
    "OutputInfo",
    "OutputScriptType",
    "PathOutput",
    "RefTransaction",
    "RefTxInput",
    "RefTxOutput",
    "ScriptMismatchError",
    "SignRequest",
    "SignedTx",
    "SigningError",
    "Transaction",
    "TransactionInput",
    "TransactionOutput",
    "TxInfo",
    "TxInput",
    "TxOutput",
    "UnknownAddressTypeError",
    "UnknownNetworkError",
    "ValueMismatchError",
    "VerificationError",
    "account_chain_nodes",
    "decode_signed_tx",
    "derive_output",
    "derive_pubkey_hash",
    "deserialize_transaction",
    "expected_script",
    "get_joinsplit_data",
    "input_to_wire",
    "output_info",
    "resolve_network",
    "reverse_bytes",
    "sign_tx",
    "transaction_to_reference",
    "verify_signed_tx",
]
