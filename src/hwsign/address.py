"""
Base58-check address codec and output script templates.
"""

from __future__ import annotations

import hashlib

from hwsign.errors import InvalidAddressError, UnknownAddressTypeError
from hwsign.messages import OutputScriptType
from hwsign.network import NetworkParams

BASE58_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
_BASE58_INDEX = {char: i for i, char in enumerate(BASE58_ALPHABET)}

HASH160_LENGTH = 20


def sha256d(data: bytes) -> bytes:
    return hashlib.sha256(hashlib.sha256(data).digest()).digest()


def hash160(data: bytes) -> bytes:
    """RIPEMD160(SHA256(data))"""
    h = hashlib.new("ripemd160")
    h.update(hashlib.sha256(data).digest())
    return h.digest()


def base58_encode(data: bytes) -> str:
    num = int.from_bytes(data, "big")

    result = ""
    while num > 0:
        num, remainder = divmod(num, 58)
        result = BASE58_ALPHABET[remainder] + result

    for byte in data:
        if byte == 0:
            result = BASE58_ALPHABET[0] + result
        else:
            break

    return result


def base58_decode(text: str) -> bytes:
    num = 0
    for char in text:
        if char not in _BASE58_INDEX:
            raise InvalidAddressError(f"Invalid base58 character {char!r}")
        num = num * 58 + _BASE58_INDEX[char]

    body = num.to_bytes((num.bit_length() + 7) // 8, "big")
    pad = len(text) - len(text.lstrip(BASE58_ALPHABET[0]))
    return b"\x00" * pad + body


def base58check_encode(payload: bytes) -> str:
    return base58_encode(payload + sha256d(payload)[:4])


def base58check_decode(text: str) -> bytes:
    """Decode base58-check text and verify its 4-byte checksum."""
    raw = base58_decode(text)
    if len(raw) < 5:
        raise InvalidAddressError(f"Base58 data too short: {text}")

    payload, checksum = raw[:-4], raw[-4:]
    if sha256d(payload)[:4] != checksum:
        raise InvalidAddressError(f"Invalid base58 checksum: {text}")
    return payload


def decode_address(address: str, prefix_length: int = 1) -> tuple[int, bytes]:
    """
    Decode a base58-check address into its version and hash.

    Args:
        address: Encoded address
        prefix_length: Number of version bytes (1, or 2 for Zcash style addresses)

    Returns:
        (version, 20-byte hash)
    """
    raw = base58check_decode(address)
    if len(raw) != prefix_length + HASH160_LENGTH:
        raise InvalidAddressError(
            f"Invalid address length: {len(raw)} bytes (expected {prefix_length + HASH160_LENGTH})"
        )
    version = int.from_bytes(raw[:prefix_length], "big")
    return version, raw[prefix_length:]


def encode_address(version: int, payload: bytes, prefix_length: int = 1) -> str:
    return base58check_encode(version.to_bytes(prefix_length, "big") + payload)


def p2pkh_script(pubkey_hash: bytes) -> bytes:
    """OP_DUP OP_HASH160 <20-byte-hash> OP_EQUALVERIFY OP_CHECKSIG"""
    return b"\x76\xa9\x14" + pubkey_hash + b"\x88\xac"


def p2sh_script(script_hash: bytes) -> bytes:
    """OP_HASH160 <20-byte-hash> OP_EQUAL"""
    return b"\xa9\x14" + script_hash + b"\x87"


def classify_version(version: int, network: NetworkParams) -> OutputScriptType:
    if version == network.pub_key_hash:
        return OutputScriptType.PAYTOADDRESS
    if version == network.script_hash:
        return OutputScriptType.PAYTOSCRIPTHASH
    raise UnknownAddressTypeError(f"Unknown address type (version {version:#x})")


def get_address_script_type(address: str, network: NetworkParams) -> OutputScriptType:
    version, _ = decode_address(address, network.prefix_length)
    return classify_version(version, network)


def address_to_script(address: str, network: NetworkParams) -> tuple[OutputScriptType, bytes]:
    """
    Build the output script paying to an address.

    Returns:
        (script type, scriptPubKey bytes)
    """
    version, payload = decode_address(address, network.prefix_length)
    script_type = classify_version(version, network)
    if script_type == OutputScriptType.PAYTOADDRESS:
        return script_type, p2pkh_script(payload)
    return script_type, p2sh_script(payload)
