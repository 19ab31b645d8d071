"""
BIP32 public key derivation.

The signer only ever needs public derivation: the wallet hands over the
account-level extended public key and the verifier derives the pubkey hash of
each path output from its external and change chain nodes.
"""

from __future__ import annotations

import hashlib
import hmac

from coincurve import PublicKey

from hwsign.address import base58check_decode, base58check_encode, hash160
from hwsign.errors import InvalidAddressError

# secp256k1 curve order
SECP256K1_N = int("FFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141", 16)

HARDENED = 0x80000000

XPUB_VERSION = 0x0488B21E
TPUB_VERSION = 0x043587CF


def parse_path(path: str) -> list[int]:
    """Parse path notation (e.g. "m/44'/0'/0'/0/0") into child indices."""
    if not path.startswith("m"):
        raise ValueError("Path must start with 'm'")

    indices = []
    for part in path.split("/")[1:]:
        if not part:
            continue

        hardened = part.endswith("'") or part.endswith("h")
        index = int(part.rstrip("'h"))
        if not 0 <= index < HARDENED:
            raise ValueError(f"Path index out of range: {part}")

        indices.append(index + HARDENED if hardened else index)

    return indices


class HDPublicKey:
    """
    Public-only BIP32 node. Supports non-hardened child derivation.
    """

    def __init__(
        self,
        public_key: PublicKey,
        chain_code: bytes,
        depth: int = 0,
        parent_fingerprint: bytes = b"\x00\x00\x00\x00",
        child_number: int = 0,
    ):
        self._public_key = public_key
        self.chain_code = chain_code
        self.depth = depth
        self.parent_fingerprint = parent_fingerprint
        self.child_number = child_number

    @property
    def public_key(self) -> PublicKey:
        return self._public_key

    @property
    def identifier(self) -> bytes:
        """HASH160 of the compressed public key (the P2PKH pubkey hash)."""
        return hash160(self.get_public_key_bytes())

    @property
    def fingerprint(self) -> bytes:
        return self.identifier[:4]

    @classmethod
    def from_xpub(cls, xpub: str) -> HDPublicKey:
        """Parse a mainnet (xpub) or testnet (tpub) extended public key."""
        try:
            raw = base58check_decode(xpub)
        except InvalidAddressError as e:
            raise ValueError(f"Invalid extended public key: {e}") from e
        if len(raw) != 78:
            raise ValueError(f"Invalid extended public key length: {len(raw)}")

        version = int.from_bytes(raw[:4], "big")
        if version not in (XPUB_VERSION, TPUB_VERSION):
            raise ValueError(f"Unsupported extended public key version: {version:#010x}")

        depth = raw[4]
        parent_fingerprint = raw[5:9]
        child_number = int.from_bytes(raw[9:13], "big")
        chain_code = raw[13:45]
        key_bytes = raw[45:78]
        if key_bytes[0] not in (0x02, 0x03):
            raise ValueError("Extended key does not hold a compressed public key")

        return cls(PublicKey(key_bytes), chain_code, depth, parent_fingerprint, child_number)

    def to_xpub(self, version: int = XPUB_VERSION) -> str:
        raw = (
            version.to_bytes(4, "big")
            + bytes([self.depth])
            + self.parent_fingerprint
            + self.child_number.to_bytes(4, "big")
            + self.chain_code
            + self.get_public_key_bytes()
        )
        return base58check_encode(raw)

    def derive_child(self, index: int) -> HDPublicKey:
        """Derive a non-hardened child node"""
        if not 0 <= index < HARDENED:
            raise ValueError(f"Cannot derive hardened or invalid index {index} from a public key")

        data = self.get_public_key_bytes() + index.to_bytes(4, "big")
        hmac_result = hmac.new(self.chain_code, data, hashlib.sha512).digest()
        key_offset = hmac_result[:32]
        child_chain = hmac_result[32:]

        if int.from_bytes(key_offset, "big") >= SECP256K1_N:
            raise ValueError("Invalid child key")

        child_key = self._public_key.add(key_offset)

        return HDPublicKey(
            child_key,
            child_chain,
            depth=self.depth + 1,
            parent_fingerprint=self.fingerprint,
            child_number=index,
        )

    def get_public_key_bytes(self, compressed: bool = True) -> bytes:
        return self._public_key.format(compressed=compressed)


def account_chain_nodes(account: HDPublicKey) -> list[HDPublicKey]:
    """External (0) and change (1) chain nodes of an account."""
    return [account.derive_child(0), account.derive_child(1)]


def derive_pubkey_hash(nodes: list[HDPublicKey], chain: int, index: int) -> bytes:
    """
    HASH160 of the public key at ``nodes[chain] / index``.

    Args:
        nodes: Account chain nodes, external chain first
        chain: Chain selector (0 external, 1 change)
        index: Address index on that chain
    """
    if not 0 <= chain < len(nodes):
        raise ValueError(f"No chain node {chain} (have {len(nodes)})")
    return nodes[chain].derive_child(index).identifier
