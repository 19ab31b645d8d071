"""
Pytest configuration and fixtures for hwsign tests.
"""

from __future__ import annotations

import pytest

from hwsign.address import encode_address
from hwsign.bip32 import HDPublicKey, account_chain_nodes
from hwsign.codec import Transaction, TxInput, TxOutput
from hwsign.network import DEFAULT_NETWORKS, NetworkParams
from tests.keys import HDKey, mnemonic_to_seed


@pytest.fixture
def test_mnemonic() -> str:
    """Test mnemonic (BIP39 test vector)"""
    return (
        "abandon abandon abandon abandon abandon abandon "
        "abandon abandon abandon abandon abandon about"
    )


@pytest.fixture
def master_key(test_mnemonic: str) -> HDKey:
    return HDKey.from_seed(mnemonic_to_seed(test_mnemonic))


@pytest.fixture
def account_key(master_key: HDKey) -> HDKey:
    """BIP44 account 0 on Bitcoin mainnet."""
    return master_key.derive("m/44'/0'/0'")


@pytest.fixture
def account_xpub(account_key: HDKey) -> str:
    return account_key.neuter().to_xpub()


@pytest.fixture
def chain_nodes(account_key: HDKey) -> list[HDPublicKey]:
    return account_chain_nodes(account_key.neuter())


@pytest.fixture
def bitcoin() -> NetworkParams:
    params = DEFAULT_NETWORKS.get("bitcoin")
    assert params is not None
    return params


@pytest.fixture
def p2pkh_address(bitcoin: NetworkParams) -> str:
    return encode_address(bitcoin.pub_key_hash, bytes.fromhex("11" * 20))


@pytest.fixture
def p2sh_address(bitcoin: NetworkParams) -> str:
    return encode_address(bitcoin.script_hash, bytes.fromhex("22" * 20))


@pytest.fixture
def funding_tx() -> Transaction:
    """A confirmed legacy transaction with two outputs."""
    return Transaction(
        version=1,
        inputs=[
            TxInput(
                prev_hash=bytes(range(32)),
                prev_index=3,
                script=bytes.fromhex("4830450221") + b"\x01" * 20,
                sequence=0xFFFFFFFE,
            )
        ],
        outputs=[
            TxOutput(value=200_000, script=bytes.fromhex("76a914" + "33" * 20 + "88ac")),
            TxOutput(value=12_345, script=bytes.fromhex("a914" + "44" * 20 + "87")),
        ],
        locktime=500_000,
    )
