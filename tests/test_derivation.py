"""
Tests for output script derivation.
"""

from __future__ import annotations

import pytest

from hwsign.address import encode_address, p2pkh_script, p2sh_script
from hwsign.derivation import derive_output, expected_script, validate_path
from hwsign.errors import (
    InvalidOutputSpecError,
    MissingDestinationError,
    UnknownAddressTypeError,
)
from hwsign.messages import OutputScriptType
from hwsign.models import AddressOutput, PathOutput

H = 0x80000000


class TestValidatePath:
    def test_valid(self):
        assert validate_path((44 + H, H, H, 0, 7)) == [44 + H, H, H, 0, 7]

    @pytest.mark.parametrize(
        "path",
        [
            (),
            (0,),
            (0, "1"),
            (0, 1.0),
            (0, True),
            (0, -1),
            (0, 2**32),
            "m/0/0",
            None,
        ],
    )
    def test_malformed_paths_rejected(self, path):
        with pytest.raises(InvalidOutputSpecError):
            validate_path(path)

    def test_malformed_element_is_not_filtered(self, bitcoin, chain_nodes):
        # A path with a stray element must not silently turn into [0, 0]
        output = PathOutput(path=(0, None, 0), value=1)  # type: ignore[arg-type]
        with pytest.raises(InvalidOutputSpecError):
            derive_output(output, bitcoin, chain_nodes)


class TestPathOutputs:
    def test_script_is_p2pkh_of_derived_key(self, bitcoin, chain_nodes, account_key):
        output = PathOutput(path=(44 + H, H, H, 1, 4), value=50_000)
        derived = derive_output(output, bitcoin, chain_nodes)

        assert derived.script == p2pkh_script(account_key.derive("m/1/4").identifier)
        assert derived.wire.address_n == [44 + H, H, H, 1, 4]
        assert derived.wire.address is None
        assert derived.wire.amount == 50_000
        assert derived.wire.script_type == OutputScriptType.PAYTOADDRESS

    def test_uses_last_two_components(self, bitcoin, chain_nodes):
        short = expected_script(PathOutput(path=(0, 2), value=1), bitcoin, chain_nodes)
        full = expected_script(PathOutput(path=(44 + H, H, H, 0, 2), value=1), bitcoin, chain_nodes)
        assert short == full

    def test_hardened_address_index(self, bitcoin, chain_nodes):
        with pytest.raises(InvalidOutputSpecError):
            derive_output(PathOutput(path=(0, H), value=1), bitcoin, chain_nodes)

    def test_unknown_chain(self, bitcoin, chain_nodes):
        with pytest.raises(InvalidOutputSpecError):
            derive_output(PathOutput(path=(5, 0), value=1), bitcoin, chain_nodes)

    def test_negative_value(self, bitcoin, chain_nodes):
        with pytest.raises(InvalidOutputSpecError):
            derive_output(PathOutput(path=(0, 0), value=-1), bitcoin, chain_nodes)


class TestAddressOutputs:
    def test_p2pkh_address(self, bitcoin, chain_nodes, p2pkh_address):
        derived = derive_output(AddressOutput(p2pkh_address, 100_000), bitcoin, chain_nodes)

        assert derived.script == p2pkh_script(bytes.fromhex("11" * 20))
        assert derived.wire.address == p2pkh_address
        assert derived.wire.address_n is None
        assert derived.wire.script_type == OutputScriptType.PAYTOADDRESS

    def test_p2sh_address(self, bitcoin, chain_nodes, p2sh_address):
        derived = derive_output(AddressOutput(p2sh_address, 100_000), bitcoin, chain_nodes)

        assert derived.script == p2sh_script(bytes.fromhex("22" * 20))
        assert derived.wire.script_type == OutputScriptType.PAYTOSCRIPTHASH

    def test_foreign_network_address(self, bitcoin, chain_nodes):
        address = encode_address(0x30, b"\x01" * 20)  # litecoin P2PKH
        with pytest.raises(UnknownAddressTypeError):
            derive_output(AddressOutput(address, 1), bitcoin, chain_nodes)

    def test_empty_address(self, bitcoin, chain_nodes):
        with pytest.raises(MissingDestinationError):
            derive_output(AddressOutput("", 1), bitcoin, chain_nodes)


def test_neither_path_nor_address(bitcoin, chain_nodes):
    with pytest.raises(MissingDestinationError):
        derive_output(None, bitcoin, chain_nodes)  # type: ignore[arg-type]
