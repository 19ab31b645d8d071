"""
Tests for request models.
"""

import pytest

from hwsign.errors import InvalidOutputSpecError, MissingDestinationError
from hwsign.models import AddressOutput, InputInfo, PathOutput, TxInfo, output_info


class TestOutputInfo:
    def test_address_output(self):
        assert output_info(100, address="1abc") == AddressOutput(address="1abc", value=100)

    def test_path_output(self):
        assert output_info(5, path=[0, 1]) == PathOutput(path=(0, 1), value=5)

    def test_path_string(self):
        out = output_info(5, path="m/44'/0'/0'/1/2")
        assert isinstance(out, PathOutput)
        assert out.path == (0x8000002C, 0x80000000, 0x80000000, 1, 2)

    def test_neither(self):
        with pytest.raises(MissingDestinationError):
            output_info(100)

    def test_both(self):
        with pytest.raises(InvalidOutputSpecError):
            output_info(100, path=[0, 0], address="1abc")

    @pytest.mark.parametrize("value", [-1, 1.5, "100", True, None])
    def test_bad_value(self, value):
        with pytest.raises(InvalidOutputSpecError):
            output_info(value, address="1abc")

    def test_path_not_a_sequence(self):
        with pytest.raises(InvalidOutputSpecError):
            output_info(1, path=7)


class TestTxInfoFromDict:
    def test_load(self, p2pkh_address):
        info = TxInfo.from_dict(
            {
                "inputs": [{"prev_hash": "ab" * 32, "prev_index": 2, "path": [0, 5]}],
                "outputs": [
                    {"address": p2pkh_address, "value": 100_000},
                    {"path": [1, 0], "value": 50_000},
                ],
            }
        )

        assert info.inputs == [InputInfo(prev_hash=b"\xab" * 32, prev_index=2, path=(0, 5))]
        assert info.outputs == [
            AddressOutput(address=p2pkh_address, value=100_000),
            PathOutput(path=(1, 0), value=50_000),
        ]

    def test_bad_input_hash(self):
        with pytest.raises(ValueError):
            TxInfo.from_dict({"inputs": [{"prev_hash": "xyz"}], "outputs": []})

    def test_output_without_destination(self):
        with pytest.raises(MissingDestinationError):
            TxInfo.from_dict({"inputs": [], "outputs": [{"value": 1}]})
