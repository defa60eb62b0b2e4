"""
Tests for decoding beacon API JSON into SSZ values.
"""

import unittest

import fixtures

from stateproof.exceptions import SchemaError
from stateproof.schema import FORKS
from stateproof.ssz.constants import FAR_FUTURE_EPOCH
from stateproof.ssz.containers import Validator, Withdrawal
from stateproof.ssz.serialization import deserialize_bitlist, serialize_bitlist
from stateproof.ssz.types import Bitlist, Bitvector, ByteList, Bytes32, Bytes48, List, boolean, to_plain, uint64
from stateproof.ssz.utils import camel_to_snake, hex_to_bytes, normalize_hex


VALIDATOR_JSON = {
    "pubkey": "0x" + "ab" * 48,
    "withdrawalCredentials": "0x01" + "00" * 11 + "cd" * 20,
    "effectiveBalance": "32000000000",
    "slashed": False,
    "activationEligibilityEpoch": "0",
    "activationEpoch": "1",
    "exitEpoch": "18446744073709551615",
    "withdrawableEpoch": "18446744073709551615",
}


class TestHexHelpers(unittest.TestCase):

    def test_normalize_hex(self):
        self.assertEqual(normalize_hex("0x123"), "0x0123")
        self.assertEqual(normalize_hex("ABCD"), "0xabcd")
        with self.assertRaises(ValueError):
            normalize_hex("0xzz")
        with self.assertRaises(ValueError):
            normalize_hex("0x1234", expected_bytes=4)

    def test_hex_to_bytes(self):
        self.assertEqual(hex_to_bytes("0x1234"), b"\x12\x34")

    def test_camel_to_snake(self):
        self.assertEqual(camel_to_snake("withdrawalCredentials"), "withdrawal_credentials")
        self.assertEqual(camel_to_snake("activationEligibilityEpoch"), "activation_eligibility_epoch")
        self.assertEqual(camel_to_snake("state_root"), "state_root")


class TestJsonDecoding(unittest.TestCase):
    """from_json of the basic and composite descriptors."""

    def test_camel_case_validator(self):
        value = Validator.from_json(VALIDATOR_JSON)
        self.assertEqual(value["pubkey"], b"\xab" * 48)
        self.assertEqual(value["effective_balance"], 32_000_000_000)
        self.assertEqual(value["activation_epoch"], 1)
        self.assertEqual(value["withdrawable_epoch"], FAR_FUTURE_EPOCH)
        self.assertFalse(value["slashed"])

    def test_snake_case_matches_camel_case(self):
        snake = {camel_to_snake(k): v for k, v in VALIDATOR_JSON.items()}
        self.assertEqual(
            Validator.hash_tree_root(Validator.from_json(snake)),
            Validator.hash_tree_root(Validator.from_json(VALIDATOR_JSON)),
        )

    def test_to_json_round_trip(self):
        value = Validator.from_json(VALIDATOR_JSON)
        self.assertEqual(Validator.from_json(Validator.to_json(value)), value)

    def test_missing_field(self):
        broken = dict(VALIDATOR_JSON)
        del broken["exitEpoch"]
        with self.assertRaises(SchemaError) as ctx:
            Validator.from_json(broken)
        self.assertIn("exit_epoch", str(ctx.exception))

    def test_uint_values(self):
        self.assertEqual(uint64.from_json("12"), 12)
        self.assertEqual(uint64.from_json(12), 12)
        self.assertEqual(uint64.from_json("0x10"), 16)
        with self.assertRaises(SchemaError):
            uint64.from_json("twelve")
        with self.assertRaises(SchemaError):
            uint64.from_json(True)

    def test_boolean_values(self):
        self.assertTrue(boolean.from_json(True))
        self.assertTrue(boolean.from_json("true"))
        self.assertFalse(boolean.from_json("False"))
        with self.assertRaises(SchemaError):
            boolean.from_json("yes")

    def test_byte_vector_length(self):
        with self.assertRaises(SchemaError):
            Bytes32.from_json("0x" + "00" * 31)
        with self.assertRaises(SchemaError):
            Bytes48.from_json("not hex")

    def test_byte_list(self):
        kind = ByteList(32)
        self.assertEqual(kind.from_json("0x"), b"")
        self.assertEqual(kind.from_json("0x0102"), b"\x01\x02")
        with self.assertRaises(SchemaError):
            kind.from_json("0x" + "00" * 33)

    def test_bitlist(self):
        self.assertEqual(Bitlist(2048).from_json("0x0d"), [True, False, True])
        self.assertEqual(Bitlist(2048).from_json("0x01"), [])
        with self.assertRaises(SchemaError):
            Bitlist(2048).from_json("0x00")
        with self.assertRaises(SchemaError):
            Bitlist(2).from_json("0x0f")

    def test_bitlist_serialization(self):
        bits = [True, False, True, True, False, False, False, False, True]
        self.assertEqual(deserialize_bitlist(serialize_bitlist(bits)), bits)

    def test_bitvector(self):
        self.assertEqual(Bitvector(4).from_json("0x05"), [True, False, True, False])
        self.assertEqual(Bitvector(4).to_json([True, False, True, False]), "0x05")

    def test_list_limit(self):
        kind = List(Withdrawal, 2)
        item = {"index": "1", "validatorIndex": "2", "address": "0x" + "11" * 20, "amount": "3"}
        self.assertEqual(len(kind.from_json([item, item])), 2)
        with self.assertRaises(SchemaError):
            kind.from_json([item, item, item])
        with self.assertRaises(SchemaError):
            kind.from_json({"not": "a list"})

    def test_state_round_trip_keeps_root(self):
        fork = FORKS["electra"]
        state = fixtures.make_state(fork, 123, validators=[fixtures.make_validator(i) for i in range(3)])
        decoded = fork.beacon_state.from_json(fork.beacon_state.to_json(state.value))
        self.assertEqual(fork.beacon_state.hash_tree_root(decoded), state.hash_tree_root())


class TestToPlain(unittest.TestCase):

    def test_bytes_become_hex(self):
        value = Validator.from_json(VALIDATOR_JSON)
        plain = to_plain(Validator, value)
        self.assertEqual(plain["pubkey"], "0x" + "ab" * 48)
        self.assertEqual(plain["effective_balance"], 32_000_000_000)

    def test_lists(self):
        withdrawal = {"index": 1, "validator_index": 2, "address": b"\x11" * 20, "amount": 3}
        plain = to_plain(List(Withdrawal, 16), [withdrawal])
        self.assertEqual(plain, [{"index": 1, "validator_index": 2, "address": "0x" + "11" * 20, "amount": 3}])


if __name__ == '__main__':
    unittest.main()
