"""
Tests for proof type resolution, withdrawal routing and the network/fork
catalogs.
"""

import unittest

import fixtures

from stateproof.exceptions import (
    IndexOutOfRange,
    MissingParameter,
    UnknownNetwork,
    UnknownProofType,
    UnsupportedFork,
    UnsupportedSlotRange,
)
from stateproof.proofs.resolver import (
    BLOCK,
    BOUNDARY_STATE,
    STATE,
    PathResolver,
    ProofParams,
    ProofType,
    WithdrawalRoute,
    hop_index,
)
from stateproof.schema import FORKS, fork_of, get_fork, get_network
from stateproof.ssz.gindex import concat_gindices, concat_gindices_list
from stateproof.ssz.merkle.tree import SSZMerkleTree
from stateproof.ssz.types import TreeValue


class TestCatalogs(unittest.TestCase):
    """Fork and network lookups."""

    def test_get_fork(self):
        self.assertIs(get_fork("Electra"), FORKS["electra"])
        with self.assertRaises(UnsupportedFork):
            get_fork("phase0")
        with self.assertRaises(UnsupportedFork):
            get_fork(None)

    def test_fork_of(self):
        for fork in FORKS.values():
            self.assertIs(fork_of(fixtures.make_state(fork, 1)), fork)
            self.assertIs(fork_of(fixtures.make_block(fork, 1)), fork)
        self.assertIsNone(fork_of(TreeValue(FORKS["electra"].beacon_block_header, {})))

    def test_fork_of_shared_layout(self):
        # Fulu reuses the Electra block layout
        self.assertIs(FORKS["fulu"].beacon_block, FORKS["electra"].beacon_block)
        block = fixtures.make_block(FORKS["electra"], 99_000)
        self.assertEqual(fork_of(block).name, "electra")

    def test_mainnet_schedule(self):
        mainnet = get_network("mainnet")
        self.assertEqual(mainnet.fork_at_slot(194048 * 32).name, "capella")
        self.assertEqual(mainnet.fork_at_slot(269568 * 32 - 1).name, "capella")
        self.assertEqual(mainnet.fork_at_slot(9_000_000).name, "deneb")
        self.assertEqual(mainnet.fork_at_slot(364032 * 32).name, "electra")
        self.assertEqual(mainnet.fork_at_slot(411392 * 32).name, "fulu")
        with self.assertRaises(UnsupportedFork):
            mainnet.fork_at_slot(100)

    def test_hoodi_schedule(self):
        hoodi = get_network("HOODI")
        self.assertEqual(hoodi.historical_origin_offset, 0)
        self.assertEqual(hoodi.fork_at_slot(0).name, "deneb")
        self.assertEqual(hoodi.fork_at_slot(2048 * 32).name, "electra")

    def test_unknown_network(self):
        with self.assertRaises(UnknownNetwork):
            get_network("sepolia")


class TestProofTypes(unittest.TestCase):

    def test_parse(self):
        self.assertIs(ProofType.parse("withdrawable_epoch"), ProofType.WITHDRAWABLE_EPOCH)
        self.assertIs(ProofType.parse("SLOT"), ProofType.SLOT)
        self.assertIs(ProofType.parse(ProofType.VALIDATOR), ProofType.VALIDATOR)

    def test_unknown(self):
        with self.assertRaises(UnknownProofType):
            ProofType.parse("balance")
        with self.assertRaises(UnknownProofType):
            PathResolver().resolve("balance", ProofParams(slot=1), FORKS["electra"], get_network("mainnet"))


class TestParameterChecks(unittest.TestCase):

    def setUp(self):
        self.resolver = PathResolver()

    def test_missing_validator_index(self):
        for proof_type in ("validator", "validator_pubkey", "withdrawable_epoch"):
            with self.assertRaises(MissingParameter):
                self.resolver.check_params(proof_type, ProofParams(slot=1))

    def test_missing_withdrawal_parameters(self):
        with self.assertRaises(MissingParameter):
            self.resolver.check_params("withdrawal", ProofParams(slot=10, withdrawal_slot=5))
        with self.assertRaises(MissingParameter):
            self.resolver.check_params("historical_withdrawal", ProofParams(slot=10, withdrawal_number=0))

    def test_negative_indices(self):
        with self.assertRaises(IndexOutOfRange):
            self.resolver.check_params("validator", ProofParams(slot=1, validator_index=-1))
        with self.assertRaises(IndexOutOfRange):
            self.resolver.check_params("withdrawal", ProofParams(slot=10, withdrawal_slot=5, withdrawal_number=-1))
        with self.assertRaises(UnsupportedSlotRange):
            self.resolver.check_params("withdrawal", ProofParams(slot=10, withdrawal_slot=-5, withdrawal_number=0))

    def test_withdrawal_not_before_proof_slot(self):
        for withdrawal_slot in (10, 11):
            with self.assertRaises(UnsupportedSlotRange):
                self.resolver.check_params(
                    "withdrawal", ProofParams(slot=10, withdrawal_slot=withdrawal_slot, withdrawal_number=0)
                )

    def test_head_slot_defers_ordering_check(self):
        params = ProofParams(slot="head", withdrawal_slot=10**9, withdrawal_number=0)
        self.assertIs(self.resolver.check_params("withdrawal", params), ProofType.WITHDRAWAL)
        with self.assertRaises(MissingParameter):
            self.resolver.proof_slot(params, {})


class TestWithdrawalRouting(unittest.TestCase):
    """Route selection and historical index arithmetic."""

    def setUp(self):
        self.resolver = PathResolver()
        self.mainnet = get_network("mainnet")
        self.hoodi = get_network("hoodi")

    def test_window_edges(self):
        proof_slot = 10_000_000
        route = self.resolver.select_withdrawal_route
        self.assertEqual(route(proof_slot, proof_slot - 1, self.mainnet), WithdrawalRoute.RECENT)
        self.assertEqual(route(proof_slot, proof_slot - 8192, self.mainnet), WithdrawalRoute.RECENT)
        self.assertEqual(route(proof_slot, proof_slot - 8193, self.mainnet), WithdrawalRoute.HISTORICAL)
        with self.assertRaises(UnsupportedSlotRange):
            route(proof_slot, proof_slot, self.mainnet)

    def test_historical_entry_index(self):
        entry = self.resolver.historical_entry_index
        self.assertEqual(entry(758 * 8192, self.mainnet), 0)
        self.assertEqual(entry(9_000_000, self.mainnet), 340)
        self.assertEqual(entry(8191, self.hoodi), 0)
        self.assertEqual(entry(8192, self.hoodi), 1)
        with self.assertRaises(UnsupportedSlotRange):
            entry(758 * 8192 - 1, self.mainnet)

    def test_boundary_slot(self):
        boundary = self.resolver.historical_boundary_slot
        self.assertEqual(boundary(9_000_000, self.mainnet), 9_003_008)
        self.assertEqual(boundary(5 * 8192, self.mainnet), 6 * 8192)
        self.assertEqual(boundary(5 * 8192 + 8191, self.mainnet), 6 * 8192)

    def test_required_sources(self):
        sources = self.resolver.required_sources
        self.assertEqual(sources("slot", ProofParams(slot=100), self.mainnet, 100), {})
        self.assertEqual(
            sources("validator", ProofParams(slot=100, validator_index=1), self.mainnet, 100), {}
        )

        recent = ProofParams(slot=10_000_000, withdrawal_slot=9_995_000, withdrawal_number=0)
        self.assertEqual(sources("withdrawal", recent, self.mainnet, 10_000_000), {BLOCK: 9_995_000})

        old = ProofParams(slot=10_000_000, withdrawal_slot=9_000_000, withdrawal_number=0)
        expected = {BLOCK: 9_000_000, BOUNDARY_STATE: 9_003_008}
        self.assertEqual(sources("withdrawal", old, self.mainnet, 10_000_000), expected)
        self.assertEqual(sources("historical_withdrawal", old, self.mainnet, 10_000_000), expected)

    def test_historical_forced_inside_window(self):
        # Inside the ring buffer window, but the period has already closed
        params = ProofParams(slot=10_002_500, withdrawal_slot=9_995_000, withdrawal_number=0)
        sources = self.resolver.required_sources("historical_withdrawal", params, self.mainnet, 10_002_500)
        self.assertEqual(sources, {BLOCK: 9_995_000, BOUNDARY_STATE: 10_002_432})
        sources = self.resolver.required_sources("withdrawal", params, self.mainnet, 10_002_500)
        self.assertEqual(sources, {BLOCK: 9_995_000})

    def test_historical_period_still_open(self):
        params = ProofParams(slot=10_000_000, withdrawal_slot=9_995_000, withdrawal_number=0)
        with self.assertRaises(UnsupportedSlotRange):
            self.resolver.required_sources("historical_withdrawal", params, self.mainnet, 10_000_000)

    def test_slot_before_accumulator(self):
        params = ProofParams(slot=10_000_000, withdrawal_slot=6_000_000, withdrawal_number=0)
        with self.assertRaises(UnsupportedSlotRange):
            self.resolver.required_sources("withdrawal", params, self.mainnet, 10_000_000)


class TestHopShapes(unittest.TestCase):
    """Hop lists produced for each proof type."""

    def setUp(self):
        self.resolver = PathResolver()
        self.primitive = SSZMerkleTree()
        self.hoodi = get_network("hoodi")
        self.electra = FORKS["electra"]

    def indices(self, hops):
        return [hop_index(self.primitive, hop) for hop in hops]

    def test_slot(self):
        hops = self.resolver.resolve("slot", ProofParams(slot=100), self.electra, self.hoodi)
        self.assertEqual(
            [hop.describe() for hop in hops],
            ["header:BeaconBlockHeader.state_root", "state:BeaconState.slot"],
        )
        self.assertEqual(self.indices(hops), [11, 66])

    def test_validator_family(self):
        params = ProofParams(slot=100, validator_index=9)
        record = 150 * 2**40 + 9
        expected = {
            "validator": record,
            "validator_pubkey": concat_gindices(record, 4),
            "withdrawable_epoch": concat_gindices(record, 15),
        }
        for proof_type, gindex in expected.items():
            hops = self.resolver.resolve(proof_type, params, self.electra, self.hoodi)
            self.assertEqual(self.indices(hops), [11, gindex], proof_type)
            self.assertEqual(hops[1].describe(), "state:BeaconState.validators[9]")

    def test_validator_bounds(self):
        with self.assertRaises(IndexOutOfRange):
            self.resolver.resolve("validator", ProofParams(slot=100, validator_index=2**40),
                                  self.electra, self.hoodi)

        state = fixtures.make_state(self.electra, 100, validators=[fixtures.make_validator(i) for i in range(2)])
        with self.assertRaises(IndexOutOfRange):
            self.resolver.resolve("withdrawable_epoch", ProofParams(slot=100, validator_index=2),
                                  self.electra, self.hoodi, {STATE: state})

    def test_recent_withdrawal(self):
        params = ProofParams(slot=100_000, withdrawal_slot=99_000, withdrawal_number=3, network="hoodi")
        hops = self.resolver.resolve("withdrawal", params, self.electra, self.hoodi)
        self.assertEqual(len(hops), 3)
        self.assertEqual(hops[1].describe(), "state:BeaconState.block_roots[696]")
        self.assertEqual(
            self.indices(hops),
            [11, 69 * 8192 + 696, concat_gindices(201, 92 * 16 + 3)],
        )
        self.assertEqual([hop.external for hop in hops], [False, False, True])

    def test_historical_withdrawal(self):
        deneb = FORKS["deneb"]
        mainnet = get_network("mainnet")
        params = ProofParams(slot=10_000_000, withdrawal_slot=9_000_000, withdrawal_number=1)
        hops = self.resolver.resolve("withdrawal", params, deneb, mainnet)
        self.assertEqual(
            [hop.describe() for hop in hops],
            [
                "header:BeaconBlockHeader.state_root",
                "state:BeaconState.historical_summaries[340]",
                "historical_summary:HistoricalSummary.block_summary_root",
                "historical_block_roots:Vector[ByteVector(32), 8192][5184]",
                "block:BeaconBlock.body.execution_payload.withdrawals[1]",
            ],
        )
        self.assertEqual(
            self.indices(hops),
            [11, 59 * 2**25 + 340, 2, 8192 + 5184, concat_gindices(201, 92 * 16 + 1)],
        )
        self.assertEqual([hop.external for hop in hops], [False, False, False, True, True])

    def test_withdrawal_number_bounds(self):
        params = ProofParams(slot=100_000, withdrawal_slot=99_000, withdrawal_number=16)
        with self.assertRaises(IndexOutOfRange):
            self.resolver.resolve("withdrawal", params, self.electra, self.hoodi)

        block = fixtures.make_block(self.electra, 99_000, [fixtures.make_withdrawal(i) for i in range(3)])
        params = ProofParams(slot=100_000, withdrawal_slot=99_000, withdrawal_number=3)
        with self.assertRaises(IndexOutOfRange):
            self.resolver.resolve("withdrawal", params, self.electra, self.hoodi, {BLOCK: block})

    def test_summary_not_yet_accumulated(self):
        deneb = FORKS["deneb"]
        mainnet = get_network("mainnet")
        summaries = [{"block_summary_root": b"\x01" * 32, "state_summary_root": b"\x02" * 32}] * 340
        state = fixtures.make_state(deneb, 10_000_000, historical_summaries=summaries)
        params = ProofParams(slot=10_000_000, withdrawal_slot=9_000_000, withdrawal_number=0)
        with self.assertRaises(UnsupportedSlotRange):
            self.resolver.resolve("withdrawal", params, deneb, mainnet, {STATE: state})

    def test_combined_index_is_fold_of_hops(self):
        params = ProofParams(slot=100_000, withdrawal_slot=99_000, withdrawal_number=0)
        hops = self.resolver.resolve("withdrawal", params, self.electra, self.hoodi)
        path = ("body", "execution_payload", "withdrawals", 0)
        expected = concat_gindices(
            concat_gindices(11, 69 * 8192 + 696), self.electra.beacon_block.get_path_info(path)[0]
        )
        self.assertEqual(concat_gindices_list(self.indices(hops)), expected)


if __name__ == '__main__':
    unittest.main()
