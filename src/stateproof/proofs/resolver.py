"""
Path Resolver

Turns a proof type and its parameters into the ordered list of hops the
composer runs. Every proof starts at the block header and descends into
the state; withdrawal proofs continue through a block root into the block
that carried the withdrawal, either via the live ``block_roots`` ring
buffer or, once the slot has rotated out of it, via the
``historical_summaries`` accumulator and the block roots of a separately
fetched period boundary state.

All parameter and range checks happen here, before any hop runs.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union

from ..exceptions import IndexOutOfRange, MissingParameter, UnknownProofType, UnsupportedSlotRange
from ..schema import ForkSchema, NetworkConfig
from ..ssz.constants import FAR_FUTURE_EPOCH
from ..ssz.gindex import concat_gindices, select_field
from ..ssz.merkle.tree import MerklePrimitive
from ..ssz.types import PathElement, SSZType, TreeValue, to_plain

logger = logging.getLogger(__name__)

# Keys of the materialized trees a hop can draw from
HEADER = "header"
STATE = "state"
BLOCK = "block"
HISTORICAL_SUMMARY = "historical_summary"
HISTORICAL_BLOCK_ROOTS = "historical_block_roots"

# Extra snapshot the historical route needs; only its block_roots are used
BOUNDARY_STATE = "boundary_state"

# Validator record: 8 fields, padded to 8 leaves
VALIDATOR_ARITY = 8
WITHDRAWABLE_EPOCH_OFFSET = 7
# pubkey and withdrawal_credentials share the leftmost node of the
# validator's second level (4 subtrees of 2 leaves)
PUBKEY_BRANCH_ARITY = 4
PUBKEY_BRANCH_OFFSET = 0

WITHDRAWALS_PATH = ("body", "execution_payload", "withdrawals")


class ProofType(str, Enum):
    """Supported proof types."""
    SLOT = "slot"
    VALIDATOR = "validator"
    VALIDATOR_PUBKEY = "validator_pubkey"
    WITHDRAWABLE_EPOCH = "withdrawable_epoch"
    WITHDRAWAL = "withdrawal"
    HISTORICAL_WITHDRAWAL = "historical_withdrawal"

    @classmethod
    def parse(cls, tag: Union[str, "ProofType"]) -> "ProofType":
        """
        Raises:
            UnknownProofType: If the tag names no supported proof type
        """
        if isinstance(tag, cls):
            return tag
        try:
            return cls(str(tag).lower())
        except ValueError:
            raise UnknownProofType(
                f"Unknown proof type {tag!r}; expected one of: {', '.join(t.value for t in cls)}"
            )


class WithdrawalRoute(str, Enum):
    RECENT = "recent"
    HISTORICAL = "historical"


VALIDATOR_PROOFS = (ProofType.VALIDATOR, ProofType.VALIDATOR_PUBKEY, ProofType.WITHDRAWABLE_EPOCH)
WITHDRAWAL_PROOFS = (ProofType.WITHDRAWAL, ProofType.HISTORICAL_WITHDRAWAL)


@dataclass(frozen=True)
class ProofParams:
    """
    Runtime parameters of a proof request.

    Attributes:
        slot: Slot of the proof state, or "head"
        validator_index: Validator to prove (validator proof types)
        withdrawal_slot: Slot of the block carrying the withdrawal
        withdrawal_number: Index into that block's withdrawals list
        network: Network name, see ``stateproof.schema.NETWORKS``
    """
    slot: Union[int, str] = "head"
    validator_index: Optional[int] = None
    withdrawal_slot: Optional[int] = None
    withdrawal_number: Optional[int] = None
    network: str = "mainnet"


@dataclass(frozen=True)
class Hop:
    """
    One Merkle path step: ``path`` inside the tree named ``source``.

    ``gindex`` overrides the path lookup when set. ``external`` marks a
    source fetched independently of the proof state.
    """
    container: SSZType
    path: Tuple[PathElement, ...]
    source: str
    gindex: Optional[int] = None
    external: bool = False

    def describe(self) -> str:
        rendered = ""
        for key in self.path:
            rendered += f"[{key}]" if isinstance(key, int) else f".{key}"
        return f"{self.source}:{self.container.name}{rendered}"


def hop_index(primitive: MerklePrimitive, hop: Hop) -> int:
    """Relative gindex of a hop: explicit if given, else from its path."""
    if hop.gindex is not None:
        return hop.gindex
    return primitive.path_to_index(hop.container, hop.path)


class PathResolver:
    """
    Table-driven resolution of proof types into hop lists.

    Example:
        >>> resolver = PathResolver()
        >>> hops = resolver.resolve("slot", ProofParams(slot=100), fork, network)
        >>> [hop.describe() for hop in hops]
        ['header:BeaconBlockHeader.state_root', 'state:BeaconState.slot']
    """

    _ROUTES = {
        ProofType.SLOT: "_slot_hops",
        ProofType.VALIDATOR: "_validator_hops",
        ProofType.VALIDATOR_PUBKEY: "_validator_pubkey_hops",
        ProofType.WITHDRAWABLE_EPOCH: "_withdrawable_epoch_hops",
        ProofType.WITHDRAWAL: "_withdrawal_hops",
        ProofType.HISTORICAL_WITHDRAWAL: "_historical_withdrawal_hops",
    }

    def resolve(
        self,
        proof_type: Union[str, ProofType],
        params: ProofParams,
        fork: ForkSchema,
        network: NetworkConfig,
        trees: Optional[Dict[str, TreeValue]] = None,
    ) -> List[Hop]:
        """
        Resolve the hop list for a proof, ordered outer to inner.

        When ``trees`` are given, indices are also checked against the
        actual lengths of the lists they address.

        Raises:
            UnknownProofType: For an unsupported proof type
            MissingParameter: If a parameter the proof type needs is unset
            IndexOutOfRange: For an index outside a list's limit or length
            UnsupportedSlotRange: For a withdrawal slot no route can reach
        """
        proof_type = ProofType.parse(proof_type)
        route = getattr(self, self._ROUTES[proof_type])
        hops = route(params, fork, network, trees or {})
        logger.debug(f"Resolved {proof_type.value}: {' -> '.join(hop.describe() for hop in hops)}")
        return hops

    # Parameter checks

    def check_params(self, proof_type: Union[str, ProofType], params: ProofParams) -> ProofType:
        """Validate the parameters a proof type needs, before anything is fetched."""
        proof_type = ProofType.parse(proof_type)
        if proof_type in VALIDATOR_PROOFS:
            index = self._required(params.validator_index, "validator_index", proof_type)
            if index < 0:
                raise IndexOutOfRange(f"Validator index must be non-negative, got {index}")
        if proof_type in WITHDRAWAL_PROOFS:
            withdrawal_slot = self._required(params.withdrawal_slot, "withdrawal_slot", proof_type)
            number = self._required(params.withdrawal_number, "withdrawal_number", proof_type)
            if withdrawal_slot < 0:
                raise UnsupportedSlotRange(f"Withdrawal slot must be non-negative, got {withdrawal_slot}")
            if number < 0:
                raise IndexOutOfRange(f"Withdrawal number must be non-negative, got {number}")
            if isinstance(params.slot, int) and withdrawal_slot >= params.slot:
                raise UnsupportedSlotRange(
                    f"Withdrawal slot {withdrawal_slot} is not before proof slot {params.slot}"
                )
        return proof_type

    @staticmethod
    def _required(value: Optional[int], name: str, proof_type: ProofType) -> int:
        if value is None:
            raise MissingParameter(f"{proof_type.value} proofs require {name}")
        return value

    @staticmethod
    def proof_slot(params: ProofParams, trees: Dict[str, TreeValue]) -> int:
        """Slot of the proof state: from the fetched state if present."""
        if STATE in trees:
            return trees[STATE].value["slot"]
        if isinstance(params.slot, int):
            return params.slot
        raise MissingParameter(f"Proof slot {params.slot!r} is only known once the state is fetched")

    # Withdrawal routing

    @staticmethod
    def select_withdrawal_route(proof_slot: int, withdrawal_slot: int, network: NetworkConfig) -> WithdrawalRoute:
        """
        Pick the route for a withdrawal slot.

        Recent iff ``proof_slot - window <= withdrawal_slot < proof_slot``;
        anything older has been overwritten in the ring buffer.

        Raises:
            UnsupportedSlotRange: If the withdrawal is not before the proof slot
        """
        if withdrawal_slot >= proof_slot:
            raise UnsupportedSlotRange(
                f"Withdrawal slot {withdrawal_slot} is not before proof slot {proof_slot}"
            )
        if proof_slot - network.ring_buffer_window <= withdrawal_slot:
            return WithdrawalRoute.RECENT
        return WithdrawalRoute.HISTORICAL

    @staticmethod
    def historical_entry_index(withdrawal_slot: int, network: NetworkConfig) -> int:
        """
        Index of the historical summary covering ``withdrawal_slot``.

        Raises:
            UnsupportedSlotRange: If the slot predates the accumulator
        """
        entry = withdrawal_slot // network.ring_buffer_window - network.historical_origin_offset
        if entry < 0:
            raise UnsupportedSlotRange(
                f"Slot {withdrawal_slot} predates the {network.name} historical summaries "
                f"(first period {network.historical_origin_offset})"
            )
        return entry

    @staticmethod
    def historical_boundary_slot(withdrawal_slot: int, network: NetworkConfig) -> int:
        """First slot of the period after ``withdrawal_slot``'s period.

        The state at that slot still holds the whole period in block_roots,
        and its block_roots root is the period's block_summary_root.
        """
        window = network.ring_buffer_window
        return (withdrawal_slot // window + 1) * window

    def withdrawal_route(self, proof_type: ProofType, params: ProofParams, proof_slot: int,
                         network: NetworkConfig) -> WithdrawalRoute:
        if proof_type == ProofType.HISTORICAL_WITHDRAWAL:
            if params.withdrawal_slot >= proof_slot:
                raise UnsupportedSlotRange(
                    f"Withdrawal slot {params.withdrawal_slot} is not before proof slot {proof_slot}"
                )
            return WithdrawalRoute.HISTORICAL
        return self.select_withdrawal_route(proof_slot, params.withdrawal_slot, network)

    def required_sources(self, proof_type: Union[str, ProofType], params: ProofParams,
                         network: NetworkConfig, proof_slot: int) -> Dict[str, int]:
        """
        Snapshots to fetch, besides the proof state, keyed by role.

        Returns:
            ``{BLOCK: slot}`` for the recent route, plus
            ``{BOUNDARY_STATE: slot}`` for the historical route

        Raises:
            UnsupportedSlotRange: If the withdrawal's period closes after
                the proof slot, so no summary of it exists yet
        """
        proof_type = self.check_params(proof_type, params)
        if proof_type not in WITHDRAWAL_PROOFS:
            return {}

        sources = {BLOCK: params.withdrawal_slot}
        if self.withdrawal_route(proof_type, params, proof_slot, network) == WithdrawalRoute.HISTORICAL:
            self.historical_entry_index(params.withdrawal_slot, network)
            boundary_slot = self.historical_boundary_slot(params.withdrawal_slot, network)
            if boundary_slot > proof_slot:
                raise UnsupportedSlotRange(
                    f"Period of slot {params.withdrawal_slot} closes at slot {boundary_slot}, "
                    f"after proof slot {proof_slot}; its historical summary does not exist yet"
                )
            sources[BOUNDARY_STATE] = boundary_slot
        return sources

    # Routes

    @staticmethod
    def _header_hop(fork: ForkSchema) -> Hop:
        return Hop(fork.beacon_block_header, ("state_root",), HEADER)

    @staticmethod
    def _state_kind(fork: ForkSchema, trees: Dict[str, TreeValue]) -> SSZType:
        return trees[STATE].kind if STATE in trees else fork.beacon_state

    def _slot_hops(self, params, fork, network, trees) -> List[Hop]:
        return [
            self._header_hop(fork),
            Hop(self._state_kind(fork, trees), ("slot",), STATE),
        ]

    def _validator_state_hop(self, params, fork, trees, field_selector: Optional[int] = None) -> Hop:
        index = self._required(params.validator_index, "validator_index", ProofType.VALIDATOR)
        if index < 0:
            raise IndexOutOfRange(f"Validator index must be non-negative, got {index}")

        state_kind = self._state_kind(fork, trees)
        path = ("validators", index)
        record_gindex, _ = state_kind.get_path_info(path)
        if STATE in trees:
            count = len(trees[STATE].value["validators"])
            if index >= count:
                raise IndexOutOfRange(f"Validator index {index} out of range (validators: {count})")

        gindex = None
        if field_selector is not None:
            gindex = concat_gindices(record_gindex, field_selector)
        return Hop(state_kind, path, STATE, gindex=gindex)

    def _validator_hops(self, params, fork, network, trees) -> List[Hop]:
        return [self._header_hop(fork), self._validator_state_hop(params, fork, trees)]

    def _validator_pubkey_hops(self, params, fork, network, trees) -> List[Hop]:
        selector = select_field(PUBKEY_BRANCH_ARITY, PUBKEY_BRANCH_OFFSET)
        return [self._header_hop(fork), self._validator_state_hop(params, fork, trees, selector)]

    def _withdrawable_epoch_hops(self, params, fork, network, trees) -> List[Hop]:
        selector = select_field(VALIDATOR_ARITY, WITHDRAWABLE_EPOCH_OFFSET)
        return [self._header_hop(fork), self._validator_state_hop(params, fork, trees, selector)]

    def _withdrawal_hops(self, params, fork, network, trees) -> List[Hop]:
        return self._routed_withdrawal_hops(ProofType.WITHDRAWAL, params, fork, network, trees)

    def _historical_withdrawal_hops(self, params, fork, network, trees) -> List[Hop]:
        return self._routed_withdrawal_hops(ProofType.HISTORICAL_WITHDRAWAL, params, fork, network, trees)

    def _routed_withdrawal_hops(self, proof_type, params, fork, network, trees) -> List[Hop]:
        self.check_params(proof_type, params)
        proof_slot = self.proof_slot(params, trees)
        route = self.withdrawal_route(proof_type, params, proof_slot, network)

        block_hop = self._block_hop(params, network, trees)
        state_kind = self._state_kind(fork, trees)
        roots_index = params.withdrawal_slot % network.ring_buffer_window

        if route == WithdrawalRoute.RECENT:
            return [
                self._header_hop(fork),
                Hop(state_kind, ("block_roots", roots_index), STATE),
                block_hop,
            ]

        entry = self.historical_entry_index(params.withdrawal_slot, network)
        state_kind.get_path_info(("historical_summaries", entry))
        if STATE in trees:
            available = len(trees[STATE].value["historical_summaries"])
            if entry >= available:
                raise UnsupportedSlotRange(
                    f"Historical summary {entry} for slot {params.withdrawal_slot} is not yet "
                    f"accumulated in the state at slot {proof_slot} ({available} entries)"
                )
        return [
            self._header_hop(fork),
            Hop(state_kind, ("historical_summaries", entry), STATE),
            Hop(fork.historical_summary, ("block_summary_root",), HISTORICAL_SUMMARY),
            Hop(fork.historical_block_roots, (roots_index,), HISTORICAL_BLOCK_ROOTS, external=True),
            block_hop,
        ]

    @staticmethod
    def _block_hop(params: ProofParams, network: NetworkConfig, trees: Dict[str, TreeValue]) -> Hop:
        if BLOCK in trees:
            block_kind = trees[BLOCK].kind
            withdrawals = trees[BLOCK].value["body"]["execution_payload"]["withdrawals"]
            if params.withdrawal_number >= len(withdrawals):
                raise IndexOutOfRange(
                    f"Withdrawal number {params.withdrawal_number} out of range "
                    f"(block {params.withdrawal_slot} has {len(withdrawals)} withdrawals)"
                )
        else:
            block_kind = network.fork_at_slot(params.withdrawal_slot).beacon_block

        path = WITHDRAWALS_PATH + (params.withdrawal_number,)
        block_kind.get_path_info(path)
        return Hop(block_kind, path, BLOCK, external=True)

    # Attested values

    def collect_leaf_values(self, proof_type: Union[str, ProofType], params: ProofParams,
                            network: NetworkConfig, trees: Dict[str, TreeValue]) -> Dict[str, Any]:
        """Structured values the proof attests, read from the materialized trees."""
        proof_type = ProofType.parse(proof_type)
        state = trees[STATE]

        if proof_type == ProofType.SLOT:
            return {"slot": state.value["slot"]}

        if proof_type in VALIDATOR_PROOFS:
            validator_kind = state.kind.field_type("validators").elem
            validator = to_plain(validator_kind, state.value["validators"][params.validator_index])
            if proof_type == ProofType.VALIDATOR:
                return {"validator_index": params.validator_index, **validator}
            if proof_type == ProofType.VALIDATOR_PUBKEY:
                return {
                    "validator_index": params.validator_index,
                    "pubkey": validator["pubkey"],
                    "withdrawal_credentials": validator["withdrawal_credentials"],
                }
            epoch = validator["withdrawable_epoch"]
            return {
                "validator_index": params.validator_index,
                "withdrawable_epoch": epoch,
                "far_future": epoch == FAR_FUTURE_EPOCH,
            }

        block = trees[BLOCK]
        withdrawal = block.value["body"]["execution_payload"]["withdrawals"][params.withdrawal_number]
        route = self.withdrawal_route(proof_type, params, state.value["slot"], network)
        values = {
            "withdrawal_slot": params.withdrawal_slot,
            "withdrawal_number": params.withdrawal_number,
            "route": route.value,
            "block_roots_index": params.withdrawal_slot % network.ring_buffer_window,
            "withdrawal": to_plain(block.kind.get_path_info(WITHDRAWALS_PATH + (0,))[1], withdrawal),
        }
        if route == WithdrawalRoute.HISTORICAL:
            values["historical_entry"] = self.historical_entry_index(params.withdrawal_slot, network)
            values["historical_slot"] = self.historical_boundary_slot(params.withdrawal_slot, network)
        return values
