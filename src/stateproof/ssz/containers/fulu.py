"""Fulu fork layouts: the state carries the proposer lookahead."""

from ..constants import MIN_SEED_LOOKAHEAD, SLOTS_PER_EPOCH
from ..types import Vector, uint64
from . import electra

ExecutionPayload = electra.ExecutionPayload
ExecutionPayloadHeader = electra.ExecutionPayloadHeader
BeaconBlockBody = electra.BeaconBlockBody
BeaconBlock = electra.BeaconBlock
SignedBeaconBlock = electra.SignedBeaconBlock

BeaconState = electra.BeaconState.extend("BeaconState", [
    ("proposer_lookahead", Vector(uint64, (MIN_SEED_LOOKAHEAD + 1) * SLOTS_PER_EPOCH)),
])
