"""Deneb fork layouts: blob gas accounting and KZG commitments."""

from ..constants import MAX_BLOB_COMMITMENTS_PER_BLOCK
from ..types import Bytes48, List, uint64
from . import capella

_BLOB_GAS = [
    ("blob_gas_used", uint64),
    ("excess_blob_gas", uint64),
]

ExecutionPayload = capella.ExecutionPayload.extend("ExecutionPayload", _BLOB_GAS)
ExecutionPayloadHeader = capella.ExecutionPayloadHeader.extend("ExecutionPayloadHeader", _BLOB_GAS)

BeaconBlockBody = capella.BeaconBlockBody.replace(
    "BeaconBlockBody", execution_payload=ExecutionPayload
).extend("BeaconBlockBody", [
    ("blob_kzg_commitments", List(Bytes48, MAX_BLOB_COMMITMENTS_PER_BLOCK)),
])

BeaconBlock = capella.beacon_block(BeaconBlockBody)
SignedBeaconBlock = capella.signed_beacon_block(BeaconBlock)

BeaconState = capella.BeaconState.replace(
    "BeaconState", latest_execution_payload_header=ExecutionPayloadHeader
)
