"""
SSZ Type Descriptors

Each descriptor knows how one SSZ type is laid out as a Merkle tree: the
leaf chunks its value produces, the chunk capacity the tree is padded to,
whether a length is mixed into the root, how to reach child values, and how
a path step (field name or element index) maps to a relative generalized
index. Values themselves are plain Python data decoded from beacon API JSON:

    uintN      -> int
    boolean    -> bool
    ByteVector -> bytes
    ByteList   -> bytes
    Vector     -> list
    List       -> list
    Bitvector  -> list of bool
    Bitlist    -> list of bool
    Container  -> dict keyed by snake_case field name
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Dict, List as PyList, Optional, Sequence, Tuple, Union

from .constants import BITS_PER_CHUNK, BYTES_PER_CHUNK
from .gindex import concat_gindices
from .merkle.core import merkleize, mix_in_length, pack_bytes, tree_depth
from .serialization import (
    deserialize_bitlist,
    pack_bits,
    serialize_bitlist,
    serialize_bool,
    serialize_uint,
    unpack_bits,
)
from .utils import bytes_to_hex, camel_to_snake, hex_to_bytes
from ..exceptions import IndexOutOfRange, SchemaError

PathElement = Union[str, int]
RootFn = Callable[["SSZType", Any], bytes]

LENGTH_KEY = "__len__"


class SSZType(ABC):
    """
    Abstract base class for SSZ type descriptors.

    Subclasses describe the chunk layout; merkleization itself is shared.
    """

    name: str = "SSZType"
    is_basic: bool = False
    has_length_mixin: bool = False

    @abstractmethod
    def default(self) -> Any:
        """Zero value of the type."""

    @abstractmethod
    def from_json(self, obj: Any) -> Any:
        """Decode a beacon API JSON value."""

    @abstractmethod
    def to_json(self, value: Any) -> Any:
        """Encode a value the way the beacon API does."""

    @abstractmethod
    def chunks(self, value: Any, root_of: RootFn) -> PyList[bytes]:
        """
        Leaf chunks of the value's tree (only the real ones, no padding).

        ``root_of`` computes the root of a composite element so callers can
        plug in memoization.
        """

    @abstractmethod
    def limit_chunks(self) -> int:
        """Chunk capacity the tree is padded to."""

    def tree_depth(self) -> int:
        """Depth of the data tree, not counting a length mix-in level."""
        return tree_depth(self.limit_chunks())

    def length(self, value: Any) -> int:
        """Length mixed into the root (lists and bitlists only)."""
        return len(value)

    def child(self, value: Any, chunk_index: int) -> Tuple["SSZType", Any]:
        """Type and value whose root is leaf ``chunk_index``."""
        raise SchemaError(f"{self.name} has no composite children to descend into")

    def path_step(self, key: PathElement) -> Tuple[int, "SSZType"]:
        """Relative gindex and type reached by one path element."""
        raise SchemaError(f"Cannot resolve path element {key!r} inside {self.name}")

    def hash_tree_root(self, value: Any, root_of: Optional[RootFn] = None) -> bytes:
        """
        Calculate the SSZ hash tree root of ``value``.

        Args:
            value: The value to merkleize
            root_of: Optional root function used for composite elements

        Returns:
            32-byte merkle root
        """
        if root_of is None:
            root_of = _plain_root
        root = merkleize(self.chunks(value, root_of), self.limit_chunks())
        if self.has_length_mixin:
            root = mix_in_length(root, self.length(value))
        return root

    def get_path_info(self, path: Sequence[PathElement]) -> Tuple[int, "SSZType"]:
        """
        Resolve a path of field names / indices to (gindex, type).

        Examples:
            >>> BeaconBlockHeader.get_path_info(["state_root"])
            (11, ByteVector(32))
        """
        gindex, typ = 1, self
        for key in path:
            step, typ = typ.path_step(key)
            gindex = concat_gindices(gindex, step)
        return gindex, typ

    def __repr__(self) -> str:
        return self.name


def _plain_root(typ: SSZType, value: Any) -> bytes:
    return typ.hash_tree_root(value)


def _is_index(key: PathElement) -> bool:
    return isinstance(key, int) and not isinstance(key, bool)


class Uint(SSZType):
    """Unsigned integer of 8..256 bits."""

    is_basic = True

    def __init__(self, bits: int):
        self.bits = bits
        self.size = bits // 8
        self.name = f"uint{bits}"

    def default(self) -> int:
        return 0

    def from_json(self, obj: Any) -> int:
        if isinstance(obj, bool):
            raise SchemaError(f"Expected {self.name}, got boolean")
        try:
            return int(obj, 0) if isinstance(obj, str) and obj.startswith("0x") else int(obj)
        except (TypeError, ValueError) as e:
            raise SchemaError(f"Invalid {self.name} value {obj!r}: {e}")

    def to_json(self, value: int) -> str:
        return str(value)

    def serialize(self, value: int) -> bytes:
        return serialize_uint(value, self.size)

    def chunks(self, value: int, root_of: RootFn) -> PyList[bytes]:
        return pack_bytes(self.serialize(value))

    def limit_chunks(self) -> int:
        return 1


class Boolean(SSZType):
    """SSZ boolean."""

    is_basic = True
    size = 1
    name = "boolean"

    def default(self) -> bool:
        return False

    def from_json(self, obj: Any) -> bool:
        if isinstance(obj, str):
            if obj.lower() not in ("true", "false"):
                raise SchemaError(f"Invalid boolean value {obj!r}")
            return obj.lower() == "true"
        return bool(obj)

    def to_json(self, value: bool) -> bool:
        return value

    def serialize(self, value: bool) -> bytes:
        return serialize_bool(value)

    def chunks(self, value: bool, root_of: RootFn) -> PyList[bytes]:
        return pack_bytes(self.serialize(value))

    def limit_chunks(self) -> int:
        return 1


class ByteVector(SSZType):
    """Fixed-length byte string (Bytes4, Bytes20, Root, BLSPubkey, ...)."""

    def __init__(self, length: int):
        self.length_bytes = length
        self.name = f"ByteVector({length})"

    def default(self) -> bytes:
        return b"\x00" * self.length_bytes

    def from_json(self, obj: Any) -> bytes:
        try:
            return hex_to_bytes(obj, self.length_bytes)
        except (AttributeError, ValueError) as e:
            raise SchemaError(f"Invalid {self.name} value {obj!r}: {e}")

    def to_json(self, value: bytes) -> str:
        return bytes_to_hex(value)

    def chunks(self, value: bytes, root_of: RootFn) -> PyList[bytes]:
        if len(value) != self.length_bytes:
            raise SchemaError(f"{self.name} expects {self.length_bytes} bytes, got {len(value)}")
        return pack_bytes(bytes(value))

    def limit_chunks(self) -> int:
        return (self.length_bytes + BYTES_PER_CHUNK - 1) // BYTES_PER_CHUNK


class ByteList(SSZType):
    """Variable-length byte string with a maximum length."""

    has_length_mixin = True

    def __init__(self, limit: int):
        self.limit = limit
        self.name = f"ByteList({limit})"

    def default(self) -> bytes:
        return b""

    def from_json(self, obj: Any) -> bytes:
        try:
            data = hex_to_bytes(obj) if obj not in ("0x", "") else b""
        except (AttributeError, ValueError) as e:
            raise SchemaError(f"Invalid {self.name} value {obj!r}: {e}")
        if len(data) > self.limit:
            raise SchemaError(f"{self.name} value of {len(data)} bytes exceeds limit")
        return data

    def to_json(self, value: bytes) -> str:
        return bytes_to_hex(value)

    def chunks(self, value: bytes, root_of: RootFn) -> PyList[bytes]:
        return pack_bytes(bytes(value)) if value else []

    def limit_chunks(self) -> int:
        return (self.limit + BYTES_PER_CHUNK - 1) // BYTES_PER_CHUNK


class _Sequence(SSZType):
    """Shared layout of Vector and List."""

    def __init__(self, elem: SSZType, capacity: int):
        self.elem = elem
        self.capacity = capacity

    def _per_chunk(self) -> int:
        return BYTES_PER_CHUNK // self.elem.size

    def from_json(self, obj: Any) -> PyList[Any]:
        if not isinstance(obj, list):
            raise SchemaError(f"{self.name} expects a JSON array, got {type(obj).__name__}")
        return [self.elem.from_json(item) for item in obj]

    def to_json(self, value: PyList[Any]) -> PyList[Any]:
        return [self.elem.to_json(item) for item in value]

    def chunks(self, value: PyList[Any], root_of: RootFn) -> PyList[bytes]:
        if self.elem.is_basic:
            if not value:
                return []
            return pack_bytes(b"".join(self.elem.serialize(v) for v in value))
        return [root_of(self.elem, v) for v in value]

    def limit_chunks(self) -> int:
        if self.elem.is_basic:
            return (self.capacity * self.elem.size + BYTES_PER_CHUNK - 1) // BYTES_PER_CHUNK
        return self.capacity

    def child(self, value: PyList[Any], chunk_index: int) -> Tuple[SSZType, Any]:
        if self.elem.is_basic:
            raise SchemaError(f"{self.name} packs basic elements; cannot descend into a chunk")
        if chunk_index >= len(value):
            raise IndexOutOfRange(
                f"Index {chunk_index} is beyond the {len(value)} elements of {self.name}"
            )
        return self.elem, value[chunk_index]

    def _element_step(self, key: PathElement) -> Tuple[int, SSZType]:
        if not _is_index(key):
            raise SchemaError(f"{self.name} expects an integer index, got {key!r}")
        if key < 0 or key >= self.capacity:
            raise IndexOutOfRange(f"Index {key} out of range for {self.name}")
        position = key // self._per_chunk() if self.elem.is_basic else key
        return (1 << self.tree_depth()) | position, self.elem


class Vector(_Sequence):
    """Fixed-length sequence of a single element type."""

    def __init__(self, elem: SSZType, length: int):
        super().__init__(elem, length)
        self.name = f"Vector[{elem.name}, {length}]"

    def default(self) -> PyList[Any]:
        return [self.elem.default() for _ in range(self.capacity)]

    def chunks(self, value: PyList[Any], root_of: RootFn) -> PyList[bytes]:
        if len(value) != self.capacity:
            raise SchemaError(f"{self.name} expects {self.capacity} elements, got {len(value)}")
        return super().chunks(value, root_of)

    def path_step(self, key: PathElement) -> Tuple[int, SSZType]:
        return self._element_step(key)


class List(_Sequence):
    """Variable-length sequence with a maximum length; root mixes in the length."""

    has_length_mixin = True

    def __init__(self, elem: SSZType, limit: int):
        super().__init__(elem, limit)
        self.name = f"List[{elem.name}, {limit}]"

    def default(self) -> PyList[Any]:
        return []

    def from_json(self, obj: Any) -> PyList[Any]:
        value = super().from_json(obj)
        if len(value) > self.capacity:
            raise SchemaError(f"{self.name} holds {len(value)} elements, above its limit")
        return value

    def path_step(self, key: PathElement) -> Tuple[int, SSZType]:
        if key == LENGTH_KEY:
            return 3, UINT256
        step, elem = self._element_step(key)
        # Elements hang under the left (data) child of the length mix-in node.
        return concat_gindices(2, step), elem


class Bitvector(SSZType):
    """Fixed-length bitfield."""

    def __init__(self, length: int):
        self.length_bits = length
        self.name = f"Bitvector[{length}]"

    def default(self) -> PyList[bool]:
        return [False] * self.length_bits

    def from_json(self, obj: Any) -> PyList[bool]:
        try:
            return unpack_bits(hex_to_bytes(obj), self.length_bits)
        except (AttributeError, ValueError) as e:
            raise SchemaError(f"Invalid {self.name} value {obj!r}: {e}")

    def to_json(self, value: PyList[bool]) -> str:
        return bytes_to_hex(pack_bits(value))

    def chunks(self, value: PyList[bool], root_of: RootFn) -> PyList[bytes]:
        if len(value) != self.length_bits:
            raise SchemaError(f"{self.name} expects {self.length_bits} bits, got {len(value)}")
        return pack_bytes(pack_bits(value))

    def limit_chunks(self) -> int:
        return (self.length_bits + BITS_PER_CHUNK - 1) // BITS_PER_CHUNK


class Bitlist(SSZType):
    """Variable-length bitfield; root mixes in the bit length."""

    has_length_mixin = True

    def __init__(self, limit: int):
        self.limit = limit
        self.name = f"Bitlist[{limit}]"

    def default(self) -> PyList[bool]:
        return []

    def from_json(self, obj: Any) -> PyList[bool]:
        try:
            bits = deserialize_bitlist(hex_to_bytes(obj))
        except (AttributeError, ValueError) as e:
            raise SchemaError(f"Invalid {self.name} value {obj!r}: {e}")
        if len(bits) > self.limit:
            raise SchemaError(f"{self.name} holds {len(bits)} bits, above its limit")
        return bits

    def to_json(self, value: PyList[bool]) -> str:
        return bytes_to_hex(serialize_bitlist(value))

    def chunks(self, value: PyList[bool], root_of: RootFn) -> PyList[bytes]:
        return pack_bytes(pack_bits(value)) if value else []

    def limit_chunks(self) -> int:
        return (self.limit + BITS_PER_CHUNK - 1) // BITS_PER_CHUNK


class Container(SSZType):
    """
    Ordered set of named, typed fields.

    Args:
        name: Container name as used by the consensus specs
        fields: List of (field_name, field_type) tuples, in schema order
    """

    def __init__(self, name: str, fields: Sequence[Tuple[str, SSZType]]):
        self.name = name
        self.fields = list(fields)
        self._positions = {field_name: i for i, (field_name, _) in enumerate(self.fields)}

    def field_index(self, field_name: str) -> int:
        try:
            return self._positions[field_name]
        except KeyError:
            raise SchemaError(f"{self.name} has no field {field_name!r}")

    def field_type(self, field_name: str) -> SSZType:
        return self.fields[self.field_index(field_name)][1]

    def extend(self, name: str, fields: Sequence[Tuple[str, SSZType]]) -> "Container":
        """New container with ``fields`` appended (fork upgrades only ever append)."""
        return Container(name, self.fields + list(fields))

    def replace(self, name: str, **types: SSZType) -> "Container":
        """New container with the types of some fields swapped, order kept."""
        unknown = set(types) - set(self._positions)
        if unknown:
            raise SchemaError(f"{self.name} has no fields {sorted(unknown)}")
        return Container(name, [(f, types.get(f, t)) for f, t in self.fields])

    def default(self) -> Dict[str, Any]:
        return {field_name: field_type.default() for field_name, field_type in self.fields}

    def from_json(self, obj: Any) -> Dict[str, Any]:
        if not isinstance(obj, dict):
            raise SchemaError(f"{self.name} expects a JSON object, got {type(obj).__name__}")
        data = {camel_to_snake(key): value for key, value in obj.items()}
        value = {}
        for field_name, field_type in self.fields:
            if field_name not in data:
                raise SchemaError(f"{self.name} JSON is missing field {field_name!r}")
            try:
                value[field_name] = field_type.from_json(data[field_name])
            except SchemaError as e:
                raise SchemaError(f"{self.name}.{field_name}: {e}")
        return value

    def to_json(self, value: Dict[str, Any]) -> Dict[str, Any]:
        return {
            field_name: field_type.to_json(value[field_name])
            for field_name, field_type in self.fields
        }

    def chunks(self, value: Dict[str, Any], root_of: RootFn) -> PyList[bytes]:
        try:
            return [root_of(field_type, value[field_name]) for field_name, field_type in self.fields]
        except KeyError as e:
            raise SchemaError(f"{self.name} value is missing field {e}")

    def limit_chunks(self) -> int:
        return len(self.fields)

    def child(self, value: Dict[str, Any], chunk_index: int) -> Tuple[SSZType, Any]:
        if chunk_index >= len(self.fields):
            raise SchemaError(f"{self.name} has no field at position {chunk_index}")
        field_name, field_type = self.fields[chunk_index]
        return field_type, value[field_name]

    def path_step(self, key: PathElement) -> Tuple[int, SSZType]:
        if not isinstance(key, str):
            raise SchemaError(f"{self.name} expects a field name, got {key!r}")
        position = self.field_index(key)
        return (1 << self.tree_depth()) | position, self.fields[position][1]


@dataclass(frozen=True)
class TreeValue:
    """
    A materialized value together with the SSZ type that shapes its tree.

    ``fork`` is the version tag the value was decoded under, when it came
    from a beacon node or the cache. Several forks share layouts, so it
    cannot be recovered from ``kind``.
    """
    kind: SSZType
    value: Any
    fork: Optional[str] = None

    def hash_tree_root(self) -> bytes:
        return self.kind.hash_tree_root(self.value)


# Common aliases used throughout the container definitions
uint8 = Uint(8)
uint64 = Uint(64)
UINT256 = Uint(256)
boolean = Boolean()
Bytes4 = ByteVector(4)
Bytes20 = ByteVector(20)
Bytes32 = ByteVector(32)
Bytes48 = ByteVector(48)
Bytes96 = ByteVector(96)


def to_plain(kind: SSZType, value: Any) -> Any:
    """
    JSON-friendly rendering of a value: integers stay integers, byte
    strings become 0x hex, containers become dicts.
    """
    if isinstance(value, (bytes, bytearray)):
        return bytes_to_hex(value)
    if isinstance(kind, Container):
        return {field_name: to_plain(field_type, value[field_name]) for field_name, field_type in kind.fields}
    if isinstance(kind, _Sequence):
        return [to_plain(kind.elem, item) for item in value]
    if isinstance(value, list):
        return list(value)
    return value
