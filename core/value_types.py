#!/usr/bin/env python3
"""
Value Types Module
Closed semantic type model for material property values.

Host adapters hand back arbitrary runtime values; the TypeClassifier maps each
one onto exactly one of the classes below. Exporters only ever see these
classes, never host-native objects, which keeps every format style working
from the same model.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Dict, Optional, Tuple

from .errors import CoercionError


UNPRINTABLE = "<unprintable>"


class NodeKind(Enum):
    """Kind of node a NodeReference points at"""
    MATERIAL = "material"
    TEXTUREMAP = "texturemap"
    OBJECT = "object"


class FloatState(Enum):
    """Numeric sub-state of a floating point value"""
    FINITE = "finite"
    POSITIVE_INFINITY = "positive_infinity"
    NEGATIVE_INFINITY = "negative_infinity"
    NAN = "nan"


class ClassifiedValue:
    """Base class for every member of the closed value model

    Each subclass carries a wire tag used by all format styles.
    """
    tag: ClassVar[str] = ""


@dataclass(frozen=True)
class Int(ClassifiedValue):
    tag: ClassVar[str] = "int"
    value: int


@dataclass(frozen=True, eq=False)
class Float(ClassifiedValue):
    """Floating point value

    Equality compares the sub-state first, so two NaN values are equal.
    """
    tag: ClassVar[str] = "float"
    value: float

    def __post_init__(self):
        object.__setattr__(self, 'value', float(self.value))

    @property
    def state(self) -> FloatState:
        if math.isnan(self.value):
            return FloatState.NAN
        if math.isinf(self.value):
            if self.value > 0:
                return FloatState.POSITIVE_INFINITY
            return FloatState.NEGATIVE_INFINITY
        return FloatState.FINITE

    def __eq__(self, other):
        if not isinstance(other, Float):
            return NotImplemented
        if self.state != other.state:
            return False
        if self.state == FloatState.FINITE:
            return self.value == other.value
        return True

    def __hash__(self):
        if self.state == FloatState.FINITE:
            return hash((self.tag, self.value))
        return hash((self.tag, self.state))


def _number_key(values) -> Tuple[Float, ...]:
    """Comparison key in which NaN components equal each other"""
    return tuple(Float(v) for v in values)


class _NumericEquality:
    """Component-wise equality with the same NaN rule as Float"""

    def _numbers(self) -> Tuple[float, ...]:
        raise NotImplementedError

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return _number_key(self._numbers()) == _number_key(other._numbers())

    def __hash__(self):
        return hash((self.tag, _number_key(self._numbers())))


@dataclass(frozen=True)
class Bool(ClassifiedValue):
    tag: ClassVar[str] = "bool"
    value: bool


@dataclass(frozen=True)
class String(ClassifiedValue):
    tag: ClassVar[str] = "string"
    value: str


@dataclass(frozen=True)
class Symbol(ClassifiedValue):
    """Interned bare identifier, distinct from a String"""
    tag: ClassVar[str] = "name"
    name: str


@dataclass(frozen=True, eq=False)
class Color(_NumericEquality, ClassifiedValue):
    """RGBA color with channels in the 0-255 domain"""
    tag: ClassVar[str] = "color"
    r: float
    g: float
    b: float
    a: float = 255.0

    @property
    def channels(self) -> Tuple[float, float, float, float]:
        return (self.r, self.g, self.b, self.a)

    def _numbers(self):
        return self.channels


@dataclass(frozen=True, eq=False)
class Point2(_NumericEquality, ClassifiedValue):
    tag: ClassVar[str] = "point2"
    x: float
    y: float

    @property
    def components(self) -> Tuple[float, ...]:
        return (self.x, self.y)

    def _numbers(self):
        return self.components


@dataclass(frozen=True, eq=False)
class Point3(_NumericEquality, ClassifiedValue):
    tag: ClassVar[str] = "point3"
    x: float
    y: float
    z: float

    @property
    def components(self) -> Tuple[float, ...]:
        return (self.x, self.y, self.z)

    def _numbers(self):
        return self.components


@dataclass(frozen=True, eq=False)
class Point4(_NumericEquality, ClassifiedValue):
    tag: ClassVar[str] = "point4"
    x: float
    y: float
    z: float
    w: float

    @property
    def components(self) -> Tuple[float, ...]:
        return (self.x, self.y, self.z, self.w)

    def _numbers(self):
        return self.components


@dataclass(frozen=True, eq=False)
class Matrix3(_NumericEquality, ClassifiedValue):
    """Affine transform stored as four Point3 rows

    Attributes:
        row1: X axis
        row2: Y axis
        row3: Z axis
        row4: Translation
    """
    tag: ClassVar[str] = "matrix3"
    row1: Point3
    row2: Point3
    row3: Point3
    row4: Point3

    @property
    def rows(self) -> Tuple[Point3, Point3, Point3, Point3]:
        return (self.row1, self.row2, self.row3, self.row4)

    def _numbers(self):
        return tuple(c for row in self.rows for c in row.components)

    @classmethod
    def from_rows(cls, rows) -> 'Matrix3':
        """Build a matrix from four 3-component row sequences"""
        return cls(*(Point3(*row) for row in rows))


@dataclass(frozen=True)
class BitSet(ClassifiedValue):
    """Ordered set of set bit positions"""
    tag: ClassVar[str] = "bitarray"
    bits: Tuple[int, ...] = ()

    @classmethod
    def from_bits(cls, bits) -> 'BitSet':
        return cls(tuple(sorted(set(int(b) for b in bits))))


@dataclass(frozen=True)
class Sequence(ClassifiedValue):
    """Ordered, possibly heterogeneous list of classified values"""
    tag: ClassVar[str] = "array"
    items: Tuple[ClassifiedValue, ...] = ()

    def has_references(self) -> bool:
        return any(isinstance(item, NodeReference) for item in self.items)


@dataclass(frozen=True)
class NodeReference(ClassifiedValue):
    """Handle to another material, texture map or traversable sub-object

    The tag is the node kind, so a texture map reference is written as
    `texturemap` rather than a generic reference tag.
    """
    handle: Any
    kind: NodeKind = NodeKind.OBJECT

    @property
    def tag(self) -> str:
        return self.kind.value


@dataclass(frozen=True, eq=False)
class Unknown(ClassifiedValue):
    """Opaque host value whose only operation is textual coercion"""
    tag: ClassVar[str] = "unknown"
    raw: Any

    @property
    def text(self) -> str:
        try:
            return coerce_text(self.raw)
        except CoercionError:
            return UNPRINTABLE

    def __eq__(self, other):
        if not isinstance(other, Unknown):
            return NotImplemented
        return self.text == other.text

    def __hash__(self):
        return hash((self.tag, self.text))


def coerce_text(raw: Any) -> str:
    """Render an opaque value as text

    Raises:
        CoercionError: If the value cannot be converted to a string
    """
    if isinstance(raw, str):
        return raw
    try:
        text = str(raw)
    except Exception as e:
        raise CoercionError(f"Cannot render {type(raw).__name__} value as text: {e}") from e
    if not isinstance(text, str):
        raise CoercionError(f"{type(raw).__name__}.__str__ returned {type(text).__name__}")
    return text


@dataclass(frozen=True)
class Placeholder:
    """Terminal token emitted where the walker stops or skips a value

    Attributes:
        reason: One of PLACEHOLDER_REASONS
    """
    tag: ClassVar[str] = "placeholder"
    reason: str


CYCLE = "cycle"
MAX_DEPTH = "max_depth"
READ_ERROR = "read_error"
PLACEHOLDER_REASONS = (CYCLE, MAX_DEPTH, READ_ERROR)


@dataclass(frozen=True)
class PropertyEntry:
    """One property of one node"""
    name: str
    value: ClassifiedValue


@dataclass
class DecodedNode:
    """Node rebuilt from an encoded document

    Attributes:
        kind: Node kind tag ('material', 'texturemap', 'object', 'nodelist')
        class_name: Host class name recorded for the node
        entries: Property name -> ClassifiedValue, Placeholder or DecodedNode
        name: Material name (root documents only)
    """
    kind: str
    class_name: str = ""
    entries: Dict[str, Any] = field(default_factory=dict)
    name: Optional[str] = None

    def lookup(self, *path: str) -> Any:
        """Follow a key path through nested nodes"""
        current: Any = self
        for segment in path:
            current = current.entries[segment]
        return current


KeyPath = Tuple[str, ...]

KEY_SEPARATOR = "."


def join_key_path(path: KeyPath) -> str:
    """Join key path segments into the dotted form"""
    return KEY_SEPARATOR.join(path)


NODE_KIND_TAGS = {kind.value for kind in NodeKind}
NODELIST_TAG = "nodelist"


HEADER_PREFIX = "$"


def escape_key(name: str) -> str:
    """Keep property names clear of the $-prefixed header keys

    Any name starting with '$' gets one more '$', so '$class' is written as
    '$$class' and can never be read back as a node header.
    """
    if name.startswith(HEADER_PREFIX):
        return HEADER_PREFIX + name
    return name


def unescape_key(key: str) -> str:
    """Inverse of escape_key"""
    if key.startswith(HEADER_PREFIX * 2):
        return key[1:]
    return key
