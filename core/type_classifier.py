#!/usr/bin/env python3
"""
Type Classifier Module
Maps arbitrary runtime values onto the closed value model.

Precedence is most-specific-first: bool is checked before int (it subclasses
int), strings and numpy arrays before the generic sequence check, and host
node checks before the sequence fallback, since several concrete types are
also iterable.
"""

from enum import Enum
from typing import Any, Optional, TYPE_CHECKING

import numpy as np

from .value_types import (
    BitSet, Bool, ClassifiedValue, Float, Int, Matrix3, NodeReference,
    Point2, Point3, Point4, Sequence, String, Symbol, Unknown
)

if TYPE_CHECKING:
    from readers.base_reader import BaseReader


POINT_TYPES = {2: Point2, 3: Point3, 4: Point4}


class TypeClassifier:
    """Classifies host values into ClassifiedValue instances

    The classifier never raises: anything it cannot place becomes Unknown.
    """

    def __init__(self, reader: Optional['BaseReader'] = None):
        """Initialize classifier

        Args:
            reader: Host adapter used for host-native types and node detection.
                    Without one, no value is ever classified as a NodeReference.
        """
        self.reader = reader

    def classify(self, value: Any) -> ClassifiedValue:
        """Classify a single runtime value

        Args:
            value: Raw value returned by the host

        Returns:
            ClassifiedValue: Exactly one member of the value model
        """
        return self._classify(value, set())

    def _classify(self, value: Any, active: set) -> ClassifiedValue:
        if isinstance(value, ClassifiedValue):
            return value

        # Exact scalar types; enum members before int so IntEnum stays a name
        if isinstance(value, Enum):
            return Symbol(value.name)
        if isinstance(value, (bool, np.bool_)):
            return Bool(bool(value))
        if isinstance(value, (int, np.integer)):
            return Int(int(value))
        if isinstance(value, (float, np.floating)):
            return Float(float(value))
        if isinstance(value, str):
            return String(value)

        # Exact composite types; host containers may fail while iterated
        if isinstance(value, np.ndarray):
            try:
                if value.ndim == 0:
                    return self._classify(value.item(), active)
                composite = self._classify_array(value)
            except Exception:
                return Unknown(value)
            if composite is not None:
                return composite
        if isinstance(value, (set, frozenset)):
            try:
                if self._is_bit_collection(value):
                    return BitSet.from_bits(value)
            except Exception:
                return Unknown(value)

        native = self._host_native(value)
        if native is not None:
            return native

        # Structural checks
        kind = self._host_node_kind(value)
        if kind is not None:
            return NodeReference(value, kind)

        if isinstance(value, (list, tuple, np.ndarray)):
            if id(value) in active:
                return Unknown(f"<recursive {type(value).__name__}>")
            active.add(id(value))
            try:
                return Sequence(tuple(self._classify(item, active) for item in value))
            except Exception:
                return Unknown(value)
            finally:
                active.discard(id(value))

        return Unknown(value)

    def _classify_array(self, array: np.ndarray) -> Optional[ClassifiedValue]:
        """Classify fixed-shape numeric arrays as points or matrices"""
        if array.dtype.kind not in 'iuf':
            return None
        if array.ndim == 1 and array.shape[0] in POINT_TYPES:
            return POINT_TYPES[array.shape[0]](*(float(c) for c in array))
        if array.shape == (4, 3):
            return Matrix3.from_rows(array.astype(float).tolist())
        if array.shape == (4, 4):
            # Homogeneous 4x4: keep the affine 4x3 part
            return Matrix3.from_rows(array[:, :3].astype(float).tolist())
        if array.shape == (3, 3):
            rows = array.astype(float).tolist()
            rows.append([0.0, 0.0, 0.0])
            return Matrix3.from_rows(rows)
        return None

    def _is_bit_collection(self, value) -> bool:
        return all(
            isinstance(item, (int, np.integer)) and not isinstance(item, (bool, np.bool_)) and item >= 0
            for item in value
        )

    def _host_native(self, value: Any) -> Optional[ClassifiedValue]:
        if self.reader is None:
            return None
        try:
            return self.reader.classify_native(value)
        except Exception:
            # A broken host hook means "no match"; later checks still apply
            return None

    def _host_node_kind(self, value: Any):
        if self.reader is None:
            return None
        try:
            return self.reader.get_node_kind(value)
        except Exception:
            return None
