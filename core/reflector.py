#!/usr/bin/env python3
"""
Reflector Module
Fallible property access on top of a host reader.

Host introspection is unreliable: enumerating a corrupted node or reading a
single property may throw. The Reflector turns those host failures into typed
errors so the walker can isolate them per node and per property.
"""

from typing import Any, List, TYPE_CHECKING

from .errors import IntrospectionError, PropertyReadError
from .type_classifier import TypeClassifier
from .value_types import ClassifiedValue, coerce_text

if TYPE_CHECKING:
    from readers.base_reader import BaseReader


class Reflector:
    """Generic introspection over host nodes"""

    def __init__(self, reader: 'BaseReader', classifier: TypeClassifier = None):
        """Initialize reflector

        Args:
            reader: Host adapter
            classifier: Type classifier (default: one bound to the reader)
        """
        self.reader = reader
        self.classifier = classifier or TypeClassifier(reader)

    def property_names(self, node: Any) -> List[str]:
        """Enumerate a node's property names

        Raises:
            IntrospectionError: If the host cannot enumerate the node
        """
        try:
            names = self.reader.get_property_names(node)
            return [coerce_text(name) for name in names]
        except Exception as e:
            raise IntrospectionError(
                f"Cannot enumerate properties of {self.node_name(node) or '<node>'}: {e}"
            ) from e

    def read_property(self, node: Any, name: str) -> ClassifiedValue:
        """Read and classify one property

        Raises:
            PropertyReadError: If the host read or the classification fails
        """
        try:
            raw = self.reader.get_property(node, name)
            return self.classifier.classify(raw)
        except Exception as e:
            raise PropertyReadError(name, str(e) or type(e).__name__) from e

    def class_name(self, node: Any) -> str:
        """Host class name, or 'Unknown' if the host cannot tell"""
        try:
            return coerce_text(self.reader.get_class_name(node))
        except Exception:
            return "Unknown"

    def node_name(self, node: Any) -> str:
        """Node display name, or an empty string if the host cannot tell"""
        try:
            return coerce_text(self.reader.get_node_name(node))
        except Exception:
            return ""

    def identity(self, node: Any):
        """Identity of a node for cycle detection"""
        try:
            return self.reader.node_identity(node)
        except Exception:
            return id(node)
