#!/usr/bin/env python3
"""
Base Reader Module
Abstract interface for reading material libraries from host scene files
(Maya ASCII, USD, etc.)

A reader exposes the host's material graph only through generic
introspection: list the top-level materials, list a node's property names,
read one property by name, and tell whether a value is a node worth
descending into. The export core never touches host objects any other way.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Hashable, List, Optional

from core.value_types import ClassifiedValue, NodeKind


class BaseReader(ABC):
    """Abstract base class for material library readers

    Provides a consistent interface for reading different host formats.
    All format-specific readers (MayaReader, USDReader) must implement these methods.

    Host calls are allowed to raise anything; the Reflector wraps failures in
    IntrospectionError / PropertyReadError so one broken node or property never
    stops the export.
    """

    def __init__(self, file_path: Optional[str] = None):
        """Initialize reader with file path

        Args:
            file_path: Path to the source file, or None for in-memory libraries
        """
        self.file_path = Path(file_path) if file_path is not None else None
        self._materials_cache = None

    @abstractmethod
    def get_format_name(self) -> str:
        """Return human-readable format name (e.g., 'Maya', 'USD')"""
        pass

    @abstractmethod
    def get_materials(self) -> List[Any]:
        """Get the top-level materials in library order

        Returns:
            list: Material node handles
        """
        pass

    @abstractmethod
    def get_node_name(self, node: Any) -> str:
        """Get a node's display name"""
        pass

    @abstractmethod
    def get_class_name(self, node: Any) -> str:
        """Get a node's host class name (e.g., 'lambert', 'UsdPreviewSurface')"""
        pass

    @abstractmethod
    def get_property_names(self, node: Any) -> List[str]:
        """Enumerate a node's property names in host order

        Args:
            node: Node handle

        Returns:
            list: Property names, in authoring order
        """
        pass

    @abstractmethod
    def get_property(self, node: Any, name: str) -> Any:
        """Read one property value by name

        Args:
            node: Node handle
            name: Property name from get_property_names()

        Returns:
            Raw host value, or a ClassifiedValue where the host needs to
            disambiguate (e.g. colors)
        """
        pass

    @abstractmethod
    def get_node_kind(self, value: Any) -> Optional[NodeKind]:
        """Check whether a value is a node handle the walker should descend into

        Args:
            value: Raw property value

        Returns:
            NodeKind: Kind of node, or None if value is not a node
        """
        pass

    def node_identity(self, node: Any) -> Hashable:
        """Identity used for cycle detection

        Override when the host hands out fresh wrapper objects for the same
        underlying node.
        """
        return id(node)

    def classify_native(self, value: Any) -> Optional[ClassifiedValue]:
        """Classify host-specific concrete types

        Returns:
            ClassifiedValue or None if the value is not a host-native type
        """
        return None  # Default implementation - override if supported
