#!/usr/bin/env python3
"""
Base Exporter Module
Abstract base class ensuring consistent interface across all format styles

An exporter is the ValueEncoder for one grammar: it renders each classified
value, node header and placeholder as a text fragment for the OutputSink, and
can decode a finished document back into a DecodedNode tree.
"""

from abc import ABC, abstractmethod
from pathlib import Path

from core.errors import WriteError
from core.value_types import ClassifiedValue, DecodedNode, KeyPath, NodeReference


class BaseExporter(ABC):
    """Abstract base class for all format styles

    Provides consistent interface and common utilities for all exporters.
    Each style (flow-mapping, tagged-scalar, prefixed-key) inherits from this class.

    Key principles:
    - Stateless: fragments depend only on the arguments, never on earlier calls
    - Append-only: fragments are concatenated in traversal order, never rewritten
    - Round-trip: decode() rebuilds every value encode() wrote
    """

    style_name = ""

    def __init__(self, progress_callback=None):
        """Initialize exporter

        Args:
            progress_callback: Optional function to call for progress updates
                              Signature: callback(message: str) -> None
        """
        self.progress_callback = progress_callback

    def log(self, message):
        """Send progress/status message

        Args:
            message: Message to log
        """
        if self.progress_callback:
            self.progress_callback(message)
        print(message)

    @abstractmethod
    def get_format_name(self):
        """Return human-readable format name

        Returns:
            str: Format name (e.g., "Flow-mapping JSON", "Tagged-scalar YAML")
        """
        pass

    @abstractmethod
    def get_file_extension(self):
        """Return file extension for this style, including the dot

        Returns:
            str: ".json" or ".yaml"
        """
        pass

    @abstractmethod
    def begin_document(self, material_name: str, class_name: str) -> str:
        """Fragment opening the document of one top-level material"""
        pass

    @abstractmethod
    def end_document(self) -> str:
        """Fragment closing the document"""
        pass

    @abstractmethod
    def encode(self, path: KeyPath, value: ClassifiedValue) -> str:
        """Render one keyed value

        Args:
            path: Key path of the property (never empty)
            value: Classified value; NodeReference is not accepted, the walker
                   expands references into begin_node()/end_node() instead

        Returns:
            str: Text fragment
        """
        pass

    @abstractmethod
    def begin_node(self, path: KeyPath, kind: str, class_name: str) -> str:
        """Fragment opening a nested node at path

        Args:
            path: Key path of the referencing property
            kind: Node kind tag ('material', 'texturemap', 'object', 'nodelist')
            class_name: Host class name ('' for node lists)
        """
        pass

    @abstractmethod
    def end_node(self, path: KeyPath, kind: str) -> str:
        """Fragment closing the node opened at path"""
        pass

    @abstractmethod
    def placeholder(self, path: KeyPath, reason: str) -> str:
        """Terminal token where traversal stopped (cycle, max_depth, read_error)"""
        pass

    @abstractmethod
    def decode(self, text: str) -> DecodedNode:
        """Rebuild a document written by this style

        Returns:
            DecodedNode: Root material node with nested entries
        """
        pass

    def _reject_reference(self, value):
        if isinstance(value, NodeReference):
            raise ValueError("NodeReference values are expanded by the graph walker, not encoded inline")

    def validate_output_path(self, output_path):
        """Validate and create output directory if needed

        Args:
            output_path: Directory path to validate

        Returns:
            Path: Validated Path object

        Raises:
            ValueError: If path is invalid
        """
        path = Path(output_path)

        # Create directory if it doesn't exist
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ValueError(f"Cannot create output directory {path}: {e}")

        # Verify we can write to the directory
        if not path.is_dir():
            raise ValueError(f"Output path is not a directory: {path}")

        return path

    def write_file(self, path, content: str, encoding: str = 'utf-8') -> bool:
        """Write one finished document

        Never raises for I/O problems; a failure is logged and reported.

        Args:
            path: Destination file path
            content: Document text
            encoding: Text encoding

        Returns:
            bool: True if the file was written
        """
        try:
            self._write_text(Path(path), content, encoding)
        except WriteError as e:
            self.log(f"✗ {e}")
            return False
        return True

    def _write_text(self, path: Path, content: str, encoding: str):
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, 'w', encoding=encoding, newline='\n') as f:
                f.write(content)
        except (OSError, UnicodeError) as e:
            raise WriteError(f"Cannot write {path}: {e}") from e
