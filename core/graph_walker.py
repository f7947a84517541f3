#!/usr/bin/env python3
"""
Graph Walker Module
Depth-first traversal of a material graph into an OutputSink.

The graph is live and externally owned, and may be cyclic. The walker never
builds a copy of it: it follows references on the call stack, keeping only
the identities on the current root-to-node path (to detect true cycles) and
the current depth (to cap runaway chains). The same sub-node reached from two
unrelated branches is expanded twice.
"""

from dataclasses import dataclass, field
from typing import Any, Set, TYPE_CHECKING

from .errors import IntrospectionError, PropertyReadError
from .output_sink import OutputSink
from .reflector import Reflector
from .value_types import (
    CYCLE, MAX_DEPTH, NODELIST_TAG, READ_ERROR, KeyPath,
    NodeReference, PropertyEntry, Sequence, join_key_path
)

if TYPE_CHECKING:
    from exporters.base_exporter import BaseExporter

DEFAULT_MAX_DEPTH = 20


@dataclass
class VisitState:
    """Per-traversal state, owned by a single walk

    Attributes:
        visited_on_path: Identities of the nodes on the current path
        depth: Depth of the node currently being visited (root = 0)
        max_depth: Deepest node depth that is still expanded
        peak_depth: Deepest node depth actually visited
    """
    max_depth: int = DEFAULT_MAX_DEPTH
    visited_on_path: Set[Any] = field(default_factory=set)
    depth: int = 0
    peak_depth: int = 0


class GraphWalker:
    """Walks one material graph and appends encoded fragments to a sink"""

    def __init__(self, reflector: Reflector, exporter: 'BaseExporter',
                 max_depth: int = DEFAULT_MAX_DEPTH, read_error_placeholders: bool = False,
                 progress_callback=None):
        """Initialize walker

        Args:
            reflector: Property access over the host reader
            exporter: Format style used to render fragments
            max_depth: Maximum node depth to expand (default: 20)
            read_error_placeholders: Emit a placeholder for unreadable properties
                                     instead of omitting them
            progress_callback: Optional function to call for progress updates
        """
        self.reflector = reflector
        self.exporter = exporter
        self.max_depth = max_depth
        self.read_error_placeholders = read_error_placeholders
        self.progress_callback = progress_callback

    def log(self, message):
        """Send diagnostic message to callback"""
        if self.progress_callback:
            self.progress_callback(message)
        print(message)

    def walk(self, material: Any, sink: OutputSink) -> VisitState:
        """Encode one top-level material into the sink

        Never raises for host failures; they are logged and the affected
        property or node is degraded.

        Args:
            material: Top-level material handle
            sink: Fresh output sink

        Returns:
            VisitState: Final traversal state (path set empty, depth 0)
        """
        state = VisitState(max_depth=self.max_depth)
        name = self.reflector.node_name(material)
        sink.append(self.exporter.begin_document(name, self.reflector.class_name(material)))

        identity = self.reflector.identity(material)
        state.visited_on_path.add(identity)
        try:
            self._visit(material, (), state, sink)
        finally:
            state.visited_on_path.discard(identity)

        sink.append(self.exporter.end_document())
        return state

    def _visit(self, node: Any, path: KeyPath, state: VisitState, sink: OutputSink):
        try:
            names = self.reflector.property_names(node)
        except IntrospectionError as e:
            self.log(f"  ⚠ {self._where(path)}: {e}")
            return

        for name in names:
            child_path = path + (name,)
            try:
                value = self.reflector.read_property(node, name)
            except PropertyReadError as e:
                self.log(f"  ⚠ Cannot read {join_key_path(child_path)}: {e}")
                if self.read_error_placeholders:
                    sink.append(self.exporter.placeholder(child_path, READ_ERROR))
                continue
            self._emit(PropertyEntry(name, value), child_path, state, sink)

    def _emit(self, entry: PropertyEntry, path: KeyPath, state: VisitState, sink: OutputSink):
        value = entry.value
        if isinstance(value, NodeReference):
            self._descend(value, path, state, sink)
        elif isinstance(value, Sequence) and value.has_references():
            self._emit_node_list(value, path, state, sink)
        else:
            try:
                fragment = self.exporter.encode(path, value)
            except Exception as e:
                self.log(f"  ⚠ Cannot encode {join_key_path(path)}: {e}")
                if not self.read_error_placeholders:
                    return
                fragment = self.exporter.placeholder(path, READ_ERROR)
            sink.append(fragment)

    def _emit_node_list(self, value: Sequence, path: KeyPath, state: VisitState, sink: OutputSink):
        """Sequences holding node references become index-keyed node lists"""
        sink.append(self.exporter.begin_node(path, NODELIST_TAG, ""))
        for index, item in enumerate(value.items):
            self._emit(PropertyEntry(str(index), item), path + (str(index),), state, sink)
        sink.append(self.exporter.end_node(path, NODELIST_TAG))

    def _descend(self, reference: NodeReference, path: KeyPath, state: VisitState, sink: OutputSink):
        target = reference.handle
        identity = self.reflector.identity(target)

        if identity in state.visited_on_path:
            self.log(f"  ↺ Cycle at {join_key_path(path)}, not descending")
            sink.append(self.exporter.placeholder(path, CYCLE))
            return
        if state.depth >= state.max_depth:
            self.log(f"  ⚠ Max depth {state.max_depth} reached at {join_key_path(path)}")
            sink.append(self.exporter.placeholder(path, MAX_DEPTH))
            return

        kind = reference.tag
        sink.append(self.exporter.begin_node(path, kind, self.reflector.class_name(target)))
        state.visited_on_path.add(identity)
        state.depth += 1
        state.peak_depth = max(state.peak_depth, state.depth)
        try:
            self._visit(target, path, state, sink)
        finally:
            state.depth -= 1
            state.visited_on_path.discard(identity)
        sink.append(self.exporter.end_node(path, kind))

    def _where(self, path: KeyPath) -> str:
        return join_key_path(path) if path else "<root>"
