#!/usr/bin/env python3
"""
Prefixed-Key Exporter Module
Flat YAML documents keyed by the full dotted key path

Same value grammar as the tagged-scalar style, but every key below the root
is the dot-joined path and string scalars are single-quoted, so Windows paths
need no escaping:

    texmap_diffuse: !texturemap 'Bitmaptexture'
    texmap_diffuse.coords: !object 'StandardUVGen'
    texmap_diffuse.coords.blur: 0.5
    texmap_diffuse.filename: 'C:\\maps\\wood.png'
    texmap_diffuse.u\\.offset: 0.25

A dot or backslash inside one property name is backslash-escaped, so a
property literally named 'coords.blur' never shares a key with the 'blur'
property of a 'coords' node.
"""

import re
from typing import List

from core.value_types import (
    DecodedNode, KEY_SEPARATOR, KeyPath, NodeKind, escape_key, unescape_key
)

from .tagged_scalar_exporter import TaggedScalarExporter
from .yaml_support import (
    CLASS_KEY, NAME_KEY, NodeHeader, SingleQuotedDumper, dump_entry,
    load_document, to_classified
)

_SEGMENT_SPECIALS = re.compile(r'([\\.])')


def escape_segment(name: str) -> str:
    """Escape one property name for use inside a flat key"""
    return _SEGMENT_SPECIALS.sub(r'\\\1', escape_key(name))


def split_key(key: str) -> List[str]:
    """Split a flat key on unescaped dots, restoring each property name"""
    segments = []
    current = []
    chars = iter(key)
    for ch in chars:
        if ch == '\\':
            current.append(next(chars, ''))
        elif ch == KEY_SEPARATOR:
            segments.append(''.join(current))
            current = []
        else:
            current.append(ch)
    segments.append(''.join(current))
    return [unescape_key(segment) for segment in segments]


class PrefixedKeyExporter(TaggedScalarExporter):
    """Flat YAML with dotted key paths and single-quoted strings"""

    style_name = "prefixed"
    dumper_class = SingleQuotedDumper

    def get_format_name(self):
        return "Prefixed-key YAML"

    def _key(self, path: KeyPath) -> str:
        return KEY_SEPARATOR.join(escape_segment(name) for name in path)

    def _indent(self, path: KeyPath) -> str:
        return ""

    def begin_node(self, path: KeyPath, kind: str, class_name: str) -> str:
        return dump_entry(self._key(path), NodeHeader(kind, class_name), self.dumper_class)

    def decode(self, text: str) -> DecodedNode:
        """Rebuild the nested tree from flat keys

        Node headers always precede the keys beneath them, so every key's
        parent path is already known when the key is read.

        Raises:
            ValueError: If a key has no node header above it
        """
        data = load_document(text)
        root = DecodedNode(
            kind=NodeKind.MATERIAL.value,
            class_name=data.pop(CLASS_KEY, ''),
            name=data.pop(NAME_KEY, None)
        )
        nodes = {(): root}

        for key, value in data.items():
            path = tuple(split_key(str(key)))
            parent = nodes.get(path[:-1])
            if parent is None:
                raise ValueError(f"No node header for key: {key}")

            if isinstance(value, NodeHeader):
                node = DecodedNode(kind=value.kind, class_name=value.class_name)
                nodes[path] = node
                parent.entries[path[-1]] = node
            else:
                parent.entries[path[-1]] = to_classified(value)

        return root
