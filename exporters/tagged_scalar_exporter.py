#!/usr/bin/env python3
"""
Tagged-Scalar Exporter Module
Nested YAML documents with local type tags

Native scalars are bare literals; colors, points, matrices, bit arrays and
names carry local tags. PyYAML never writes a tagged scalar plain, so names,
unknowns and placeholders come out quoted. Nodes are nested block mappings
under a kind tag:

    diffuse: !color [255.0, 128.0, 0.0, 255.0]
    filtering: !name 'pyramidal'
    texmap_diffuse: !texturemap
      $class: Bitmaptexture
      coords: !object
        $class: StandardUVGen
        blur: 0.5
"""

import re

from core.value_types import (
    ClassifiedValue, DecodedNode, KeyPath, NodeKind, NODELIST_TAG,
    Placeholder, String, escape_key, unescape_key
)

from .base_exporter import BaseExporter
from .yaml_support import (
    CLASS_KEY, NAME_KEY, TaggedDumper, dump_entry, load_document,
    render_key, to_classified
)

INDENT = "  "
_LINE_START = re.compile(r'^(?=.)', re.MULTILINE)


class TaggedScalarExporter(BaseExporter):
    """Nested YAML with local tags for non-native values"""

    style_name = "tagged"
    dumper_class = TaggedDumper

    def get_format_name(self):
        return "Tagged-scalar YAML"

    def get_file_extension(self):
        return ".yaml"

    def _key(self, path: KeyPath) -> str:
        return escape_key(path[-1])

    def _indent(self, path: KeyPath) -> str:
        return INDENT * (len(path) - 1)

    def _indented(self, text: str, prefix: str) -> str:
        if not prefix:
            return text
        return _LINE_START.sub(prefix, text)

    def _entry(self, path: KeyPath, value) -> str:
        text = dump_entry(self._key(path), value, self.dumper_class)
        return self._indented(text, self._indent(path))

    def begin_document(self, material_name: str, class_name: str) -> str:
        return (dump_entry(NAME_KEY, String(material_name), self.dumper_class)
                + dump_entry(CLASS_KEY, String(class_name), self.dumper_class))

    def end_document(self) -> str:
        return ""

    def encode(self, path: KeyPath, value: ClassifiedValue) -> str:
        self._reject_reference(value)
        return self._entry(path, value)

    def begin_node(self, path: KeyPath, kind: str, class_name: str) -> str:
        prefix = self._indent(path)
        header = f"{prefix}{render_key(self._key(path), self.dumper_class)}: !{kind}\n"
        if kind == NODELIST_TAG:
            return header
        class_line = dump_entry(CLASS_KEY, String(class_name), self.dumper_class)
        return header + self._indented(class_line, prefix + INDENT)

    def end_node(self, path: KeyPath, kind: str) -> str:
        return ""

    def placeholder(self, path: KeyPath, reason: str) -> str:
        return self._entry(path, Placeholder(reason))

    def decode(self, text: str) -> DecodedNode:
        data = load_document(text)
        root = DecodedNode(
            kind=NodeKind.MATERIAL.value,
            class_name=data.pop(CLASS_KEY, ''),
            name=data.pop(NAME_KEY, None)
        )
        for key, value in data.items():
            root.entries[unescape_key(str(key))] = to_classified(value)
        return root
