#!/usr/bin/env python3
"""
Flow-Mapping Exporter Module
JSON documents where every value is a small typed mapping

Nodes are block objects keyed by property name; every value is written
inline as {"type": <tag>, "value": <literal>}:

    {
      "$name": "matA",
      "$class": "Standardmaterial",
      "glossiness": {"type": "float", "value": 10.0},
      "texmap_diffuse": {
        "$type": "texturemap",
        "$class": "Bitmaptexture",
        ...
      }
    }

Infinity and NaN use the Infinity / -Infinity / NaN literals that the json
module reads back.
"""

import json
import math

from core.value_types import (
    BitSet, Bool, ClassifiedValue, Color, DecodedNode, Float, Int, KeyPath,
    Matrix3, NodeKind, NODELIST_TAG, Placeholder, Point2, Point3, Point4,
    Sequence, String, Symbol, Unknown, escape_key, unescape_key
)

from .base_exporter import BaseExporter

INDENT = "  "
TYPE_KEY = "$type"
CLASS_KEY = "$class"
NAME_KEY = "$name"

POINT_CLASSES = {cls.tag: cls for cls in (Point2, Point3, Point4)}


def format_float(value: float) -> str:
    """Float literal that always keeps a decimal point"""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    text = repr(value)
    if '.' not in text:
        text = text.replace('e', '.0e', 1) if 'e' in text else text + '.0'
    return text


def format_number(value) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    return format_float(float(value))


def _quote(text: str) -> str:
    return json.dumps(text, ensure_ascii=False)


def _number_list(values) -> str:
    return "[" + ", ".join(format_number(v) for v in values) + "]"


class FlowMappingExporter(BaseExporter):
    """JSON with inline {type, value} mappings"""

    style_name = "flow"

    def get_format_name(self):
        return "Flow-mapping JSON"

    def get_file_extension(self):
        return ".json"

    def literal(self, value: ClassifiedValue) -> str:
        """Render the literal part of a typed value"""
        if isinstance(value, Int):
            return str(value.value)
        if isinstance(value, Float):
            return format_float(value.value)
        if isinstance(value, Bool):
            return "true" if value.value else "false"
        if isinstance(value, String):
            return _quote(value.value)
        if isinstance(value, Symbol):
            return _quote(value.name)
        if isinstance(value, Color):
            return _number_list(value.channels)
        if isinstance(value, (Point2, Point3, Point4)):
            return _number_list(value.components)
        if isinstance(value, Matrix3):
            return "[" + ", ".join(_number_list(row.components) for row in value.rows) + "]"
        if isinstance(value, BitSet):
            return _number_list(value.bits)
        if isinstance(value, Sequence):
            return "[" + ", ".join(self.typed(item) for item in value.items) + "]"
        if isinstance(value, Unknown):
            return _quote(value.text)
        if isinstance(value, Placeholder):
            return _quote(value.reason)
        self._reject_reference(value)
        raise TypeError(f"Unsupported value type: {type(value).__name__}")

    def typed(self, value) -> str:
        """Render {"type": <tag>, "value": <literal>}"""
        return '{"type": %s, "value": %s}' % (_quote(value.tag), self.literal(value))

    def _entry_prefix(self, path: KeyPath) -> str:
        # Every object opens with its $name/$type header, so entries always follow one
        return ",\n" + INDENT * len(path) + _quote(escape_key(path[-1])) + ": "

    def begin_document(self, material_name: str, class_name: str) -> str:
        return ("{\n"
                + INDENT + _quote(NAME_KEY) + ": " + _quote(material_name) + ",\n"
                + INDENT + _quote(CLASS_KEY) + ": " + _quote(class_name))

    def end_document(self) -> str:
        return "\n}\n"

    def encode(self, path: KeyPath, value: ClassifiedValue) -> str:
        self._reject_reference(value)
        return self._entry_prefix(path) + self.typed(value)

    def begin_node(self, path: KeyPath, kind: str, class_name: str) -> str:
        inner = INDENT * (len(path) + 1)
        text = self._entry_prefix(path) + "{\n" + inner + _quote(TYPE_KEY) + ": " + _quote(kind)
        if kind != NODELIST_TAG:
            text += ",\n" + inner + _quote(CLASS_KEY) + ": " + _quote(class_name)
        return text

    def end_node(self, path: KeyPath, kind: str) -> str:
        return "\n" + INDENT * len(path) + "}"

    def placeholder(self, path: KeyPath, reason: str) -> str:
        return self._entry_prefix(path) + self.typed(Placeholder(reason))

    def decode(self, text: str) -> DecodedNode:
        data = json.loads(text)
        root = DecodedNode(
            kind=NodeKind.MATERIAL.value,
            class_name=data.pop(CLASS_KEY, ''),
            name=data.pop(NAME_KEY, None)
        )
        for key, value in data.items():
            root.entries[unescape_key(key)] = self._decode_entry(value)
        return root

    def _decode_entry(self, data: dict):
        if TYPE_KEY in data:
            node = DecodedNode(kind=data.pop(TYPE_KEY), class_name=data.pop(CLASS_KEY, ''))
            for key, value in data.items():
                node.entries[unescape_key(key)] = self._decode_entry(value)
            return node
        return self.decode_value(data)

    def decode_value(self, data: dict):
        """Rebuild one {"type", "value"} mapping"""
        tag = data["type"]
        value = data["value"]
        if tag == Int.tag:
            return Int(int(value))
        if tag == Float.tag:
            return Float(float(value))
        if tag == Bool.tag:
            return Bool(bool(value))
        if tag == String.tag:
            return String(value)
        if tag == Symbol.tag:
            return Symbol(value)
        if tag == Color.tag:
            return Color(*value)
        if tag in POINT_CLASSES:
            return POINT_CLASSES[tag](*value)
        if tag == Matrix3.tag:
            return Matrix3.from_rows(value)
        if tag == BitSet.tag:
            return BitSet(tuple(value))
        if tag == Sequence.tag:
            return Sequence(tuple(self.decode_value(item) for item in value))
        if tag == Unknown.tag:
            return Unknown(value)
        if tag == Placeholder.tag:
            return Placeholder(value)
        raise ValueError(f"Unknown value type tag: {tag}")
