#!/usr/bin/env python3
"""
YAML Support Module
PyYAML dumper and loader classes for the tagged value grammar.

Native scalars (int, float, bool, string) are written bare; every other
value carries a local tag such as !color or !point3. The same loader reads
both the nested (tagged-scalar) and flat (prefixed-key) layouts: node tags on
a mapping build a DecodedNode, node tags on a scalar build a NodeHeader.
"""

from dataclasses import dataclass

import yaml

from core.value_types import (
    BitSet, Bool, ClassifiedValue, Color, DecodedNode, Float, Int, Matrix3,
    NODE_KIND_TAGS, NODELIST_TAG, Placeholder, Point2, Point3, Point4,
    Sequence, String, Symbol, Unknown, unescape_key
)

STR_TAG = 'tag:yaml.org,2002:str'
SEQ_TAG = 'tag:yaml.org,2002:seq'
CLASS_KEY = '$class'
NAME_KEY = '$name'
FOLDED_BREAKS = ('\x85', '\u2028', '\u2029')


@dataclass(frozen=True)
class NodeHeader:
    """Flat-layout marker for a node: kind tag plus host class name"""
    kind: str
    class_name: str


class TaggedDumper(yaml.SafeDumper):
    """SafeDumper with representers for the value model"""
    string_style = None

    def ignore_aliases(self, data):
        return True


class SingleQuotedDumper(TaggedDumper):
    """Writes every string scalar single-quoted so backslashes stay literal"""
    string_style = "'"


def _local_tag(tag):
    return '!' + tag


def _has_folded_break(text):
    return any(ch in text for ch in FOLDED_BREAKS)


def _scalar_style(dumper, text):
    # Only double quotes escape the breaks the loader would fold to a space
    if _has_folded_break(text):
        return '"'
    return dumper.string_style


def _represent_text(dumper, data):
    # Plain str is only ever a mapping key here
    return dumper.represent_scalar(STR_TAG, data, style='"' if _has_folded_break(data) else None)


def _represent_int(dumper, data):
    return dumper.represent_int(data.value)


def _represent_float(dumper, data):
    # SafeRepresenter keeps a decimal point and writes .inf / -.inf / .nan
    return dumper.represent_float(data.value)


def _represent_bool(dumper, data):
    return dumper.represent_bool(data.value)


def _represent_string(dumper, data):
    return dumper.represent_scalar(STR_TAG, data.value, style=_scalar_style(dumper, data.value))


def _represent_symbol(dumper, data):
    return dumper.represent_scalar(_local_tag(data.tag), data.name, style=_scalar_style(dumper, data.name))


def _represent_color(dumper, data):
    return dumper.represent_sequence(_local_tag(data.tag), list(data.channels), flow_style=True)


def _represent_point(dumper, data):
    return dumper.represent_sequence(_local_tag(data.tag), list(data.components), flow_style=True)


def _represent_matrix(dumper, data):
    rows = [list(row.components) for row in data.rows]
    return dumper.represent_sequence(_local_tag(data.tag), rows, flow_style=True)


def _represent_bitset(dumper, data):
    return dumper.represent_sequence(_local_tag(data.tag), list(data.bits), flow_style=True)


def _represent_sequence(dumper, data):
    return dumper.represent_sequence(SEQ_TAG, list(data.items), flow_style=True)


def _represent_unknown(dumper, data):
    return dumper.represent_scalar(_local_tag(data.tag), data.text, style=_scalar_style(dumper, data.text))


def _represent_placeholder(dumper, data):
    return dumper.represent_scalar(_local_tag(data.tag), data.reason)


def _represent_node_header(dumper, data):
    return dumper.represent_scalar(_local_tag(data.kind), data.class_name, style=_scalar_style(dumper, data.class_name))


TaggedDumper.add_representer(str, _represent_text)
TaggedDumper.add_representer(Int, _represent_int)
TaggedDumper.add_representer(Float, _represent_float)
TaggedDumper.add_representer(Bool, _represent_bool)
TaggedDumper.add_representer(String, _represent_string)
TaggedDumper.add_representer(Symbol, _represent_symbol)
TaggedDumper.add_representer(Color, _represent_color)
TaggedDumper.add_representer(Point2, _represent_point)
TaggedDumper.add_representer(Point3, _represent_point)
TaggedDumper.add_representer(Point4, _represent_point)
TaggedDumper.add_representer(Matrix3, _represent_matrix)
TaggedDumper.add_representer(BitSet, _represent_bitset)
TaggedDumper.add_representer(Sequence, _represent_sequence)
TaggedDumper.add_representer(Unknown, _represent_unknown)
TaggedDumper.add_representer(Placeholder, _represent_placeholder)
TaggedDumper.add_representer(NodeHeader, _represent_node_header)


def dump_entry(key: str, value, dumper_class=TaggedDumper) -> str:
    """Render a single `key: value` mapping entry on one line"""
    return yaml.dump(
        {key: value},
        Dumper=dumper_class,
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
        width=float('inf')
    )


def render_key(key: str, dumper_class=TaggedDumper) -> str:
    """Render a mapping key the way PyYAML would, quoting when needed"""
    text = yaml.dump(key, Dumper=dumper_class, allow_unicode=True, width=float('inf'))
    return text.split('\n', 1)[0]


class TaggedLoader(yaml.SafeLoader):
    """SafeLoader with constructors for the value model tags"""


def _construct_symbol(loader, node):
    return Symbol(loader.construct_scalar(node))


def _construct_color(loader, node):
    return Color(*loader.construct_sequence(node, deep=True))


def _point_constructor(point_class):
    def construct(loader, node):
        return point_class(*loader.construct_sequence(node, deep=True))
    return construct


def _construct_matrix(loader, node):
    return Matrix3.from_rows(loader.construct_sequence(node, deep=True))


def _construct_bitset(loader, node):
    return BitSet(tuple(loader.construct_sequence(node, deep=True)))


def _construct_unknown(loader, node):
    return Unknown(loader.construct_scalar(node))


def _construct_placeholder(loader, node):
    return Placeholder(loader.construct_scalar(node))


def _node_constructor(kind):
    def construct(loader, node):
        if isinstance(node, yaml.ScalarNode):
            return NodeHeader(kind, loader.construct_scalar(node))
        mapping = loader.construct_mapping(node, deep=True)
        class_name = mapping.pop(CLASS_KEY, '')
        return DecodedNode(
            kind=kind,
            class_name=class_name,
            entries={unescape_key(str(key)): to_classified(value) for key, value in mapping.items()}
        )
    return construct


TaggedLoader.add_constructor(_local_tag(Symbol.tag), _construct_symbol)
TaggedLoader.add_constructor(_local_tag(Color.tag), _construct_color)
TaggedLoader.add_constructor(_local_tag(Point2.tag), _point_constructor(Point2))
TaggedLoader.add_constructor(_local_tag(Point3.tag), _point_constructor(Point3))
TaggedLoader.add_constructor(_local_tag(Point4.tag), _point_constructor(Point4))
TaggedLoader.add_constructor(_local_tag(Matrix3.tag), _construct_matrix)
TaggedLoader.add_constructor(_local_tag(BitSet.tag), _construct_bitset)
TaggedLoader.add_constructor(_local_tag(Unknown.tag), _construct_unknown)
TaggedLoader.add_constructor(_local_tag(Placeholder.tag), _construct_placeholder)
for _kind in sorted(NODE_KIND_TAGS | {NODELIST_TAG}):
    TaggedLoader.add_constructor(_local_tag(_kind), _node_constructor(_kind))


def to_classified(value):
    """Convert a loaded native YAML value into the value model"""
    if isinstance(value, (ClassifiedValue, Placeholder, DecodedNode, NodeHeader)):
        return value
    if isinstance(value, bool):
        return Bool(value)
    if isinstance(value, int):
        return Int(value)
    if isinstance(value, float):
        return Float(value)
    if isinstance(value, str):
        return String(value)
    if isinstance(value, list):
        return Sequence(tuple(to_classified(item) for item in value))
    return Unknown(value)


def load_document(text: str) -> dict:
    """Parse a YAML document into an ordered dict of loaded values"""
    data = yaml.load(text, Loader=TaggedLoader)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Expected a mapping document, got {type(data).__name__}")
    return data
