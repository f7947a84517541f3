#!/usr/bin/env python3
"""
Maya ASCII Reader Module
Pure Python parser for Maya ASCII (.ma) shading networks implementing the
BaseReader interface.

No Maya installation required - parses the text format directly.
Shader nodes (lambert, blinn, standardSurface, ...) are the top-level
materials; texture nodes reached through connectAttr are texture maps, and
any other connected node (place2dTexture, bump2d, ...) is a plain object.
"""

import re
import shlex
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import numpy as np

from core.value_types import Color, NodeKind

from .base_reader import BaseReader


SHADER_TYPES = {
    'lambert', 'blinn', 'phong', 'phongE', 'anisotropic', 'layeredShader',
    'rampShader', 'surfaceShader', 'useBackground', 'shadingMap',
    'standardSurface', 'aiStandardSurface', 'aiFlat', 'aiLambert',
    'aiStandardHair', 'aiToon', 'openPBRSurface', 'usdPreviewSurface',
}

TEXTURE_TYPES = {
    'file', 'checker', 'ramp', 'noise', 'fractal', 'grid', 'bulge', 'cloth',
    'mountain', 'water', 'layeredTexture', 'psdFileTex', 'movie', 'projection',
    'envBall', 'envChrome', 'envCube', 'envSky', 'envSphere', 'brownian',
    'cloud', 'crater', 'granite', 'leather', 'marble', 'rock', 'snow',
    'solidFractal', 'stucco', 'volumeNoise', 'wood', 'aiImage', 'aiNoise',
}

# Attributes whose 3-component values are colors, by long and short name
COLOR_ATTRIBUTES = {
    'color', 'c', 'transparency', 'it', 'ambientColor', 'ambc', 'incandescence', 'ic',
    'specularColor', 'sc', 'reflectedColor', 'rc', 'outColor', 'oc',
    'colorGain', 'cg', 'colorOffset', 'co', 'defaultColor', 'dc',
    'color1', 'c1', 'color2', 'c2', 'baseColor', 'base_color',
}

# setAttr flags that consume the following token
SET_ATTR_FLAGS_WITH_ARG = {
    '-k', '-keyable', '-l', '-lock', '-cb', '-channelBox', '-s', '-size',
    '-ca', '-caching', '-c', '-clamp', '-type', '-typ',
}

_FLAG = re.compile(r'-[A-Za-z]')
_INTEGER = re.compile(r'[-+]?\d+$')
_BOOL_WORDS = {
    'yes': True, 'on': True, 'true': True,
    'no': False, 'off': False, 'false': False,
}


@dataclass
class MayaAttribute:
    """Raw setAttr statement for one attribute

    Values are kept as text and only parsed when read, so a malformed
    statement fails that single property rather than the whole file.

    Attributes:
        name: Attribute name as written (short or long form, without the leading '.')
        value_type: -type argument (e.g. 'float3', 'string'), None for plain values
        tokens: Value tokens after the flags
        error: Tokenizer error for statements that could not be split
    """
    name: str
    value_type: Optional[str] = None
    tokens: List[str] = field(default_factory=list)
    error: Optional[str] = None


class MayaNode:
    """Parsed dependency node"""

    def __init__(self, name: str, node_type: str):
        self.name = name
        self.node_type = node_type  # 'lambert', 'file', 'place2dTexture', etc.
        self.attributes: Dict[str, MayaAttribute] = {}
        self.inputs: Dict[str, str] = {}  # destination attribute -> source node name

    def set_attribute(self, attribute: MayaAttribute):
        """Store an attribute; re-setting keeps its original position"""
        self.attributes[attribute.name] = attribute

    def __repr__(self):
        return f"MayaNode({self.name}, {self.node_type})"


class MayaScene:
    """Container for parsed Maya scene data"""

    def __init__(self):
        self.nodes: Dict[str, MayaNode] = {}
        self.connections: List[tuple] = []  # [(source, dest), ...]

    def get_node(self, name: str) -> Optional[MayaNode]:
        return self.nodes.get(name)

    def get_materials(self) -> List[MayaNode]:
        return [n for n in self.nodes.values() if n.node_type in SHADER_TYPES]


def _plug_node(plug: str) -> str:
    """Node part of a plug name: 'file1.outColor' -> 'file1'"""
    return plug.split('.', 1)[0].lstrip(':')


def _plug_attribute(plug: str) -> str:
    parts = plug.split('.', 1)
    return parts[1] if len(parts) > 1 else ''


class MayaASCIIParser:
    """Pure Python parser for Maya ASCII (.ma) file format"""

    def __init__(self):
        self.scene = MayaScene()
        self._current_node: Optional[MayaNode] = None

    def parse(self, file_path: str) -> MayaScene:
        """Parse a Maya ASCII file and return structured scene data"""
        with open(file_path, 'r', encoding='utf-8', errors='replace') as f:
            content = f.read()
        return self.parse_text(content)

    def parse_text(self, content: str) -> MayaScene:
        """Parse Maya ASCII source text"""
        self.scene = MayaScene()
        self._current_node = None

        # Process statement by statement, handling line continuations
        for line in self._preprocess_lines(content):
            line = line.strip()
            if not line or line.startswith('//'):
                continue

            if line.startswith('createNode '):
                self._parse_create_node(line)
            elif line.startswith('setAttr '):
                self._parse_set_attr(line)
            elif line.startswith('connectAttr '):
                self._parse_connect_attr(line)
            elif line.startswith('select '):
                self._parse_select(line)

        self._link_inputs()
        return self.scene

    def _preprocess_lines(self, content: str) -> List[str]:
        """Preprocess content to handle multi-line statements"""
        lines = []
        current_line = ""

        for line in content.split('\n'):
            stripped = line.strip()

            # Skip empty lines and comments when not accumulating
            if not current_line and (not stripped or stripped.startswith('//')):
                continue

            current_line += " " + stripped if current_line else stripped

            # Check if statement is complete (ends with semicolon)
            if current_line.rstrip().endswith(';'):
                lines.append(current_line)
                current_line = ""

        return lines

    def _parse_create_node(self, line: str):
        """Parse createNode command: createNode type -n "name";"""
        # Extract node type
        match = re.match(r'createNode\s+(\w+)', line)
        if not match:
            return
        node_type = match.group(1)

        # Extract node name
        name_match = re.search(r'-n\s+"([^"]+)"', line)
        if not name_match:
            name_match = re.search(r"-n\s+'([^']+)'", line)
        name = name_match.group(1) if name_match else f"unnamed_{len(self.scene.nodes)}"

        node = MayaNode(name, node_type)
        self.scene.nodes[name] = node
        self._current_node = node

    def _parse_select(self, line: str):
        """Parse select -ne :node; which redirects following setAttr lines"""
        match = re.search(r'select\s+(?:-ne\s+)?:?([\w:|]+)', line)
        self._current_node = self.scene.get_node(match.group(1)) if match else None

    def _parse_set_attr(self, line: str):
        """Parse setAttr command: setAttr [flags] ".attr" [-type "t"] values...;"""
        node = self._current_node
        if not node:
            return

        statement = line.rstrip().rstrip(';')
        try:
            tokens = shlex.split(statement)
        except ValueError as e:
            # Keep the attribute so reading it reports the problem
            attr_match = re.search(r'setAttr\s+[^"]*"\.([^"]+)"', line)
            if attr_match:
                node.set_attribute(MayaAttribute(attr_match.group(1), error=str(e)))
            return

        attr_name = None
        value_type = None
        values: List[str] = []
        i = 1
        while i < len(tokens):
            token = tokens[i]
            if not values and _FLAG.match(token):
                if token in ('-type', '-typ') and i + 1 < len(tokens):
                    value_type = tokens[i + 1]
                i += 2 if token in SET_ATTR_FLAGS_WITH_ARG else 1
                continue
            if attr_name is None:
                attr_name = token.lstrip('.')
            else:
                values.append(token)
            i += 1

        # Size-only statements (setAttr -s 4 ".cel";) carry no value
        if not attr_name or (not values and value_type != 'string'):
            return
        node.set_attribute(MayaAttribute(attr_name, value_type, values))

    def _parse_connect_attr(self, line: str):
        """Parse connectAttr command: connectAttr [flags] "source.attr" "dest.attr";"""
        try:
            tokens = shlex.split(line.rstrip().rstrip(';'))
        except ValueError:
            return
        plugs = [t for t in tokens[1:] if '.' in t and not _FLAG.match(t)]
        if len(plugs) >= 2:
            self.scene.connections.append((plugs[0], plugs[1]))

    def _link_inputs(self):
        """Record incoming connections on their destination nodes"""
        for source, dest in self.scene.connections:
            dest_node = self.scene.get_node(_plug_node(dest))
            source_name = _plug_node(source)
            if dest_node is None or source_name not in self.scene.nodes:
                continue
            dest_node.inputs[_plug_attribute(dest)] = source_name


def _parse_scalar(token: str):
    word = token.lower()
    if word in _BOOL_WORDS:
        return _BOOL_WORDS[word]
    if _INTEGER.match(token):
        return int(token)
    try:
        return float(token)
    except ValueError:
        raise ValueError(f"Cannot parse value {token!r}")


def _parse_floats(tokens: List[str], count: int) -> List[float]:
    if len(tokens) < count:
        raise ValueError(f"Expected {count} values, got {len(tokens)}")
    return [float(t) for t in tokens[:count]]


def _parse_counted(tokens: List[str], convert) -> list:
    """Array types are written as: count v1 v2 ..."""
    if not tokens:
        return []
    count = int(tokens[0])
    items = tokens[1:1 + count]
    if len(items) < count:
        raise ValueError(f"Expected {count} array items, got {len(items)}")
    return [convert(t) for t in items]


def _to_color(components: List[float]) -> Color:
    # Maya colors are 0-1 floats
    return Color(*(c * 255.0 for c in components), 255.0)


def is_color_attribute(name: str) -> bool:
    base = name.split('.')[-1].split('[')[0]
    return base in COLOR_ATTRIBUTES or base.endswith('Color')


def parse_attribute_value(attribute: MayaAttribute) -> Any:
    """Parse the stored text of an attribute

    Raises:
        ValueError: If the statement is malformed
    """
    if attribute.error:
        raise ValueError(f"Malformed setAttr statement: {attribute.error}")

    value_type = attribute.value_type
    tokens = attribute.tokens

    if value_type == 'string':
        return tokens[0] if tokens else ''
    if value_type in ('float3', 'double3'):
        components = _parse_floats(tokens, 3)
        if is_color_attribute(attribute.name):
            return _to_color(components)
        return np.array(components)
    if value_type in ('float2', 'double2', 'long2', 'short2'):
        return np.array(_parse_floats(tokens, 2))
    if value_type == 'double4':
        return np.array(_parse_floats(tokens, 4))
    if value_type == 'matrix':
        return np.array(_parse_floats(tokens, 16)).reshape(4, 4)
    if value_type in ('Int32Array', 'int32Array'):
        return _parse_counted(tokens, int)
    if value_type in ('doubleArray', 'floatArray'):
        return _parse_counted(tokens, float)
    if value_type == 'stringArray':
        return _parse_counted(tokens, str)
    if value_type is not None:
        raise ValueError(f"Unsupported attribute type {value_type!r}")

    values = [_parse_scalar(t) for t in tokens]
    if len(values) == 1:
        return values[0]
    if len(values) == 3 and is_color_attribute(attribute.name):
        return _to_color([float(v) for v in values])
    return values


class MayaReader(BaseReader):
    """Maya ASCII reader implementing BaseReader interface

    Parses .ma files without requiring Maya installation.
    Supports:
    - Shader nodes as top-level materials, in file order
    - Texture and utility nodes reached through connectAttr
    - Typed setAttr values (colors, vectors, matrices, strings, arrays)
    """

    def __init__(self, ma_file: Optional[str] = None, text: Optional[str] = None):
        """Initialize reader and parse Maya ASCII source

        Args:
            ma_file: Path to Maya ASCII (.ma) file
            text: Maya ASCII source, used instead of reading ma_file
        """
        super().__init__(ma_file)
        parser = MayaASCIIParser()
        if text is not None:
            self.scene = parser.parse_text(text)
        else:
            self.scene = parser.parse(str(self.file_path))

    def get_format_name(self) -> str:
        """Return human-readable format name"""
        return "Maya"

    def get_materials(self) -> List[MayaNode]:
        """Get all shader nodes in file order (cached)"""
        if self._materials_cache is None:
            self._materials_cache = self.scene.get_materials()
        return self._materials_cache

    def get_node_name(self, node: MayaNode) -> str:
        return node.name

    def get_class_name(self, node: MayaNode) -> str:
        return node.node_type

    def get_property_names(self, node: MayaNode) -> List[str]:
        """Set attributes in file order, then connected inputs not set explicitly"""
        names = list(node.attributes)
        names.extend(attr for attr in node.inputs if attr not in node.attributes)
        return names

    def get_property(self, node: MayaNode, name: str) -> Any:
        """Read an attribute; connected attributes return the source node

        Raises:
            KeyError: If the attribute does not exist
            ValueError: If the attribute text cannot be parsed
        """
        if name in node.inputs:
            return self.scene.nodes[node.inputs[name]]
        return parse_attribute_value(node.attributes[name])

    def get_node_kind(self, value: Any) -> Optional[NodeKind]:
        if not isinstance(value, MayaNode):
            return None
        if value.node_type in SHADER_TYPES:
            return NodeKind.MATERIAL
        if value.node_type in TEXTURE_TYPES:
            return NodeKind.TEXTUREMAP
        return NodeKind.OBJECT

    def node_identity(self, node: MayaNode):
        return node.name
