"""
Shared fixtures: an in-memory host with nodes, references and failure hooks.
"""

import pytest

from core.value_types import NodeKind
from readers.base_reader import BaseReader


class ReadFailure:
    """Property value marker: reading the property raises"""

    def __init__(self, message="host read failed"):
        self.message = message


class BrokenList(list):
    """Host container that fails as soon as it is iterated"""

    def __iter__(self):
        raise RuntimeError("host iterable broke")


class BrokenSet(set):
    def __iter__(self):
        raise RuntimeError("host iterable broke")


class FakeNode:
    """Host node with ordered properties

    Property values may be raw Python values, other FakeNodes (references),
    lists of FakeNodes, or ReadFailure markers.
    """

    def __init__(self, name, class_name="Standardmaterial", kind=NodeKind.MATERIAL,
                 properties=None, fail_enumeration=False):
        self.name = name
        self.class_name = class_name
        self.kind = kind
        self.properties = dict(properties or {})
        self.fail_enumeration = fail_enumeration

    def set(self, name, value):
        self.properties[name] = value
        return self

    def __repr__(self):
        return f"FakeNode({self.name})"


class FakeReader(BaseReader):
    """In-memory material library"""

    def __init__(self, materials=None, fail_materials=False):
        super().__init__(None)
        self.materials = list(materials or [])
        self.fail_materials = fail_materials

    def get_format_name(self):
        return "Fake"

    def get_materials(self):
        if self.fail_materials:
            raise RuntimeError("library is corrupted")
        return self.materials

    def get_node_name(self, node):
        return node.name

    def get_class_name(self, node):
        return node.class_name

    def get_property_names(self, node):
        if node.fail_enumeration:
            raise RuntimeError("cannot enumerate")
        return list(node.properties)

    def get_property(self, node, name):
        value = node.properties[name]
        if isinstance(value, ReadFailure):
            raise RuntimeError(value.message)
        return value

    def get_node_kind(self, value):
        if isinstance(value, FakeNode):
            return value.kind
        return None


def material(name, class_name="Standardmaterial", **properties):
    return FakeNode(name, class_name, NodeKind.MATERIAL, properties)


def texturemap(name, class_name="Bitmaptexture", **properties):
    return FakeNode(name, class_name, NodeKind.TEXTUREMAP, properties)


def sub_object(name, class_name="StandardUVGen", **properties):
    return FakeNode(name, class_name, NodeKind.OBJECT, properties)


@pytest.fixture
def fake_reader():
    """Library with one textured material and one plain material"""
    coords = sub_object("coords", blur=0.5, u_tiling=2)
    bitmap = texturemap("wood_map", filename="C:\\maps\\wood.png", coords=coords)
    mat_a = material("matA", diffuse_amount=1.0, glossiness=10.0, texmap_diffuse=bitmap)
    mat_b = material("matB", class_name="PhysicalMaterial", roughness=0.25)
    return FakeReader([mat_a, mat_b])
