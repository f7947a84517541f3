"""
Tests for the three format styles: literal grammar and decoding.
"""

import json
import math

import pytest

from core.graph_walker import GraphWalker
from core.output_sink import OutputSink
from core.reflector import Reflector
from core.value_types import (
    BitSet, Bool, Color, Float, Int, Matrix3, NodeKind, NodeReference,
    Placeholder, Point2, Point3, Point4, Sequence, String, Symbol, Unknown
)
from exporters import (
    STYLES, FlowMappingExporter, PrefixedKeyExporter, TaggedScalarExporter,
    create_exporter, encode, resolve_style
)
from exporters.flow_mapping_exporter import format_float
from exporters.prefixed_key_exporter import escape_segment, split_key

from conftest import FakeReader, material, sub_object, texturemap


SAMPLE_VALUES = {
    "count": Int(3),
    "negative": Int(-12),
    "glossiness": Float(10.0),
    "blur": Float(0.5),
    "huge": Float(1e20),
    "tiny": Float(-2.5e-08),
    "positive_inf": Float(float('inf')),
    "negative_inf": Float(float('-inf')),
    "not_a_number": Float(float('nan')),
    "enabled": Bool(True),
    "disabled": Bool(False),
    "label": String("hello world"),
    "numeric_text": String("123"),
    "empty_text": String(""),
    "yes_text": String("yes"),
    "quoted": String("it's \"quoted\""),
    "filename": String("C:\\maps\\wood.png"),
    "unicode": String("Matériau ✓"),
    "next_line": String("\x85nel"),
    "line_separator": String("a\u2028b"),
    "paragraph_separator": String("a\u2029b"),
    "filtering": Symbol("pyramidal"),
    "separated_name": Symbol("pyra\u2028midal"),
    "diffuse": Color(255.0, 128.0, 0.0, 255.0),
    "offset2": Point2(0.5, -1.0),
    "position": Point3(1.0, 2.0, 3.0),
    "nan_position": Point3(float('nan'), 1.0, 2.0),
    "nan_color": Color(float('nan'), 0.0, 0.0, 255.0),
    "plane": Point4(0.0, 0.0, 1.0, -4.5),
    "transform": Matrix3.from_rows([[1.0, 0.0, 0.0], [0.0, 1.0, 0.0], [0.0, 0.0, 1.0], [5.0, 6.0, 7.0]]),
    "mapping_channels": BitSet((1, 3, 5)),
    "no_bits": BitSet(()),
    "mixed": Sequence((Int(1), String("a"), Color(1.0, 2.0, 3.0, 4.0), Sequence((Float(0.5),)))),
    "empty_list": Sequence(()),
    "opaque": Unknown("<Controller 0x7f>"),
    "opaque_with_break": Unknown("<Controller\x85 0x7f>"),
}


@pytest.fixture(params=sorted(STYLES))
def exporter(request):
    return create_exporter(request.param)


def _walk(exporter, root, max_depth=20):
    reader = FakeReader([root])
    sink = OutputSink()
    GraphWalker(Reflector(reader), exporter, max_depth=max_depth).walk(root, sink)
    return sink.finish(root.name, root.name + exporter.get_file_extension()).text


class TestRoundTrip:
    """Every value tag survives encode then decode in every style"""

    def test_all_tags(self, exporter):
        root = material("matA", **SAMPLE_VALUES)
        decoded = exporter.decode(_walk(exporter, root))

        assert decoded.name == "matA"
        assert decoded.class_name == "Standardmaterial"
        assert list(decoded.entries) == list(SAMPLE_VALUES)
        for key, value in SAMPLE_VALUES.items():
            assert decoded.entries[key] == value, key

    def test_nested_nodes(self, exporter):
        coords = sub_object("coords", blur=0.5)
        bitmap = texturemap("wood", filename="wood.png", coords=coords)
        root = material("matA", texmap_diffuse=bitmap, after=1)
        decoded = exporter.decode(_walk(exporter, root))

        texmap = decoded.lookup("texmap_diffuse")
        assert texmap.kind == "texturemap"
        assert texmap.class_name == "Bitmaptexture"
        assert decoded.lookup("texmap_diffuse", "coords").kind == "object"
        assert decoded.lookup("texmap_diffuse", "coords", "blur") == Float(0.5)
        assert decoded.lookup("texmap_diffuse", "filename") == String("wood.png")
        assert decoded.lookup("after") == Int(1)

    def test_empty_node(self, exporter):
        root = material("matA", coords=sub_object("coords"))
        decoded = exporter.decode(_walk(exporter, root))
        assert decoded.lookup("coords").kind == "object"
        assert decoded.lookup("coords").entries == {}

    def test_node_list(self, exporter):
        maps = [texturemap("a", amount=1), 7, texturemap("b", amount=2)]
        decoded = exporter.decode(_walk(exporter, material("multi", maps=maps)))

        node_list = decoded.lookup("maps")
        assert node_list.kind == "nodelist"
        assert list(node_list.entries) == ["0", "1", "2"]
        assert decoded.lookup("maps", "0", "amount") == Int(1)
        assert decoded.lookup("maps", "1") == Int(7)
        assert decoded.lookup("maps", "2").kind == "texturemap"

    def test_placeholder(self, exporter):
        root = material("loop")
        root.set("self", root)
        decoded = exporter.decode(_walk(exporter, root))
        assert decoded.lookup("self") == Placeholder("cycle")

    def test_material_name_with_special_characters(self, exporter):
        decoded = exporter.decode(_walk(exporter, material("mat: \"A\" / #1", x=1)))
        assert decoded.name == "mat: \"A\" / #1"

    def test_header_like_property_names(self, exporter):
        names = {"$class": Int(1), "$name": Int(2), "$type": Int(3), "$$x": Int(4), "next\x85line": Int(5)}
        root = material("matA", **names)
        root.set("coords", sub_object("coords", **{"$class": String("inner")}))
        decoded = exporter.decode(_walk(exporter, root))

        assert decoded.name == "matA"
        assert decoded.class_name == "Standardmaterial"
        for key, value in names.items():
            assert decoded.lookup(key) == value, key
        assert decoded.lookup("coords").class_name == "StandardUVGen"
        assert decoded.lookup("coords", "$class") == String("inner")


class TestTaggedScalar:
    """Nested YAML with local tags"""

    @pytest.fixture
    def exporter(self):
        return TaggedScalarExporter()

    def test_color_line(self, exporter):
        text = exporter.encode(("diffuse",), Color(255.0, 128.0, 0.0, 255.0))
        assert text == "diffuse: !color [255.0, 128.0, 0.0, 255.0]\n"

    def test_float_keeps_decimal_point(self, exporter):
        assert exporter.encode(("glossiness",), Float(10.0)) == "glossiness: 10.0\n"
        assert exporter.encode(("huge",), Float(1e20)) == "huge: 1.0e+20\n"

    def test_special_floats(self, exporter):
        assert exporter.encode(("a",), Float(float('inf'))) == "a: .inf\n"
        assert exporter.encode(("a",), Float(float('-inf'))) == "a: -.inf\n"
        assert exporter.encode(("a",), Float(float('nan'))) == "a: .nan\n"

    def test_symbol_and_native_scalars(self, exporter):
        assert exporter.encode(("filtering",), Symbol("pyramidal")) == "filtering: !name 'pyramidal'\n"
        assert exporter.encode(("count",), Int(3)) == "count: 3\n"
        assert exporter.encode(("enabled",), Bool(True)) == "enabled: true\n"

    def test_nested_entries_are_indented(self, exporter):
        text = exporter.encode(("texmap_diffuse", "coords", "blur"), Float(0.5))
        assert text == "    blur: 0.5\n"

    def test_placeholder_line(self, exporter):
        assert exporter.placeholder(("self",), "cycle") == "self: !placeholder 'cycle'\n"

    def test_line_separators_are_escaped(self, exporter):
        assert exporter.encode(("label",), String("a\u2028b")) == 'label: "a\\Lb"\n'

    def test_node_header(self, exporter):
        text = exporter.begin_node(("texmap_diffuse",), "texturemap", "Bitmaptexture")
        assert text == "texmap_diffuse: !texturemap\n  $class: Bitmaptexture\n"

    def test_document_header(self, exporter):
        assert exporter.begin_document("matA", "Standardmaterial") == "$name: matA\n$class: Standardmaterial\n"

    def test_rejects_node_reference(self, exporter):
        with pytest.raises(ValueError):
            exporter.encode(("texmap",), NodeReference(object(), NodeKind.TEXTUREMAP))


class TestPrefixedKey:
    """Flat YAML with dotted keys"""

    @pytest.fixture
    def exporter(self):
        return PrefixedKeyExporter()

    def test_dotted_key(self, exporter):
        text = exporter.encode(("texmap_diffuse", "coords", "blur"), Float(0.5))
        assert text == "texmap_diffuse.coords.blur: 0.5\n"

    def test_strings_are_single_quoted(self, exporter):
        text = exporter.encode(("filename",), String("C:\\maps\\wood.png"))
        assert text == "filename: 'C:\\maps\\wood.png'\n"

    def test_node_header(self, exporter):
        text = exporter.begin_node(("texmap_diffuse", "coords"), "object", "StandardUVGen")
        assert text == "texmap_diffuse.coords: !object 'StandardUVGen'\n"

    def test_property_names_containing_dots(self, exporter):
        root = material("matA", coords=sub_object("coords", **{"u.offset": 0.25}))
        root.set("v.offset", 0.75)
        decoded = exporter.decode(_walk(exporter, root))
        assert decoded.lookup("coords", "u.offset") == Float(0.25)
        assert decoded.lookup("v.offset") == Float(0.75)

    def test_dotted_name_never_shares_a_key_with_a_nested_path(self, exporter):
        root = material("matA", a=sub_object("a", b=1))
        root.set("a.b", 2)
        text = _walk(exporter, root)

        assert "a.b: 1\n" in text
        assert "a\\.b: 2\n" in text
        decoded = exporter.decode(text)
        assert decoded.lookup("a", "b") == Int(1)
        assert decoded.lookup("a.b") == Int(2)

    def test_key_escaping(self):
        assert escape_segment("C:\\maps.old") == "C:\\\\maps\\.old"
        assert escape_segment("$class") == "$$class"
        assert split_key("a.C:\\\\maps\\.old.$$class") == ["a", "C:\\maps.old", "$class"]

    def test_key_without_node_header(self, exporter):
        with pytest.raises(ValueError):
            exporter.decode("$name: 'matA'\n$class: 'Standardmaterial'\nmissing.blur: 0.5\n")


class TestFlowMapping:
    """JSON with inline typed mappings"""

    @pytest.fixture
    def exporter(self):
        return FlowMappingExporter()

    def test_typed_entry(self, exporter):
        text = exporter.encode(("glossiness",), Float(10.0))
        assert text == ',\n  "glossiness": {"type": "float", "value": 10.0}'

    def test_color_literal(self, exporter):
        assert exporter.literal(Color(255.0, 128.0, 0.0, 255.0)) == "[255.0, 128.0, 0.0, 255.0]"

    def test_sequence_items_are_typed(self, exporter):
        literal = exporter.literal(Sequence((Int(1), String("a"))))
        assert literal == '[{"type": "int", "value": 1}, {"type": "string", "value": "a"}]'

    def test_document_is_valid_json(self, exporter):
        text = _walk(exporter, material("matA", a=1, b="x"))
        data = json.loads(text)
        assert data["$name"] == "matA"
        assert data["a"] == {"type": "int", "value": 1}

    @pytest.mark.parametrize("value,expected", [
        (10.0, "10.0"),
        (0.5, "0.5"),
        (1e20, "1.0e+20"),
        (1.5e-07, "1.5e-07"),
        (float('inf'), "Infinity"),
        (float('-inf'), "-Infinity"),
    ])
    def test_format_float(self, value, expected):
        assert format_float(value) == expected

    def test_format_nan(self):
        assert format_float(math.nan) == "NaN"


class TestRegistry:
    """Style lookup and the module-level encode() helper"""

    def test_aliases(self):
        assert resolve_style("json") == "flow"
        assert resolve_style("YAML") == "tagged"
        assert resolve_style("prefixed-key") == "prefixed"

    def test_unknown_style(self):
        with pytest.raises(ValueError):
            resolve_style("xml")

    def test_encode_by_name(self):
        assert encode(["texmap_diffuse", "coords", "blur"], Float(0.5), "prefixed") == \
            "texmap_diffuse.coords.blur: 0.5\n"

    def test_encode_with_instance(self):
        assert encode(("a",), Int(1), TaggedScalarExporter()) == "a: 1\n"

    def test_extensions(self):
        assert create_exporter("flow").get_file_extension() == ".json"
        assert create_exporter("tagged").get_file_extension() == ".yaml"
        assert create_exporter("prefixed").get_file_extension() == ".yaml"
