"""
Tests for MaterialLibraryConverter: one file per material, failure isolation.
"""

from pathlib import Path

import pytest

from core.config import load_settings
from core.value_types import Float, Unknown
from exporters import create_exporter
from material_converter import MaterialLibraryConverter

from conftest import BrokenList, FakeReader, ReadFailure, material, texturemap


class TestExportLibrary:

    @pytest.fixture
    def converter(self):
        return MaterialLibraryConverter(load_settings(style="tagged"))

    def test_one_file_per_material(self, converter, fake_reader, tmp_path):
        result = converter.export_library(fake_reader, tmp_path / "out")

        assert result['success'] is True
        assert [Path(f).name for f in result['files']] == ["matA.yaml", "matB.yaml"]
        assert result['failed'] == []
        assert result['message'] == "Exported 2 of 2 material(s)"

        decoded = create_exporter("tagged").decode((tmp_path / "out" / "matA.yaml").read_text(encoding="utf-8"))
        assert decoded.lookup("texmap_diffuse", "coords", "blur") == Float(0.5)

    def test_output_is_deterministic(self, converter, fake_reader, tmp_path):
        converter.export_library(fake_reader, tmp_path / "first")
        converter.export_library(fake_reader, tmp_path / "second")
        for name in ("matA.yaml", "matB.yaml"):
            assert (tmp_path / "first" / name).read_bytes() == (tmp_path / "second" / name).read_bytes()

    def test_file_names_are_sanitized(self, converter, tmp_path):
        reader = FakeReader([material("Wood Floor/01", x=1), material("", y=2)])
        result = converter.export_library(reader, tmp_path)
        assert sorted(Path(f).name for f in result['files']) == ["Wood_Floor_01.yaml", "_unnamed_.yaml"]

    def test_write_failure_continues(self, converter, fake_reader, tmp_path):
        # A directory in the way of the first output file
        (tmp_path / "matA.yaml").mkdir()

        result = converter.export_library(fake_reader, tmp_path)

        assert result['success'] is False
        assert result['failed'] == ["matA"]
        assert [Path(f).name for f in result['files']] == ["matB.yaml"]
        assert "1 failed" in result['message']

    def test_broken_host_container_does_not_abort_the_batch(self, converter, tmp_path):
        reader = FakeReader([material("bad", x=BrokenList([1])), material("clean", y=2)])

        result = converter.export_library(reader, tmp_path)

        assert result['success'] is True
        assert [Path(f).name for f in result['files']] == ["bad.yaml", "clean.yaml"]
        decoded = create_exporter("tagged").decode((tmp_path / "bad.yaml").read_text(encoding="utf-8"))
        assert decoded.lookup("x") == Unknown("[1]")

    def test_encoding_failure_is_isolated(self, converter, tmp_path, monkeypatch):
        reader = FakeReader([material("bad", x=1), material("clean", y=2)])
        original = converter.encode_material

        def encode_material(reader, node, exporter=None):
            if node.name == "bad":
                raise RuntimeError("walk exploded")
            return original(reader, node, exporter)

        monkeypatch.setattr(converter, "encode_material", encode_material)
        result = converter.export_library(reader, tmp_path)

        assert result['success'] is False
        assert result['failed'] == ["bad"]
        assert [Path(f).name for f in result['files']] == ["clean.yaml"]
        assert "1 failed" in result['message']

    def test_enumeration_failure(self, converter, tmp_path):
        result = converter.export_library(FakeReader(fail_materials=True), tmp_path)
        assert result['success'] is False
        assert result['files'] == []
        assert "library is corrupted" in result['message']

    def test_empty_library(self, converter, tmp_path):
        result = converter.export_library(FakeReader([]), tmp_path)
        assert result['success'] is True
        assert result['files'] == []

    def test_flow_style_extension(self, fake_reader, tmp_path):
        converter = MaterialLibraryConverter(load_settings(style="flow"))
        result = converter.export_library(fake_reader, tmp_path)
        assert [Path(f).suffix for f in result['files']] == [".json", ".json"]

    def test_progress_callback(self, fake_reader, tmp_path):
        messages = []
        converter = MaterialLibraryConverter(load_settings(), progress_callback=messages.append)
        converter.export_library(fake_reader, tmp_path)
        assert any("matA" in message for message in messages)


class TestEncodeMaterial:

    def test_document(self, fake_reader):
        converter = MaterialLibraryConverter(load_settings(style="prefixed"))
        document = converter.encode_material(fake_reader, fake_reader.materials[0])

        assert document.material_name == "matA"
        assert document.file_name == "matA.yaml"
        assert "texmap_diffuse.coords.blur: 0.5\n" in document.text


class TestConvert:

    def test_unsupported_input(self, tmp_path):
        source = tmp_path / "scene.fbx"
        source.write_text("", encoding="utf-8")
        result = MaterialLibraryConverter().convert(str(source), str(tmp_path / "out"))
        assert result['success'] is False
        assert "Unsupported file format" in result['message']

    def test_output_dir_is_a_file(self, tmp_path):
        source = tmp_path / "library.ma"
        source.write_text('createNode lambert -n "matA";\n', encoding="utf-8")
        blocker = tmp_path / "out"
        blocker.write_text("", encoding="utf-8")

        result = MaterialLibraryConverter().convert(str(source), str(blocker))

        assert result['success'] is False
        assert result['files'] == []
        assert "Cannot create output directory" in result['message']


def test_read_failure_and_clean_material(tmp_path):
    broken = material("broken", first=1, second=ReadFailure(), third=texturemap("wood", amount=0.5))
    clean = material("clean", glossiness=10.0, diffuse=[0.5, 0.25, 1.0])
    reader = FakeReader([broken, clean])
    converter = MaterialLibraryConverter(load_settings(style="tagged"))

    first = converter.export_library(reader, tmp_path / "first")
    second = converter.export_library(reader, tmp_path / "second")

    assert len(first['files']) == 2 and first['success'] is True
    assert sorted(p.name for p in (tmp_path / "first").iterdir()) == ["broken.yaml", "clean.yaml"]
    assert (tmp_path / "first" / "clean.yaml").read_bytes() == (tmp_path / "second" / "clean.yaml").read_bytes()

    decoded = create_exporter("tagged").decode((tmp_path / "first" / "broken.yaml").read_text(encoding="utf-8"))
    assert list(decoded.entries) == ["first", "third"]
    assert decoded.lookup("third", "amount") == Float(0.5)
