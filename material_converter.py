#!/usr/bin/env python3
"""
Material Library Converter - Main Orchestrator Module
Coordinates material export using modular readers and format styles
Supports Maya ASCII (.ma) and USD (.usd, .usda, .usdc) input

Each top-level material gets a fresh OutputSink, one full graph walk and one
output file. Traversal failures are isolated inside the walk; a failed file
write is recorded for that material only and the batch carries on.
"""

import traceback
from pathlib import Path

from core.config import ExportSettings, load_settings
from core.graph_walker import GraphWalker
from core.naming import sanitize
from core.output_sink import EncodedDocument, OutputSink
from core.reflector import Reflector
from exporters import create_exporter
from readers import create_reader, get_file_type


class MaterialLibraryConverter:
    """Material library exporter (orchestrator/facade)

    This class coordinates the conversion process:
    1. Read input library ONCE (via readers module - supports Maya ASCII and USD)
    2. Walk every top-level material in library order (via GraphWalker)
    3. Write one document per material (via the selected format style)
    """

    def __init__(self, settings: ExportSettings = None, progress_callback=None):
        """Initialize converter

        Args:
            settings: Export settings (default: built-in defaults)
            progress_callback: Optional function to call for progress updates
                              Signature: callback(message: str) -> None
        """
        self.settings = settings or load_settings()
        self.progress_callback = progress_callback

    def log(self, message):
        """Send progress updates to callback"""
        if self.progress_callback:
            self.progress_callback(message)
        print(message)

    def encode_material(self, reader, material, exporter=None) -> EncodedDocument:
        """Encode one material into a finished document

        Args:
            reader: BaseReader the material came from
            material: Material handle
            exporter: Format style (default: from settings)

        Returns:
            EncodedDocument: Immutable encoded document
        """
        exporter = exporter or create_exporter(self.settings.style, self.progress_callback)
        reflector = Reflector(reader)
        walker = GraphWalker(
            reflector,
            exporter,
            max_depth=self.settings.max_depth,
            read_error_placeholders=self.settings.read_error_placeholders,
            progress_callback=self.progress_callback
        )
        sink = OutputSink()
        walker.walk(material, sink)

        name = reflector.node_name(material)
        return sink.finish(name, sanitize(name) + exporter.get_file_extension())

    def export_library(self, reader, output_dir):
        """Export every material of an open library

        Args:
            reader: BaseReader instance
            output_dir: Directory for output files

        Returns:
            dict: Results with keys:
                - 'success': bool (True when no material failed)
                - 'files': list of written file paths
                - 'failed': list of material names that could not be encoded or written
                - 'message': Summary message

        Raises:
            ValueError: If the output directory cannot be created
        """
        exporter = create_exporter(self.settings.style, self.progress_callback)
        output_path = exporter.validate_output_path(output_dir)

        try:
            materials = list(reader.get_materials())
        except Exception as e:
            self.log(f"✗ Cannot enumerate materials: {e}")
            return {
                'success': False,
                'files': [],
                'failed': [],
                'message': f"Cannot enumerate materials: {e}"
            }

        self.log(f"  Library: {reader.get_format_name()}")
        self.log(f"  Materials: {len(materials)}")
        self.log(f"  Style: {exporter.get_format_name()}")

        files = []
        failed = []
        used_names = set()

        for index, material in enumerate(materials, 1):
            try:
                document = self.encode_material(reader, material, exporter)
            except Exception as e:
                label = Reflector(reader).node_name(material) or f"material {index}"
                self.log(f"\n[{index}/{len(materials)}] {label}")
                self.log(f"  ✗ {label}: encoding failed: {e}")
                failed.append(label)
                continue
            label = document.material_name or document.file_name
            self.log(f"\n[{index}/{len(materials)}] {label}")

            if document.file_name in used_names:
                self.log(f"  ⚠ Duplicate output name {document.file_name}, overwriting")
            used_names.add(document.file_name)

            file_path = output_path / document.file_name
            if exporter.write_file(file_path, document.text, self.settings.encoding):
                files.append(str(file_path))
                self.log(f"  ✓ {document.file_name}")
            else:
                failed.append(label)
                self.log(f"  ✗ {label}: write failed")

        message = f"Exported {len(files)} of {len(materials)} material(s)"
        if failed:
            message += f", {len(failed)} failed"

        return {
            'success': not failed,
            'files': files,
            'failed': failed,
            'message': message
        }

    def convert(self, input_file, output_dir):
        """Convert a material library file into one document per material

        This is the main entry point.

        Args:
            input_file: Path to input library (.ma, .usd, .usda, .usdc)
            output_dir: Output directory

        Returns:
            dict: Results from export_library(), or a failure dict if the
                  input could not be opened or the export could not start
        """
        input_path = Path(input_file)
        file_type = get_file_type(str(input_path))

        self.log(f"\n{'='*60}")
        self.log(f"MaterialDump")
        self.log(f"{'='*60}")
        self.log(f"Input: {input_file} ({file_type})")
        self.log(f"Output: {output_dir}")
        self.log(f"{'='*60}\n")

        try:
            self.log("Step 1/2: Reading material library...")
            reader = create_reader(input_file)

            self.log("\nStep 2/2: Exporting materials...")
            results = self.export_library(reader, output_dir)

            self.log(f"\n{'='*60}")
            self.log(f"Export Complete!")
            self.log(f"{'='*60}")
            self.log(f"\nSummary:")
            self.log(f"  ✓ Succeeded: {len(results['files'])}")
            self.log(f"  ✗ Failed: {len(results['failed'])}")
            self.log(f"\n{results['message']}")
            self.log(f"{'='*60}\n")

            return results

        except Exception as e:
            self.log(f"\nERROR: {str(e)}")
            self.log(traceback.format_exc())
            return {
                'success': False,
                'files': [],
                'failed': [],
                'message': f"Conversion failed: {str(e)}"
            }
