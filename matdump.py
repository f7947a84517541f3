#!/usr/bin/env python3
"""
MaterialDump - Command Line Version
Export every material of a library to typed text documents (JSON / YAML)
"""

import argparse
import sys
from pathlib import Path

from core.config import load_settings
from exporters import STYLES, STYLE_ALIASES
from material_converter import MaterialLibraryConverter
from readers import SUPPORTED_EXTENSIONS, is_supported_format


def build_parser():
    parser = argparse.ArgumentParser(
        prog='MaterialDump',
        description='Export materials from Maya ASCII (.ma) or USD (.usd/.usda/.usdc) files '
                    'to one typed text document per material',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Tagged-scalar YAML (default)
  python matdump.py library.ma --output-dir ./materials

  # Flat dotted keys, single-quoted strings
  python matdump.py library.usda --output-dir ./materials --style prefixed

  # JSON, shallower traversal, settings file
  python matdump.py library.ma --output-dir ./out --style flow --max-depth 8 --config export.yaml

Format styles:
  flow      - JSON, every value as {"type": ..., "value": ...}   (.json)
  tagged    - nested YAML with !color / !point3 / ... tags       (.yaml)
  prefixed  - flat YAML keyed by dotted property paths           (.yaml)
        """
    )

    parser.add_argument('input', type=str, help='Input library file (.ma, .usd, .usda, .usdc)')
    parser.add_argument('--output-dir', type=str, required=True,
                        help='Output directory (one file per material)')
    parser.add_argument('--style', choices=sorted(set(STYLES) | set(STYLE_ALIASES)),
                        help='Format style (default: tagged)')
    parser.add_argument('--max-depth', type=int,
                        help='Maximum node depth to expand (default: 20)')
    parser.add_argument('--config', type=str,
                        help='YAML settings file (style, max_depth, read_error_placeholders, encoding)')
    parser.add_argument('--placeholder-on-read-error', action='store_true', default=None,
                        help='Write a placeholder for unreadable properties instead of skipping them')
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    # Validate input file exists
    input_path = Path(args.input)
    if not input_path.exists():
        print(f"Error: Input file not found: {args.input}", file=sys.stderr)
        sys.exit(1)

    # Validate file extension
    if not is_supported_format(input_path):
        print(f"Error: Unsupported file format: {input_path.suffix.lower()}", file=sys.stderr)
        print(f"Supported formats: {', '.join(sorted(SUPPORTED_EXTENSIONS))}", file=sys.stderr)
        sys.exit(1)

    try:
        settings = load_settings(
            args.config,
            style=args.style,
            max_depth=args.max_depth,
            read_error_placeholders=args.placeholder_on_read_error
        )
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    converter = MaterialLibraryConverter(settings)
    results = converter.convert(str(input_path), args.output_dir)

    if results.get('success'):
        print("\n" + "="*60)
        print("✓ Material export completed!")
        print(f"✓ Files: {len(results['files'])} in {args.output_dir}")
        print("="*60)
    else:
        print("\n✗ Some materials failed:", file=sys.stderr)
        print(f"   {results.get('message', 'Check log above')}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
