#!/usr/bin/env python3
"""
Exporters Module
Format styles for encoded material documents (flow-mapping JSON,
tagged-scalar YAML, prefixed-key YAML)
"""

from .base_exporter import BaseExporter
from .flow_mapping_exporter import FlowMappingExporter
from .tagged_scalar_exporter import TaggedScalarExporter
from .prefixed_key_exporter import PrefixedKeyExporter

# Style name -> exporter class
STYLES = {
    'flow': FlowMappingExporter,
    'tagged': TaggedScalarExporter,
    'prefixed': PrefixedKeyExporter,
}

STYLE_ALIASES = {
    'flow-mapping': 'flow',
    'json': 'flow',
    'tagged-scalar': 'tagged',
    'yaml': 'tagged',
    'prefixed-key': 'prefixed',
}


def resolve_style(style):
    """Normalize a style name or alias

    Raises:
        ValueError: If the style is not known
    """
    name = STYLE_ALIASES.get(str(style).lower(), str(style).lower())
    if name not in STYLES:
        raise ValueError(
            f"Unsupported format style: {style}\n"
            f"Supported styles: {', '.join(sorted(STYLES))}"
        )
    return name


def create_exporter(style, progress_callback=None):
    """Factory function to create the exporter for a format style

    Args:
        style: Style name ('flow', 'tagged', 'prefixed') or alias
        progress_callback: Optional progress callback

    Returns:
        BaseExporter: Exporter instance
    """
    return STYLES[resolve_style(style)](progress_callback)


def encode(path, value, style):
    """Encode one keyed value in the given style

    Args:
        path: Key path (tuple of segments)
        value: ClassifiedValue to render
        style: Style name or BaseExporter instance

    Returns:
        str: Text fragment
    """
    exporter = style if isinstance(style, BaseExporter) else create_exporter(style)
    return exporter.encode(tuple(path), value)


__all__ = [
    'BaseExporter',
    'FlowMappingExporter',
    'TaggedScalarExporter',
    'PrefixedKeyExporter',
    'STYLES',
    'STYLE_ALIASES',
    'create_exporter',
    'encode',
    'resolve_style',
]
