#!/usr/bin/env python3
"""
Core Module
Format-agnostic value model, graph traversal and export settings.
"""

from .config import DEFAULTS, ExportSettings, load_settings
from .errors import (
    ExportError,
    IntrospectionError,
    PropertyReadError,
    CoercionError,
    WriteError,
)
from .graph_walker import GraphWalker, VisitState, DEFAULT_MAX_DEPTH
from .naming import sanitize
from .output_sink import EncodedDocument, OutputSink
from .reflector import Reflector
from .type_classifier import TypeClassifier
from .value_types import (
    ClassifiedValue,
    DecodedNode,
    NodeKind,
    NodeReference,
    Placeholder,
    PropertyEntry,
)

__all__ = [
    'DEFAULTS',
    'ExportSettings',
    'load_settings',
    'ExportError',
    'IntrospectionError',
    'PropertyReadError',
    'CoercionError',
    'WriteError',
    'GraphWalker',
    'VisitState',
    'DEFAULT_MAX_DEPTH',
    'sanitize',
    'EncodedDocument',
    'OutputSink',
    'Reflector',
    'TypeClassifier',
    'ClassifiedValue',
    'DecodedNode',
    'NodeKind',
    'NodeReference',
    'Placeholder',
    'PropertyEntry',
]
