#!/usr/bin/env python3
"""
Errors Module
Failure taxonomy for material export.

Every error is caught at the narrowest scope it can occur in (one property,
one node, one file) and turned into a log line plus a degraded result. None of
these are allowed to escape a material library export.
"""


class ExportError(Exception):
    """Base class for all export failures"""


class IntrospectionError(ExportError):
    """Enumerating a node's property names failed

    The node is treated as having zero properties.
    """


class PropertyReadError(ExportError):
    """Reading a single property failed

    The entry is omitted (or replaced by a placeholder) and traversal continues.
    """

    def __init__(self, property_name: str, message: str):
        super().__init__(f"{property_name}: {message}")
        self.property_name = property_name


class CoercionError(ExportError):
    """An opaque value could not be rendered as text"""


class WriteError(ExportError):
    """An output file could not be created or written"""
