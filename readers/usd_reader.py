#!/usr/bin/env python3
"""
USD Reader Module
UsdShade material reading implementing the BaseReader interface

Materials are UsdShade.Material prims in stage traversal order. A node's
properties are its authored attributes (info:id, inputs:*, outputs:*); an
attribute with connections reads as the connected source prim, which the
walker then expands as a texture map or object node.
"""

from typing import Any, List, Optional

import numpy as np

from core.value_types import Color, NodeKind, Symbol

from .base_reader import BaseReader


class USDReader(BaseReader):
    """USD file reader implementing the BaseReader interface

    Reads USD files (.usd, .usda, .usdc) and exposes their UsdShade networks
    through the generic property interface used by the export core.
    """

    def __init__(self, usd_file: str):
        """Open USD stage and initialize

        Args:
            usd_file: Path to USD file (.usd, .usda, .usdc)
        """
        super().__init__(usd_file)

        # Import USD libraries
        try:
            from pxr import Usd, UsdShade, Sdf, Gf
            self.Usd = Usd
            self.UsdShade = UsdShade
            self.Sdf = Sdf
            self.Gf = Gf
        except ImportError as e:
            raise ImportError(
                f"USD Python library (pxr) not found: {e}\n"
                "Install with: pip install usd-core"
            )

        self.stage = Usd.Stage.Open(str(self.file_path))
        if not self.stage:
            raise ValueError(f"Failed to open USD file: {usd_file}")

        self._vector_types = tuple(
            getattr(Gf, f"Vec{n}{suffix}") for n in (2, 3, 4) for suffix in "dfhi"
        )
        self._matrix_types = (Gf.Matrix3d, Gf.Matrix3f, Gf.Matrix4d, Gf.Matrix4f)

    def get_format_name(self) -> str:
        """Return human-readable format name"""
        return "USD"

    def get_materials(self) -> List[Any]:
        """Get all UsdShade.Material prims in traversal order (cached)"""
        if self._materials_cache is None:
            self._materials_cache = [
                prim for prim in self.stage.Traverse()
                if prim.IsA(self.UsdShade.Material)
            ]
        return self._materials_cache

    def get_node_name(self, node) -> str:
        return node.GetName()

    def get_class_name(self, node) -> str:
        return str(node.GetTypeName()) or "Prim"

    def get_property_names(self, node) -> List[str]:
        """Authored attributes, in the order USD reports them"""
        return [
            attr.GetName() for attr in node.GetAttributes()
            if attr.HasAuthoredValue() or attr.HasAuthoredConnections()
        ]

    def get_property(self, node, name: str) -> Any:
        """Read an attribute value, or the connected source prim(s)

        Raises:
            KeyError: If the attribute does not exist
            ValueError: If the attribute has neither a value nor a connection
        """
        attr = node.GetAttribute(name)
        if not attr:
            raise KeyError(name)

        connections = attr.GetConnections()
        if connections:
            sources = [self.stage.GetPrimAtPath(path.GetPrimPath()) for path in connections]
            return sources[0] if len(sources) == 1 else sources

        value = attr.Get()
        if value is None:
            raise ValueError(f"No value authored for {attr.GetPath()}")

        type_name = attr.GetTypeName()
        if type_name.isArray:
            return [self._convert(item, type_name.role) for item in value]
        if type_name == self.Sdf.ValueTypeNames.Token:
            return Symbol(str(value))
        return self._convert(value, type_name.role)

    def _convert(self, value, role: str) -> Any:
        """Convert Gf / Sdf values into plain Python and numpy values"""
        if isinstance(value, self.Sdf.AssetPath):
            return value.path
        if isinstance(value, self._matrix_types):
            size = 3 if isinstance(value, (self.Gf.Matrix3d, self.Gf.Matrix3f)) else 4
            return np.array([[value[i][j] for j in range(size)] for i in range(size)])
        if isinstance(value, self._vector_types):
            components = [float(c) for c in value]
            if role == 'Color' and len(components) in (3, 4):
                # USD colors are 0-1 floats
                rgba = [c * 255.0 for c in components]
                if len(rgba) == 3:
                    rgba.append(255.0)
                return Color(*rgba)
            return np.array(components)
        return value

    def get_node_kind(self, value: Any) -> Optional[NodeKind]:
        if not isinstance(value, self.Usd.Prim) or not value.IsValid():
            return None
        if value.IsA(self.UsdShade.Material):
            return NodeKind.MATERIAL
        if value.IsA(self.UsdShade.Shader):
            shader_id = self.UsdShade.Shader(value).GetShaderId() or ''
            if 'Texture' in shader_id:
                return NodeKind.TEXTUREMAP
        return NodeKind.OBJECT

    def node_identity(self, node):
        # Python prim objects are fresh wrappers on every lookup
        return str(node.GetPath())
