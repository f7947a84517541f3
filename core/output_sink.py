#!/usr/bin/env python3
"""
Output Sink Module
Append-only text buffer for one material's encoded document.
"""

from dataclasses import dataclass
from typing import List, Tuple


@dataclass(frozen=True)
class EncodedDocument:
    """Finished encoding of one top-level material

    Attributes:
        material_name: Name of the material as reported by the host
        file_name: Output file name (sanitized name + extension)
        fragments: Encoder fragments in traversal order
    """
    material_name: str
    file_name: str
    fragments: Tuple[str, ...]

    @property
    def text(self) -> str:
        return "".join(self.fragments)


class OutputSink:
    """Growable append-only buffer

    Fragments are kept in the order they were appended; there is no random
    access or rewriting. finish() seals the buffer.
    """

    def __init__(self):
        self._fragments: List[str] = []
        self._finished = False

    def append(self, fragment: str):
        """Append one encoder fragment

        Raises:
            RuntimeError: If the sink has already been finished
        """
        if self._finished:
            raise RuntimeError("Cannot append to a finished OutputSink")
        if fragment:
            self._fragments.append(fragment)

    def __len__(self):
        return sum(len(fragment) for fragment in self._fragments)

    def finish(self, material_name: str, file_name: str) -> EncodedDocument:
        """Seal the buffer and return the immutable document"""
        self._finished = True
        return EncodedDocument(
            material_name=material_name,
            file_name=file_name,
            fragments=tuple(self._fragments)
        )
