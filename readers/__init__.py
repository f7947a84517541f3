#!/usr/bin/env python3
"""
Readers Module
Material library readers for different host formats (Maya ASCII, USD)
"""

from pathlib import Path

from .base_reader import BaseReader

# Supported file extensions
MAYA_EXTENSIONS = {'.ma'}
USD_EXTENSIONS = {'.usd', '.usda', '.usdc'}
SUPPORTED_EXTENSIONS = MAYA_EXTENSIONS | USD_EXTENSIONS


def create_reader(input_file):
    """Factory function to create appropriate reader based on file extension

    Args:
        input_file: Path to input material library

    Returns:
        BaseReader: MayaReader or USDReader instance

    Raises:
        ValueError: If file extension is not supported
    """
    path = Path(input_file)
    ext = path.suffix.lower()

    if ext in MAYA_EXTENSIONS:
        # Lazy import to avoid loading parser when not needed
        from .maya_reader import MayaReader
        return MayaReader(input_file)
    elif ext in USD_EXTENSIONS:
        # Lazy import to avoid requiring USD when only using Maya files
        from .usd_reader import USDReader
        return USDReader(input_file)
    else:
        raise ValueError(
            f"Unsupported file format: {ext}\n"
            f"Supported formats: {', '.join(sorted(SUPPORTED_EXTENSIONS))}"
        )


def get_file_type(input_file):
    """Get the file type string for a given file

    Args:
        input_file: Path to input material library

    Returns:
        str: 'maya', 'usd', or 'unknown'
    """
    ext = Path(input_file).suffix.lower()
    if ext in MAYA_EXTENSIONS:
        return 'maya'
    elif ext in USD_EXTENSIONS:
        return 'usd'
    return 'unknown'


def is_supported_format(input_file):
    """Check if a file has a supported format

    Args:
        input_file: Path to input material library

    Returns:
        bool: True if format is supported
    """
    ext = Path(input_file).suffix.lower()
    return ext in SUPPORTED_EXTENSIONS


__all__ = [
    'BaseReader',
    'create_reader',
    'get_file_type',
    'is_supported_format',
    'MAYA_EXTENSIONS',
    'USD_EXTENSIONS',
    'SUPPORTED_EXTENSIONS',
]
