#!/usr/bin/env python3
"""
Naming Module
Filename sanitization for exported documents.
"""

import re

INVALID_FILENAME_CHARS = re.compile(r'[\\/:*?"<>| ]')
REPEATED_UNDERSCORES = re.compile(r'_{2,}')
MAX_FILENAME_LENGTH = 200
EMPTY_NAME_PLACEHOLDER = "_unnamed_"


def sanitize(raw_name: str) -> str:
    """Make a material name safe to use as a file name

    Replaces path separators, reserved characters and spaces with '_',
    collapses runs of '_' and truncates to 200 characters. An empty result
    becomes '_unnamed_'. Applying it twice gives the same result as once.

    Args:
        raw_name: Name as reported by the host

    Returns:
        str: Sanitized file name stem
    """
    name = INVALID_FILENAME_CHARS.sub('_', raw_name or "")
    name = REPEATED_UNDERSCORES.sub('_', name)
    name = name[:MAX_FILENAME_LENGTH]
    if not name:
        return EMPTY_NAME_PLACEHOLDER
    return name
