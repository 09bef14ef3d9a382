"""
Version normalization and comparison

Only plain dotted-numeric versions ("1", "1.2", "1.2.3.4") are compared.
Anything else compares as INVALID and is never treated as newer.
"""

import re
from enum import Enum

from packaging.version import InvalidVersion, Version

VERSION_PATTERN = re.compile(r"[0-9]+(\.[0-9]+)*")


class Comparison(str, Enum):
    LESS = "less"
    EQUAL = "equal"
    GREATER = "greater"
    INVALID = "invalid"


def clean_version(raw: str) -> str:
    """
    Strip a single leading lower-case "v"

    Examples:
        >>> clean_version("v1.2.3")
        '1.2.3'
        >>> clean_version("1.2.3")
        '1.2.3'
    """
    raw = raw or ""
    return raw[1:] if raw.startswith("v") else raw


def is_valid_version(version: str) -> bool:
    """Check a cleaned version against the dotted-numeric pattern"""
    return bool(version) and VERSION_PATTERN.fullmatch(version) is not None


def compare_versions(a: str, b: str) -> Comparison:
    """
    Compare two cleaned versions segment by segment as integers

    Args:
        a: Left-hand version
        b: Right-hand version

    Returns:
        Comparison of a relative to b, or INVALID if either fails validation
    """
    if not is_valid_version(a) or not is_valid_version(b):
        return Comparison.INVALID

    # Trailing zero segments are ignored, so "1.0" == "1.0.0"
    try:
        left, right = Version(a), Version(b)
    except InvalidVersion:
        return Comparison.INVALID

    if left > right:
        return Comparison.GREATER
    if left < right:
        return Comparison.LESS
    return Comparison.EQUAL


def is_newer(candidate: str, current: str) -> bool:
    """True only if both versions are valid and candidate is strictly greater"""
    return compare_versions(clean_version(candidate), clean_version(current)) is Comparison.GREATER
