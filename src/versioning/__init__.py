"""Version model: parsing, ordering and matching of release identifiers."""

from .models import FilterMode, ReleaseFilter, Version
from .parser import compare, has_prefix, matches, parse, parse_filter

__all__ = [
    "FilterMode",
    "ReleaseFilter",
    "Version",
    "compare",
    "has_prefix",
    "matches",
    "parse",
    "parse_filter",
]
