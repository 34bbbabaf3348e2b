"""Release catalog: packages, releases, distributions and lazy metadata."""

from .builder import from_index
from .models import Distribution, DistributionKind, MetadataState, Package, Release, WheelTag
from .resolver import load_metadata, resolve_metadata, store_metadata
from .selection import Selection, check_selector, find_releases, pick_distribution, preferred_distribution, releases_matching

__all__ = [
    "Distribution",
    "DistributionKind",
    "MetadataState",
    "Package",
    "Release",
    "Selection",
    "WheelTag",
    "check_selector",
    "find_releases",
    "from_index",
    "load_metadata",
    "pick_distribution",
    "preferred_distribution",
    "releases_matching",
    "resolve_metadata",
    "store_metadata",
]
