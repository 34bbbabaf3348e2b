"""Metadata extractor: core metadata records inside distribution archives."""

from .extractor import ArchiveKind, archive_kind_for, extract, parse_metadata
from .models import DependencySpecifier, DistributionMetadata, split_classifier
from .requirements import parse_dependencies, parse_dependency

__all__ = [
    "ArchiveKind",
    "DependencySpecifier",
    "DistributionMetadata",
    "archive_kind_for",
    "extract",
    "parse_dependencies",
    "parse_dependency",
    "parse_metadata",
    "split_classifier",
]
