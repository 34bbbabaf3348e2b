"""Metadata extraction from distribution archives.

Locates the single core-metadata record inside a wheel
(``<name>.dist-info/METADATA``) or a source archive (``<top>/PKG-INFO``) and
parses its email-style headers. The long description body is discarded.
"""
from __future__ import annotations

import dataclasses
import io
import logging
import lzma
import re
import tarfile
import zipfile
import zlib
from enum import Enum
from typing import Dict, List, Tuple

from packaging.metadata import parse_email

from constants import Constants
from common.errors import MalformedArchive, MissingMetadataRecord, UnparsableField
from common.logging_utils import extra_context, is_debug_enabled
from .wheel_contents import inspect_wheel
from .models import DistributionMetadata
from .requirements import parse_dependencies

logger = logging.getLogger(__name__)


class ArchiveKind(Enum):
    """Archive layouts the extractor understands."""
    WHEEL = "wheel"
    SDIST_TAR = "sdist-tar"
    SDIST_ZIP = "sdist-zip"


_TAR_SUFFIXES = (".tar.gz", ".tgz", ".tar.bz2", ".tbz2", ".tar.xz", ".txz", ".tar")

_RECORD_PATTERNS = {
    ArchiveKind.WHEEL: re.compile(r"^[^/]+\.dist-info/METADATA$"),
    ArchiveKind.SDIST_TAR: re.compile(r"^[^/]+/PKG-INFO$"),
    ArchiveKind.SDIST_ZIP: re.compile(r"^[^/]+/PKG-INFO$"),
}

# Header names whose loss is worth reporting; anything else unparsed is ignored.
_REPORTED_HEADERS = {
    "version", "summary", "license", "license-expression", "author", "author-email",
    "maintainer", "maintainer-email", "keywords", "classifier", "requires-dist",
    "requires-python", "project-url", "home-page", "download-url", "provides-extra",
}

_ZIP_ERRORS = (zipfile.BadZipFile, zipfile.LargeZipFile, EOFError, OSError, RuntimeError, NotImplementedError, zlib.error)
_TAR_ERRORS = (tarfile.TarError, EOFError, OSError, zlib.error, lzma.LZMAError)


def archive_kind_for(filename: str) -> ArchiveKind:
    """Infer the archive layout from a distribution file name.

    Raises:
        MalformedArchive: For file types that carry no readable record.
    """
    lower = (filename or "").lower()
    if lower.endswith(".whl"):
        return ArchiveKind.WHEEL
    if lower.endswith(_TAR_SUFFIXES):
        return ArchiveKind.SDIST_TAR
    if lower.endswith(".zip"):
        return ArchiveKind.SDIST_ZIP
    raise MalformedArchive(f"unsupported archive type: {filename}")


def _strip_dot(name: str) -> str:
    return name[2:] if name.startswith("./") else name


def _single_record(names: List[str], kind: ArchiveKind) -> str:
    pattern = _RECORD_PATTERNS[kind]
    candidates = sorted({_strip_dot(n) for n in names if pattern.match(_strip_dot(n))})
    if len(candidates) != 1:
        raise MissingMetadataRecord(
            f"expected exactly one metadata record in {kind.value} archive, found {len(candidates)}"
        )
    return candidates[0]


def _extract_zip(data: bytes, kind: ArchiveKind) -> DistributionMetadata:
    try:
        with zipfile.ZipFile(io.BytesIO(data)) as zf:
            record_name = _single_record(zf.namelist(), kind)
            info = zf.getinfo(record_name)
            if info.file_size > Constants.MAX_RECORD_BYTES:
                raise MalformedArchive(f"metadata record {record_name} is too large")
            metadata = parse_metadata(zf.read(info))
            if kind is ArchiveKind.WHEEL:
                dist_info = record_name.rsplit("/", 1)[0]
                packages, executables = inspect_wheel(zf, dist_info)
                metadata = dataclasses.replace(metadata, top_level_names=packages, executables=executables)
            return metadata
    except _ZIP_ERRORS as exc:
        raise MalformedArchive(f"unreadable zip archive: {exc}") from exc


def _extract_tar(data: bytes) -> DistributionMetadata:
    try:
        with tarfile.open(fileobj=io.BytesIO(data), mode="r:*") as tf:
            members = {}
            for member in tf.getmembers():
                if member.isfile():
                    name = member.name[2:] if member.name.startswith("./") else member.name
                    members[name] = member
            record_name = _single_record(list(members), ArchiveKind.SDIST_TAR)
            member = members[record_name]
            if member.size > Constants.MAX_RECORD_BYTES:
                raise MalformedArchive(f"metadata record {record_name} is too large")
            handle = tf.extractfile(member)
            if handle is None:
                raise MalformedArchive(f"metadata record {record_name} is not a regular file")
            raw = handle.read()
    except _TAR_ERRORS as exc:
        raise MalformedArchive(f"unreadable tar archive: {exc}") from exc
    return parse_metadata(raw)


def extract(archive_bytes: bytes, archive_kind: ArchiveKind) -> DistributionMetadata:
    """Extract normalized metadata from an archive held in memory.

    Args:
        archive_bytes: The complete archive contents.
        archive_kind: Layout of the archive, see ``archive_kind_for``.

    Returns:
        DistributionMetadata: The parsed record.

    Raises:
        MalformedArchive: If the bytes are not a readable archive.
        MissingMetadataRecord: If zero or several candidate records exist.
        UnparsableField: If the record has no usable ``Name``.
    """
    if not archive_bytes:
        raise MalformedArchive("empty archive")
    if archive_kind is ArchiveKind.SDIST_TAR:
        metadata = _extract_tar(archive_bytes)
    else:
        metadata = _extract_zip(archive_bytes, archive_kind)

    if is_debug_enabled(logger):
        logger.debug(
            "Metadata extracted",
            extra=extra_context(
                event="parse",
                component="extractor",
                action="extract",
                outcome="success",
                package=metadata.name,
                count=len(metadata.dependencies),
            )
        )
    return metadata


def _project_urls(raw: Dict, unparsed: Dict[str, List[str]]) -> Dict[str, str]:
    urls: Dict[str, str] = {}
    if raw.get("home_page"):
        urls["Homepage"] = raw["home_page"]
    if raw.get("download_url"):
        urls["Download"] = raw["download_url"]
    for label, url in (raw.get("project_urls") or {}).items():
        urls.setdefault(label, url)
    # Duplicate labels make the strict parser give up; keep the first of each.
    for key, values in unparsed.items():
        if key.lower() != "project-url":
            continue
        for value in values:
            label, _, url = value.partition(",")
            if label.strip() and url.strip():
                urls.setdefault(label.strip(), url.strip())
    return urls


def parse_metadata(record: bytes) -> DistributionMetadata:
    """Parse a METADATA / PKG-INFO record.

    Fields that cannot be decoded are skipped and listed in
    ``skipped_fields``; malformed dependency lines are skipped and counted.

    Raises:
        UnparsableField: If the record carries no single, parsable ``Name``.
    """
    raw, unparsed = parse_email(record)
    name = raw.get("name")
    if not name or not name.strip():
        raise UnparsableField("metadata record has no usable Name field")

    skipped: Tuple[str, ...] = tuple(
        sorted(
            key for key in unparsed
            if key.lower() in _REPORTED_HEADERS and key.lower() != "project-url"
        )
    )
    if skipped:
        logger.warning("Skipped unreadable metadata fields for %s: %s", name, ", ".join(skipped))

    dependencies, skipped_dependencies = parse_dependencies(raw.get("requires_dist") or [])
    if skipped_dependencies:
        logger.warning("Skipped %d malformed dependency line(s) for %s", skipped_dependencies, name)

    return DistributionMetadata(
        name=name.strip(),
        version=raw.get("version"),
        metadata_version=raw.get("metadata_version"),
        summary=raw.get("summary"),
        license=raw.get("license"),
        license_expression=raw.get("license_expression"),
        author=raw.get("author"),
        author_email=raw.get("author_email"),
        maintainer=raw.get("maintainer"),
        maintainer_email=raw.get("maintainer_email"),
        keywords=tuple(k for k in (raw.get("keywords") or []) if k),
        classifiers=tuple(raw.get("classifiers") or []),
        project_urls=_project_urls(raw, unparsed),
        requires_python=raw.get("requires_python"),
        dependencies=tuple(dependencies),
        provides_extras=tuple(raw.get("provides_extra") or []),
        skipped_dependencies=skipped_dependencies,
        skipped_fields=skipped,
    )
