"""Build a Package skeleton from a JSON index document.

No archive is fetched here; every distribution starts out with unresolved
metadata.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

from packaging.utils import canonicalize_name

from constants import Constants
from common.errors import InvalidVersion, NotFound
from common.logging_utils import extra_context, is_debug_enabled
from metadata.models import DistributionMetadata
from metadata.requirements import parse_dependencies
from versioning.models import Version
from versioning.parser import parse

from .models import Distribution, DistributionKind, Package, Release

logger = logging.getLogger(__name__)

# Placeholder written by old build tools for fields left unset.
_UNKNOWN = "UNKNOWN"


def _text(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    value = value.strip()
    if not value or value == _UNKNOWN:
        return None
    return value


def _size(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int) and value >= 0:
        return value
    return None


def _split_keywords(value: Any) -> tuple:
    if isinstance(value, list):
        return tuple(k.strip() for k in value if isinstance(k, str) and k.strip())
    text = _text(value)
    if not text:
        return ()
    separator = "," if "," in text else None
    return tuple(k.strip() for k in text.split(separator) if k.strip())


def _distribution(entry: Mapping[str, Any]) -> Optional[Distribution]:
    filename = _text(entry.get("filename"))
    url = _text(entry.get("url"))
    if not filename or not url:
        return None
    packagetype = entry.get("packagetype") or ""
    kind = DistributionKind.SOURCE if packagetype == "sdist" else DistributionKind.BUILT
    digests = entry.get("digests") or {}
    return Distribution(
        filename=filename,
        url=url,
        kind=kind,
        packagetype=packagetype,
        requires_python=_text(entry.get("requires_python")),
        size=_size(entry.get("size")),
        upload_time=_text(entry.get("upload_time_iso_8601")) or _text(entry.get("upload_time")),
        sha256=_text(digests.get("sha256")) if isinstance(digests, dict) else None,
        yanked=bool(entry.get("yanked")),
        yanked_reason=_text(entry.get("yanked_reason")),
    )


def _single_source(version: Version, distributions: List[Distribution]) -> List[Distribution]:
    sources = [d for d in distributions if d.is_source]
    if len(sources) <= 1:
        return distributions
    keep = next((d for d in sources if d.filename.lower().endswith(".tar.gz")), sources[0])
    for dropped in sources:
        if dropped is not keep:
            logger.info("Ignoring extra source archive %s for %s", dropped.filename, version)
    return [d for d in distributions if not d.is_source or d is keep]


def _release(version: Version, files: Iterable[Mapping[str, Any]], info: Mapping[str, Any],
             current: Optional[Version]) -> Release:
    distributions = []
    for entry in files:
        if not isinstance(entry, dict):
            continue
        dist = _distribution(entry)
        if dist is None:
            logger.debug("Skipping index file entry without filename or url for %s", version)
            continue
        distributions.append(dist)
    distributions = _single_source(version, distributions)

    release = Release(version=version, distributions=distributions)
    if distributions and all(d.yanked for d in distributions):
        release.yanked = True
        release.yanked_reason = next((d.yanked_reason for d in distributions if d.yanked_reason), None)
    if info.get("yanked") and current is not None and current == version:
        release.yanked = True
        release.yanked_reason = release.yanked_reason or _text(info.get("yanked_reason"))
    return release


def _parse_optional(value: Any) -> Optional[Version]:
    try:
        return parse(value)
    except InvalidVersion:
        return None


def _project_urls(info: Mapping[str, Any]) -> Dict[str, str]:
    urls: Dict[str, str] = {}
    if _text(info.get("home_page")):
        urls["Homepage"] = _text(info.get("home_page"))
    if _text(info.get("download_url")):
        urls["Download"] = _text(info.get("download_url"))
    for label, url in (info.get("project_urls") or {}).items():
        if _text(label) and _text(url):
            urls.setdefault(label.strip(), url.strip())
    return urls


def index_metadata(info: Mapping[str, Any]) -> Optional[DistributionMetadata]:
    """Metadata as reported by the index for its current version."""
    name = _text(info.get("name"))
    if not name:
        return None
    dependencies, skipped = parse_dependencies(
        d for d in (info.get("requires_dist") or []) if isinstance(d, str)
    )
    return DistributionMetadata(
        name=name,
        version=_text(info.get("version")),
        summary=_text(info.get("summary")),
        license=_text(info.get("license")),
        license_expression=_text(info.get("license_expression")),
        author=_text(info.get("author")),
        author_email=_text(info.get("author_email")),
        maintainer=_text(info.get("maintainer")),
        maintainer_email=_text(info.get("maintainer_email")),
        keywords=_split_keywords(info.get("keywords")),
        classifiers=tuple(c for c in (info.get("classifiers") or []) if isinstance(c, str)),
        project_urls=_project_urls(info),
        requires_python=_text(info.get("requires_python")),
        dependencies=tuple(dependencies),
        provides_extras=tuple(e for e in (info.get("provides_extra") or []) if isinstance(e, str)),
        skipped_dependencies=skipped,
    )


def from_index(raw: Mapping[str, Any]) -> Package:
    """Build the release/distribution skeleton of a package.

    Args:
        raw: Decoded index document with ``info`` and ``releases`` (or, for
            a single-version document, ``urls``) keys.

    Returns:
        Package: Releases ordered newest first; unparsable versions are
        skipped with a warning.

    Raises:
        NotFound: If the document does not name a project.
    """
    info = raw.get("info") or {}
    name = _text(info.get("name"))
    if not name:
        raise NotFound("index document does not name a project")
    normalized = canonicalize_name(name)

    files_by_version = raw.get("releases")
    if not isinstance(files_by_version, dict):
        files_by_version = {}
    if not files_by_version and _text(info.get("version")) and isinstance(raw.get("urls"), list):
        files_by_version = {info["version"]: raw["urls"]}

    current = _parse_optional(info.get("version"))
    releases: List[Release] = []
    for version_text, files in files_by_version.items():
        try:
            version = parse(version_text)
        except InvalidVersion:
            logger.warning("Ignoring unparsable version %r of %s", version_text, name)
            continue
        releases.append(_release(version, files or [], info, current))
    releases.sort(key=lambda r: r.version.sort_key, reverse=True)

    project_url = _text(info.get("project_url")) or _text(info.get("package_url"))
    package = Package(
        name=name,
        normalized_name=normalized,
        releases=releases,
        info_version=_text(info.get("version")),
        index_metadata=index_metadata(info),
        project_url=project_url or f"{Constants.PROJECT_URL_PYPI}{normalized}/",
    )

    if is_debug_enabled(logger):
        logger.debug(
            "Catalog built",
            extra=extra_context(
                event="parse",
                component="catalog",
                action="from_index",
                outcome="success",
                package=normalized,
                count=len(releases),
            )
        )
    return package
