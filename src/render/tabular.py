"""CSV encoding with a fixed column order.

Every row has every column; cells of fields the configuration does not
select, or the data does not carry, are empty.
"""

import csv
import io
from typing import Dict, Iterable, List, Optional

from constants import Constants
from catalog.models import Distribution, Package, Release
from metadata.models import DistributionMetadata
from .fields import DisplayConfiguration, Field
from .views import PACKAGE_INDEX_LABEL, ReleaseView

COLUMNS = [
    "name",
    "version",
    "yanked",
    "yanked_reason",
    "distribution",
    "filename",
    "url",
    "requires_python",
    "size",
    "upload_time",
    "summary",
    "license",
    "author",
    "author_email",
    "keywords",
    "classifiers",
    "project_urls",
    "dependencies",
    "metadata_status",
]


def _join(values: Iterable) -> str:
    return Constants.CSV_SEPARATOR.join(str(v) for v in values)


def _cell(value) -> str:
    return "" if value is None else str(value)


def _release_cells(name: str, release: Release) -> Dict[str, str]:
    return {
        "name": name,
        "version": str(release.version),
        "yanked": "true" if release.yanked else "false",
        "yanked_reason": _cell(release.yanked_reason),
    }


def _distribution_cells(dist: Distribution) -> Dict[str, str]:
    return {
        "distribution": dist.label,
        "filename": dist.filename,
        "url": dist.url,
        "size": _cell(dist.size),
        "upload_time": _cell(dist.upload_time),
    }


def _metadata_cells(
    meta: Optional[DistributionMetadata],
    config: DisplayConfiguration,
    project_url: Optional[str],
) -> Dict[str, str]:
    cells: Dict[str, str] = {}
    if config.shows(Field.URLS):
        links = [f"{PACKAGE_INDEX_LABEL}={project_url}"] if project_url else []
        if meta is not None:
            links.extend(f"{label}={url}" for label, url in meta.project_urls.items())
        cells["project_urls"] = _join(links)
    if meta is None:
        return cells
    if config.shows(Field.SUMMARY):
        cells["summary"] = _cell(meta.summary)
    if config.shows(Field.LICENSE):
        cells["license"] = _cell(meta.license_text)
        cells["author"] = _cell(meta.author or meta.maintainer)
        cells["author_email"] = _cell(meta.author_email or meta.maintainer_email)
    if config.shows(Field.KEYWORDS):
        cells["keywords"] = _join(meta.keywords)
    if config.shows(Field.CLASSIFIERS):
        cells["classifiers"] = _join(meta.classifiers)
    if config.shows(Field.DEPENDENCIES):
        cells["dependencies"] = _join(meta.dependencies)
    return cells


def _write(rows: List[Dict[str, str]]) -> str:
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=COLUMNS, restval="", lineterminator="\n")
    writer.writeheader()
    writer.writerows(rows)
    return buffer.getvalue()


def render_csv(view: ReleaseView, config: DisplayConfiguration) -> str:
    """One row for the shown distribution, or one per distribution when
    distributions are among the selected fields."""
    if config.shows(Field.ARTIFACTS):
        targets = view.distributions() or [None]
    else:
        targets = [view.distribution]

    rows = []
    for dist in targets:
        row = _release_cells(view.package_name, view.release)
        if dist is None:
            meta, status = view.metadata, view.status
            requires_python = view.requires_python
        else:
            row.update(_distribution_cells(dist))
            meta, status = view.metadata_for(dist)
            requires_python = (meta.requires_python if meta is not None else None) or dist.requires_python
        if config.shows(Field.DEPENDENCIES):
            row["requires_python"] = _cell(requires_python)
        row.update(_metadata_cells(meta, config, view.project_url))
        row["metadata_status"] = status
        rows.append(row)
    return _write(rows)


def render_versions_csv(package: Package, config: DisplayConfiguration) -> str:
    """One row per release, newest first, with the same columns."""
    rows = []
    for release in package.releases:
        row = _release_cells(package.name, release)
        row["metadata_status"] = "unresolved"
        rows.append(row)
    return _write(rows)
