"""Render pipeline: turn catalog snapshots into text, panel or CSV output.

Rendering is pure: it never fetches and never mutates the catalog.
"""

from typing import Optional, Union

from constants import OutputFormats
from catalog.models import Package
from .fields import DisplayConfiguration, Field
from .pretty import render_pretty, render_versions_pretty
from .tabular import COLUMNS, render_csv, render_versions_csv
from .text import render_text, render_versions_text
from .views import MetadataSource, ReleaseView

_RENDERABLE = (OutputFormats.TEXT, OutputFormats.PRETTY, OutputFormats.CSV)


def _output_format(fmt: Union[OutputFormats, str]) -> OutputFormats:
    try:
        chosen = fmt if isinstance(fmt, OutputFormats) else OutputFormats(str(fmt).lower())
    except ValueError as exc:
        raise ValueError(f"unknown output format: {fmt}") from exc
    if chosen not in _RENDERABLE:
        raise ValueError(f"{chosen.value} output is not a static rendering")
    return chosen


def render(
    view: ReleaseView,
    config: DisplayConfiguration,
    fmt: Union[OutputFormats, str] = OutputFormats.TEXT,
    color: Optional[bool] = None,
) -> str:
    """Render one release view in the chosen encoding.

    Raises:
        ValueError: If ``fmt`` is not text, pretty or csv.
    """
    chosen = _output_format(fmt)
    if chosen is OutputFormats.PRETTY:
        return render_pretty(view, config, color)
    if chosen is OutputFormats.CSV:
        return render_csv(view, config)
    return render_text(view, config)


def render_versions(
    package: Package,
    config: DisplayConfiguration,
    fmt: Union[OutputFormats, str] = OutputFormats.TEXT,
    color: Optional[bool] = None,
) -> str:
    """Render the list of a package's versions in the chosen encoding."""
    chosen = _output_format(fmt)
    if chosen is OutputFormats.PRETTY:
        return render_versions_pretty(package, config, color)
    if chosen is OutputFormats.CSV:
        return render_versions_csv(package, config)
    return render_versions_text(package, config)


__all__ = [
    "COLUMNS",
    "DisplayConfiguration",
    "Field",
    "MetadataSource",
    "ReleaseView",
    "render",
    "render_versions",
]
