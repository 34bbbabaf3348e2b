"""Plain-text encoding: one labelled line per populated field."""

from typing import List

from catalog.models import Distribution, Package
from .fields import DisplayConfiguration, Field
from .views import MetadataSource, ReleaseView


def describe_distribution(dist: Distribution, detail: int) -> str:
    """``sdist`` or the wheel tag, with yank marker, plus the URL above detail 2."""
    text = dist.label
    if dist.yanked:
        text += " [YANKED]"
    if detail > 2:
        text += f" {dist.url}"
    return text


def artifact_lines(view: ReleaseView, config: DisplayConfiguration) -> List[str]:
    """Distribution listing; a one-line summary unless more detail is asked for."""
    if view.explicit_distribution and view.distribution is not None:
        return [describe_distribution(view.distribution, config.artifact_detail)]
    if config.artifact_detail < 2:
        summary = view.release.summarize_distributions()
        return [summary] if summary else []
    return [describe_distribution(d, config.artifact_detail) for d in view.release.distributions]


def status_line(view: ReleaseView) -> str:
    """Loading or failure notice; empty when metadata is simply there."""
    if view.loading:
        return "loading metadata…"
    if view.failure:
        if view.metadata_source is MetadataSource.INDEX:
            return f"archive metadata unavailable ({view.failure}); showing index data"
        return f"metadata unavailable ({view.failure})"
    return ""


def render_text(view: ReleaseView, config: DisplayConfiguration) -> str:
    """Render a release as ``label: value`` lines, omitting absent fields."""
    lines: List[str] = []
    meta = view.metadata

    def add(label: str, value) -> None:
        if value:
            lines.append(f"{label}: {value}")

    if config.shows(Field.NAME):
        lines.append(view.title)
        add("yanked", view.release.yanked_reason)
        if view.yanked_fallback:
            lines.append("note: every release is yanked; showing the newest")
    if config.needs_metadata:
        add("status", status_line(view))

    if meta is not None:
        if config.shows(Field.SUMMARY):
            add("summary", meta.summary)
        if config.shows(Field.LICENSE):
            add("license", meta.license_text)
            add("author", meta.contact)
    if config.shows(Field.URLS):
        for label, url in view.urls():
            add("url", f"{label} {url}")
    if meta is not None:
        if config.shows(Field.KEYWORDS):
            add("keywords", ", ".join(meta.keywords))
        if config.shows(Field.CLASSIFIERS):
            for classifier in meta.classifiers:
                add("classifier", classifier)
    if config.shows(Field.ARTIFACTS):
        for line in artifact_lines(view, config):
            add("distribution", line)
    if config.shows(Field.DEPENDENCIES):
        add("requires-python", view.requires_python)
        if meta is not None:
            for dep in meta.dependencies:
                add("dependency", str(dep))
            if meta.skipped_dependencies:
                add("skipped-dependencies", meta.skipped_dependencies)
    if meta is not None:
        if config.shows(Field.PACKAGES):
            for name in meta.top_level_names or ():
                add("package", name)
        if config.shows(Field.EXECUTABLES):
            for name in meta.executables or ():
                add("executable", name)
    return "\n".join(lines) + "\n" if lines else ""


def render_versions_text(package: Package, config: DisplayConfiguration) -> str:
    """Package name (from level 1) then every version, newest first."""
    versions = ", ".join(str(v) for v in package.versions)
    if config.shows(Field.NAME):
        return f"{package.name}\n{versions}\n"
    return f"{versions}\n"
