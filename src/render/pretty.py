"""Decorated panel encoding built with rich.

The same renderables back the interactive Detail screen; ``render_pretty``
captures them through a recording console so the result is a plain,
reproducible string.
"""

import io
from typing import List, Optional

from rich import box
from rich.console import Console, Group, RenderableType
from rich.panel import Panel
from rich.rule import Rule
from rich.text import Text

from constants import Constants
from catalog.models import Package
from .fields import DisplayConfiguration, Field
from .text import artifact_lines, status_line
from .views import ReleaseView, url_icon


def _lines(rows: List[Text]) -> Optional[Text]:
    rows = [r for r in rows if r.plain]
    if not rows:
        return None
    return Text("\n").join(rows)


def release_sections(view: ReleaseView, config: DisplayConfiguration) -> List[Text]:
    """Field groups in display order, empty groups dropped."""
    meta = view.metadata
    identity: List[Text] = []
    contact: List[Text] = []
    links: List[Text] = []
    taxonomy: List[Text] = []
    artifacts: List[Text] = []
    dependencies: List[Text] = []
    contents: List[Text] = []

    if view.release.yanked_reason and config.shows(Field.NAME):
        identity.append(Text(f"yanked: {view.release.yanked_reason}", style="red"))
    if view.yanked_fallback and config.shows(Field.NAME):
        identity.append(Text("every release is yanked; showing the newest", style="red"))
    if config.needs_metadata:
        status = status_line(view)
        if status:
            identity.append(Text(status, style="italic" if view.loading else "bold red"))
    if meta is not None and config.shows(Field.SUMMARY) and meta.summary:
        identity.append(Text(meta.summary))

    if meta is not None and config.shows(Field.LICENSE):
        license_text = meta.license_text
        contact_text = meta.contact
        if license_text and contact_text:
            contact.append(Text(f"{license_text} © {contact_text}", style="yellow"))
        elif license_text or contact_text:
            contact.append(Text(license_text or f"© {contact_text}", style="yellow"))

    if config.shows(Field.URLS):
        for label, url in view.urls():
            line = Text(f"{url_icon(label)} {label}: ")
            line.append(url, style="blue underline")
            links.append(line)

    if meta is not None and config.shows(Field.KEYWORDS) and meta.keywords:
        taxonomy.append(Text(", ".join(meta.keywords), style="bold magenta"))
    if meta is not None and config.shows(Field.CLASSIFIERS):
        taxonomy.extend(Text(c, style="magenta") for c in meta.classifiers)

    if config.shows(Field.ARTIFACTS):
        artifacts.extend(Text(line, style="cyan") for line in artifact_lines(view, config))

    if config.shows(Field.DEPENDENCIES):
        if view.requires_python:
            dependencies.append(Text(f"python {view.requires_python}", style="green"))
        if meta is not None:
            dependencies.extend(Text(str(dep), style="green") for dep in meta.dependencies)
            if meta.skipped_dependencies:
                dependencies.append(
                    Text(f"{meta.skipped_dependencies} unreadable dependency line(s) skipped", style="dim")
                )

    if meta is not None and config.shows(Field.PACKAGES):
        contents.extend(Text(f"■ {name}", style="red") for name in meta.top_level_names or ())
    if meta is not None and config.shows(Field.EXECUTABLES):
        contents.extend(Text(f"▶ {name}", style="red") for name in meta.executables or ())

    groups = (identity, contact, links, taxonomy, artifacts, dependencies, contents)
    return [g for g in (_lines(rows) for rows in groups) if g is not None]


def release_panel(view: ReleaseView, config: DisplayConfiguration) -> Panel:
    """A panel titled with the release, its field groups split by rules."""
    body: List[RenderableType] = []
    for section in release_sections(view, config):
        if body:
            body.append(Rule(style="dim"))
        body.append(section)
    title = Text(view.title, style="bold red" if view.release.yanked else "bold yellow")
    if not config.shows(Field.NAME):
        title = None
    return Panel(Group(*body), title=title, title_align="left", box=box.ROUNDED, expand=False)


def versions_panel(package: Package, config: DisplayConfiguration) -> Panel:
    text = Text()
    for index, release in enumerate(package.releases):
        if index:
            text.append(", ")
        text.append(str(release.version), style="strike red" if release.yanked else "")
    title = Text(package.name, style="bold yellow") if config.shows(Field.NAME) else None
    return Panel(text, title=title, title_align="left", box=box.ROUNDED, expand=False)


def capture(renderable: RenderableType, color: Optional[bool] = None) -> str:
    """Render into a string at a fixed width; ANSI styles only when ``color``."""
    if color is None:
        color = Constants.USE_COLOR
    console = Console(
        file=io.StringIO(),
        record=True,
        width=Constants.PRETTY_WIDTH,
        force_terminal=color,
        color_system="standard" if color else None,
        legacy_windows=False,
        emoji=False,
        highlight=False,
    )
    console.print(renderable)
    return console.export_text(styles=color)


def render_pretty(view: ReleaseView, config: DisplayConfiguration, color: Optional[bool] = None) -> str:
    return capture(release_panel(view, config), color)


def render_versions_pretty(package: Package, config: DisplayConfiguration, color: Optional[bool] = None) -> str:
    return capture(versions_panel(package, config), color)
