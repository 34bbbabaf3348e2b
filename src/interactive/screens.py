"""Rich renderables for the List, Detail and Help screens."""

from typing import List

from rich import box
from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from render.pretty import release_panel
from .controller import Controller
from .state import KEY_HELP, Screen

_LIST_HINT = "↑↓ move · Enter open · ? help · q quit"
_DETAIL_HINT = "Esc back · Tab distribution · +/- fields · r retry · ? help · q quit"


def _window(selected: int, count: int, height: int) -> range:
    """Rows to show so that ``selected`` stays visible."""
    height = max(1, height)
    start = min(max(0, selected - height // 2), max(0, count - height))
    return range(start, min(count, start + height))


def list_screen(controller: Controller, height: int = 20) -> RenderableType:
    package = controller.package
    table = Table(box=box.SIMPLE_HEAD, expand=True, show_edge=False)
    table.add_column("version", no_wrap=True)
    table.add_column("uploaded", no_wrap=True)
    table.add_column("distributions")
    table.add_column("", no_wrap=True)

    releases = package.releases
    for index in _window(controller.state.selected_release, len(releases), height - 4):
        release = releases[index]
        style = "reverse" if index == controller.state.selected_release else ""
        if release.yanked and not style:
            style = "red"
        table.add_row(
            str(release.version),
            (release.upload_time or "")[:10],
            release.summarize_distributions(),
            "YANKED" if release.yanked else "",
            style=style,
        )
    if not releases:
        table.add_row("no releases", "", "", "")
    title = Text(f"{package.name} · {len(releases)} release(s)", style="bold yellow")
    return Panel(table, title=title, title_align="left", subtitle=_LIST_HINT, box=box.ROUNDED)


def detail_screen(controller: Controller) -> RenderableType:
    view = controller.view()
    if view is None:
        return Panel(Text("no releases"), box=box.ROUNDED)
    parts: List[RenderableType] = []
    release = view.release
    if release.distributions:
        position = controller.state.selected_distribution + 1
        header = Text(f"distribution {position}/{len(release.distributions)}: ", style="dim")
        header.append(view.distribution.filename, style="cyan")
        if view.loading:
            header.append("  loading…", style="italic")
        parts.append(header)
    parts.append(release_panel(view, controller.detail_config))
    return Panel(Group(*parts), subtitle=_DETAIL_HINT, box=box.ROUNDED)


def help_screen() -> RenderableType:
    table = Table(box=None, show_header=False, padding=(0, 2))
    table.add_column(style="bold")
    table.add_column()
    for keys, description in KEY_HELP:
        table.add_row(keys, description)
    return Panel(table, title="keys", title_align="left", subtitle="? or Esc to close", box=box.ROUNDED)


def render_screen(controller: Controller, height: int = 20) -> RenderableType:
    """The renderable for the controller's current screen."""
    screen = controller.state.screen
    if screen is Screen.HELP:
        return help_screen()
    if screen is Screen.DETAIL:
        return detail_screen(controller)
    return list_screen(controller, height)
