"""Terminal front end for interactive mode, built on textual.

textual owns the alternate screen and raw input mode and restores the
terminal when the app exits, whichever way it exits.
"""
from __future__ import annotations

import logging
from typing import Callable, Optional

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import VerticalScroll
from textual.widgets import Static

from constants import Constants
from common.logging_utils import suspend_console_logging
from catalog.models import Package, Release
from render.fields import DisplayConfiguration
from .controller import Controller
from .screens import render_screen
from .state import KEYMAP, Screen

logger = logging.getLogger(__name__)


class KayakApp(App[None]):
    """Forwards every mapped key to the controller and redraws on change."""

    ENABLE_COMMAND_PALETTE = False
    CSS = """
    #body {
        height: 1fr;
    }
    """
    # Priority bindings so that focus handling never swallows tab or escape.
    BINDINGS = [
        Binding(key, f"press('{key}')", show=False, priority=True)
        for key in KEYMAP
        if len(key) > 1 or key.isalpha()
    ]

    def __init__(self, controller: Controller) -> None:
        super().__init__()
        self._controller = controller

    def compose(self) -> ComposeResult:
        with VerticalScroll(id="body"):
            yield Static(id="screen")

    def on_mount(self) -> None:
        self._redraw()
        self.set_interval(Constants.POLL_INTERVAL_SEC, self._poll)

    def action_press(self, key: str) -> None:
        self._controller.post_key(key)
        self._poll()

    def _poll(self) -> None:
        if self._controller.poll():
            self._redraw()
        if self._controller.is_exiting:
            self.exit()

    def _redraw(self) -> None:
        body = self.query_one("#body", VerticalScroll)
        self.query_one("#screen", Static).update(
            render_screen(self._controller, height=self.size.height)
        )
        if self._controller.state.screen is Screen.DETAIL:
            # max_scroll_y is only known once the new content is laid out.
            self.call_after_refresh(self._scroll_detail)
        else:
            body.scroll_home(animate=False)

    def _scroll_detail(self) -> None:
        body = self.query_one("#body", VerticalScroll)
        self._controller.set_scroll_limit(int(body.max_scroll_y))
        body.scroll_to(y=self._controller.state.scroll_offset, animate=False)


def run_interactive(
    package: Package,
    config: DisplayConfiguration,
    initial: Optional[Release] = None,
    fetch_bytes: Optional[Callable[[str], bytes]] = None,
) -> None:
    """Browse ``package`` until the user quits.

    Console logging is paused while the terminal belongs to the UI.
    """
    with Controller(package, config, fetch_bytes=fetch_bytes) as controller, suspend_console_logging():
        if initial is not None:
            controller.select(initial)
        logger.debug("Starting interactive mode for %s", package.name)
        KayakApp(controller).run()
