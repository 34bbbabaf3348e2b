"""Interactive-mode state machine.

Key presses and fetch completions arrive through one queue and are applied
by ``poll`` on the UI thread only, so the catalog is never touched from two
threads. Background workers run ``load_metadata`` and merely enqueue the
outcome.
"""
from __future__ import annotations

import logging
import queue
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import Callable, Dict, Optional, Union

from constants import Constants
from common.errors import ExtractionError
from catalog.models import Distribution, MetadataState, Package, Release
from catalog.resolver import load_metadata, store_metadata
from catalog.selection import preferred_distribution, releases_matching
from render.fields import DisplayConfiguration
from render.views import ReleaseView
from versioning.models import ReleaseFilter

from .state import KEYMAP, Action, FetchCompleted, InteractiveViewState, KeyPressed, Screen

logger = logging.getLogger(__name__)

Event = Union[KeyPressed, FetchCompleted]


class Controller:
    """Owns the catalog and view state for the duration of interactive mode.

    Args:
        package: The catalog to browse.
        config: Starting display configuration; ``+``/``-`` adjust its level.
        executor: Runs background fetches. Created (and shut down) by the
            controller when not given.
        fetch_bytes: Archive download function, passed to ``load_metadata``.
    """

    def __init__(
        self,
        package: Package,
        config: DisplayConfiguration,
        executor: Optional[Executor] = None,
        fetch_bytes: Optional[Callable[[str], bytes]] = None,
    ):
        self.package = package
        self.config = config
        self.state = InteractiveViewState(detail_level=config.level)
        self._events: "queue.Queue[Event]" = queue.Queue()
        self._executor = executor
        self._owns_executor = executor is None
        self._fetch_bytes = fetch_bytes
        self._pending: Dict[Distribution, Future] = {}
        self._transport_failures: Dict[Distribution, str] = {}
        self._yanked_fallback = False
        self._seed_selection()

    def __enter__(self) -> "Controller":
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=Constants.FETCH_WORKERS, thread_name_prefix="kayak-fetch"
            )
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def close(self) -> None:
        """Stop accepting work; superseded fetches are not waited for."""
        if self._owns_executor and self._executor is not None:
            self._executor.shutdown(wait=False, cancel_futures=True)
            self._executor = None

    def _seed_selection(self) -> None:
        selection = releases_matching(self.package, ReleaseFilter.latest())
        if selection.first is not None:
            self.state.selected_release = self.package.releases.index(selection.first)
            self._yanked_fallback = selection.yanked_fallback

    # Queries -------------------------------------------------------------

    @property
    def is_exiting(self) -> bool:
        return self.state.screen is Screen.EXITING

    @property
    def detail_config(self) -> DisplayConfiguration:
        return self.config.with_level(self.state.detail_level)

    @property
    def current_release(self) -> Optional[Release]:
        if not self.package.releases:
            return None
        return self.package.releases[self.state.selected_release]

    @property
    def current_distribution(self) -> Optional[Distribution]:
        release = self.current_release
        if release is None or not release.distributions:
            return None
        return release.distributions[self.state.selected_distribution]

    def is_loading(self, distribution: Optional[Distribution]) -> bool:
        return distribution is not None and distribution in self._pending

    def view(self) -> Optional[ReleaseView]:
        """Snapshot of the selected release and distribution."""
        release = self.current_release
        if release is None:
            return None
        dist = self.current_distribution
        return ReleaseView.build(
            self.package,
            release,
            dist,
            failure=self._transport_failures.get(dist) if dist is not None else None,
            yanked_fallback=self._yanked_fallback and self.state.selected_release == 0,
            loading=self.is_loading(dist),
        )

    # Event intake ----------------------------------------------------------

    def select(self, release: Release) -> None:
        """Move the list cursor onto ``release``."""
        for index, candidate in enumerate(self.package.releases):
            if candidate is release:
                self.state.selected_release = index
                return

    def post_key(self, key: str) -> None:
        self._events.put(KeyPressed(key))

    def poll(self, timeout: float = 0.0) -> bool:
        """Apply every queued event; True when the screen should be redrawn.

        Waits up to ``timeout`` seconds for the first event.
        """
        redraw = False
        try:
            event = self._events.get(timeout=timeout) if timeout > 0 else self._events.get_nowait()
        except queue.Empty:
            return False
        while True:
            redraw = self.handle(event) or redraw
            try:
                event = self._events.get_nowait()
            except queue.Empty:
                return redraw

    def handle(self, event: Event) -> bool:
        if isinstance(event, FetchCompleted):
            return self._on_fetch_completed(event)
        return self._on_key(event.key)

    # Fetching --------------------------------------------------------------

    def _ensure_metadata(self, dist: Optional[Distribution]) -> None:
        self._sync_loading_flag()
        if dist is None or dist.metadata_state is not MetadataState.UNRESOLVED:
            return
        if dist in self._transport_failures or not self.detail_config.needs_metadata:
            return
        if dist in self._pending:
            # Already in flight; the existing result will be reused.
            return
        if self._executor is None:
            raise RuntimeError("controller used outside its context")
        logger.debug("Fetching metadata for %s", dist.filename)
        future = self._executor.submit(load_metadata, dist, self._fetch_bytes)
        self._pending[dist] = future
        future.add_done_callback(lambda done, d=dist: self._events.put(self._outcome(d, done)))
        self._sync_loading_flag()

    @staticmethod
    def _outcome(dist: Distribution, future: Future) -> FetchCompleted:
        if future.cancelled():
            return FetchCompleted(dist, error=RuntimeError("fetch cancelled"))
        error = future.exception()
        if error is not None:
            return FetchCompleted(dist, error=error)
        return FetchCompleted(dist, metadata=future.result())

    def _on_fetch_completed(self, event: FetchCompleted) -> bool:
        dist = event.distribution
        self._pending.pop(dist, None)
        if event.metadata is not None:
            store_metadata(dist, metadata=event.metadata)
        elif isinstance(event.error, ExtractionError):
            store_metadata(dist, error=event.error)
        else:
            logger.warning("Fetching %s failed: %s", dist.filename, event.error)
            self._transport_failures[dist] = str(event.error)
        self._sync_loading_flag()
        # Results for anything but the shown distribution are kept silently.
        return self.state.screen is Screen.DETAIL and dist is self.current_distribution

    def _sync_loading_flag(self) -> None:
        self.state.fetch_in_flight = (
            self.state.screen in (Screen.DETAIL, Screen.HELP)
            and self.is_loading(self.current_distribution)
        )

    # Keys ------------------------------------------------------------------

    def _on_key(self, key: str) -> bool:
        action = KEYMAP.get(key)
        if action is None:
            return False
        if action is Action.QUIT:
            self.state.screen = Screen.EXITING
            return True
        screen = self.state.screen
        if screen is Screen.EXITING:
            return False
        if screen is Screen.HELP:
            if action in (Action.HELP, Action.BACK):
                self.state.screen = self.state.previous_screen or Screen.LIST
                self.state.previous_screen = None
                return True
            return False
        if action is Action.HELP:
            self.state.previous_screen = screen
            self.state.screen = Screen.HELP
            return True
        if action in (Action.MORE, Action.LESS):
            return self._change_level(1 if action is Action.MORE else -1)
        if screen is Screen.LIST:
            return self._on_list_key(action)
        return self._on_detail_key(action)

    def _change_level(self, delta: int) -> bool:
        level = max(0, min(self.state.detail_level + delta, Constants.MAX_VERBOSITY))
        if level == self.state.detail_level:
            return False
        self.state.detail_level = level
        if self.state.screen is Screen.DETAIL:
            self._ensure_metadata(self.current_distribution)
        return True

    def _on_list_key(self, action: Action) -> bool:
        count = len(self.package.releases)
        if not count:
            return False
        moves = {
            Action.UP: -1,
            Action.DOWN: 1,
            Action.PAGE_UP: -Constants.PAGE_SIZE,
            Action.PAGE_DOWN: Constants.PAGE_SIZE,
            Action.HOME: -count,
            Action.END: count,
        }
        if action in moves:
            index = max(0, min(self.state.selected_release + moves[action], count - 1))
            changed = index != self.state.selected_release
            self.state.selected_release = index
            return changed
        if action is Action.ACTIVATE:
            self._open_detail()
            return True
        return False

    def _open_detail(self) -> None:
        release = self.current_release
        preferred = preferred_distribution(release)
        self.state.selected_distribution = (
            release.distributions.index(preferred) if preferred is not None else 0
        )
        self.state.scroll_offset = 0
        self.state.scroll_limit = 0
        self.state.screen = Screen.DETAIL
        self._ensure_metadata(self.current_distribution)

    def _on_detail_key(self, action: Action) -> bool:
        state = self.state
        if action is Action.BACK:
            state.screen = Screen.LIST
            state.scroll_offset = 0
            self._sync_loading_flag()
            return True
        scrolls = {
            Action.UP: -Constants.SCROLL_STEP,
            Action.DOWN: Constants.SCROLL_STEP,
            Action.PAGE_UP: -Constants.PAGE_SIZE,
            Action.PAGE_DOWN: Constants.PAGE_SIZE,
        }
        if action in scrolls:
            return self._scroll_to(state.scroll_offset + scrolls[action])
        if action is Action.HOME:
            return self._scroll_to(0)
        if action is Action.END:
            return self._scroll_to(state.scroll_limit)
        if action in (Action.NEXT_DISTRIBUTION, Action.PREVIOUS_DISTRIBUTION):
            count = len(self.current_release.distributions)
            if count < 2:
                return False
            step = 1 if action is Action.NEXT_DISTRIBUTION else -1
            state.selected_distribution = (state.selected_distribution + step) % count
            state.scroll_offset = 0
            state.scroll_limit = 0
            self._ensure_metadata(self.current_distribution)
            return True
        if action is Action.RETRY:
            return self._retry()
        return False

    def _scroll_to(self, offset: int) -> bool:
        offset = max(0, min(offset, self.state.scroll_limit))
        changed = offset != self.state.scroll_offset
        self.state.scroll_offset = offset
        return changed

    def set_scroll_limit(self, limit: int) -> bool:
        """Record how far the detail view can scroll; True if the offset moved.

        The front end reports the limit after laying out the detail screen.
        Until it does, the view does not scroll.
        """
        self.state.scroll_limit = max(0, int(limit))
        if self.state.scroll_offset > self.state.scroll_limit:
            self.state.scroll_offset = self.state.scroll_limit
            return True
        return False

    def _retry(self) -> bool:
        dist = self.current_distribution
        if dist is None or dist in self._pending:
            return False
        if dist not in self._transport_failures and dist.metadata_error is None:
            return False
        self._transport_failures.pop(dist, None)
        dist.metadata_error = None
        self._ensure_metadata(dist)
        return True
