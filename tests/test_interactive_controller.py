"""Tests for the interactive-mode state machine and its screens."""
from concurrent.futures import Future
from unittest.mock import MagicMock

import pytest

from common.errors import TransportError
from catalog import MetadataState, from_index
from interactive import Controller, Screen
from interactive.screens import render_screen
from render import DisplayConfiguration, MetadataSource
from render.pretty import capture

from archive_builders import index_document, make_wheel


class ManualExecutor:
    """Executor whose jobs run only when a test says so."""

    def __init__(self):
        self.jobs = []

    def submit(self, fn, *args):
        future = Future()
        self.jobs.append((future, fn, args))
        return future

    def complete(self, index=0):
        future, fn, args = self.jobs[index]
        try:
            result = fn(*args)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            future.set_exception(exc)
        else:
            future.set_result(result)


def _controller(versions=("1.2.0", "1.1.0"), fetch=None, level=2, **kwargs):
    package = from_index(index_document(list(versions), **kwargs))
    executor = ManualExecutor()
    fetch = fetch or MagicMock(return_value=make_wheel())
    controller = Controller(package, DisplayConfiguration(level=level), executor=executor, fetch_bytes=fetch)
    return controller, executor, fetch


def _press(controller, *keys):
    for key in keys:
        controller.post_key(key)
    return controller.poll()


class TestNavigation:
    """List moves, screen changes and quitting."""

    def test_starts_on_latest_release(self):
        controller, executor, _ = _controller()
        assert controller.state.screen is Screen.LIST
        assert controller.current_release.version == controller.package.releases[0].version
        assert executor.jobs == []

    def test_starts_on_newest_non_yanked(self):
        controller, _, _ = _controller(("2.0", "1.0"), yanked=("2.0",))
        assert controller.state.selected_release == 1

    def test_moves_are_clamped(self):
        controller, _, _ = _controller()
        assert _press(controller, "down")
        assert controller.state.selected_release == 1
        assert not _press(controller, "j")
        assert _press(controller, "g")
        assert controller.state.selected_release == 0
        assert _press(controller, "G")
        assert controller.state.selected_release == 1

    def test_unknown_key_is_ignored(self):
        controller, _, _ = _controller()
        assert not _press(controller, "z")

    def test_poll_without_events(self):
        controller, _, _ = _controller()
        assert not controller.poll()

    @pytest.mark.parametrize("key", ["q", "ctrl+c"])
    def test_quit_from_any_screen(self, key):
        controller, _, _ = _controller()
        _press(controller, "enter", "?", key)
        assert controller.is_exiting

    def test_help_overlay_returns_to_previous_screen(self):
        controller, _, _ = _controller()
        _press(controller, "enter")
        assert _press(controller, "?")
        assert controller.state.screen is Screen.HELP
        assert not _press(controller, "down")
        assert _press(controller, "escape")
        assert controller.state.screen is Screen.DETAIL

    def test_back_to_list(self):
        controller, _, _ = _controller()
        _press(controller, "enter", "escape")
        assert controller.state.screen is Screen.LIST

    def test_detail_scrolling(self):
        controller, _, _ = _controller()
        _press(controller, "enter")
        controller.set_scroll_limit(30)
        assert not _press(controller, "up")
        assert _press(controller, "down", "pagedown")
        assert controller.state.scroll_offset == 11
        assert _press(controller, "home")
        assert controller.state.scroll_offset == 0
        assert _press(controller, "end")
        assert controller.state.scroll_offset == 30

    def test_scrolling_stops_at_the_bottom(self):
        controller, _, _ = _controller()
        _press(controller, "enter")
        controller.set_scroll_limit(3)
        _press(controller, *["down"] * 50)
        assert controller.state.scroll_offset == 3
        assert _press(controller, "up")
        assert controller.state.scroll_offset == 2

    def test_short_view_does_not_scroll(self):
        controller, _, _ = _controller()
        _press(controller, "enter")
        assert not _press(controller, *["down"] * 5)
        assert controller.state.scroll_offset == 0

    def test_shrinking_limit_pulls_offset_back(self):
        controller, _, _ = _controller()
        _press(controller, "enter")
        controller.set_scroll_limit(20)
        _press(controller, "pagedown")
        assert controller.set_scroll_limit(4)
        assert controller.state.scroll_offset == 4
        assert not controller.set_scroll_limit(8)


class TestBackgroundFetch:
    """Fetches run off the UI thread and land through the event queue."""

    def test_activation_starts_fetch_of_preferred_distribution(self):
        controller, executor, _ = _controller()
        _press(controller, "enter")
        assert controller.state.screen is Screen.DETAIL
        assert controller.current_distribution.label == "py3-none-any"
        assert len(executor.jobs) == 1
        assert controller.state.fetch_in_flight
        assert controller.view().status == "loading"

    def test_completion_resolves_detail(self):
        controller, executor, _ = _controller()
        _press(controller, "enter")
        executor.complete()
        assert controller.poll()
        view = controller.view()
        assert view.metadata_source is MetadataSource.ARCHIVE
        assert view.metadata.summary == "A demo package"
        assert not controller.state.fetch_in_flight

    def test_repeated_activation_is_coalesced(self):
        controller, executor, _ = _controller()
        _press(controller, "enter", "escape", "enter")
        assert len(executor.jobs) == 1

    def test_resolved_metadata_is_not_fetched_again(self):
        controller, executor, fetch = _controller()
        _press(controller, "enter")
        executor.complete()
        controller.poll()
        _press(controller, "escape", "enter")
        assert len(executor.jobs) == 1
        assert fetch.call_count == 1

    def test_stale_result_is_stored_without_redraw(self):
        controller, executor, _ = _controller()
        _press(controller, "enter", "escape", "down", "enter")
        assert len(executor.jobs) == 2
        first = controller.package.releases[0].built[0]
        executor.complete(0)
        assert not controller.poll()
        assert first.metadata_state is MetadataState.RESOLVED
        assert controller.state.fetch_in_flight

    def test_no_fetch_when_level_needs_no_metadata(self):
        controller, executor, _ = _controller(level=1)
        _press(controller, "enter")
        assert executor.jobs == []
        assert _press(controller, "+")
        assert len(executor.jobs) == 1

    def test_level_is_clamped(self):
        controller, _, _ = _controller(level=6)
        assert not _press(controller, "plus")
        assert _press(controller, "minus")
        assert controller.detail_config.level == 5

    def test_cycling_distributions_fetches_the_new_one(self):
        controller, executor, _ = _controller()
        _press(controller, "enter")
        assert _press(controller, "tab")
        assert controller.current_distribution.label == "sdist"
        assert len(executor.jobs) == 2

    def test_fetch_requires_an_executor(self):
        package = from_index(index_document(["1.0"]))
        controller = Controller(package, DisplayConfiguration(), fetch_bytes=MagicMock())
        with pytest.raises(RuntimeError):
            _press(controller, "enter")


class TestFailures:
    """Transport failures stay retryable; extraction failures are remembered."""

    def test_transport_failure_and_retry(self):
        fetch = MagicMock(side_effect=[TransportError("offline"), make_wheel()])
        controller, executor, _ = _controller(fetch=fetch)
        _press(controller, "enter")
        executor.complete(0)
        assert controller.poll()
        view = controller.view()
        assert view.failure == "offline"
        assert view.metadata_source is MetadataSource.INDEX
        assert controller.current_distribution.metadata_state is MetadataState.UNRESOLVED

        _press(controller, "escape", "enter")
        assert len(executor.jobs) == 1

        assert _press(controller, "r")
        assert len(executor.jobs) == 2
        executor.complete(1)
        controller.poll()
        assert controller.view().metadata_source is MetadataSource.ARCHIVE

    def test_extraction_failure_is_kept(self):
        fetch = MagicMock(return_value=b"junk")
        controller, executor, _ = _controller(fetch=fetch)
        _press(controller, "enter")
        executor.complete(0)
        controller.poll()
        assert controller.current_distribution.metadata_state is MetadataState.FAILED
        assert controller.view().status == "failed"

    def test_retry_without_failure_does_nothing(self):
        controller, executor, _ = _controller()
        _press(controller, "enter")
        assert not _press(controller, "r")
        assert len(executor.jobs) == 1


class TestScreens:
    """Screens render from controller state."""

    def test_list_screen(self):
        controller, _, _ = _controller(yanked=("1.1.0",))
        output = capture(render_screen(controller), color=False)
        assert "demo · 2 release(s)" in output
        assert "1.2.0" in output
        assert "YANKED" in output

    def test_detail_screen(self):
        controller, executor, _ = _controller()
        _press(controller, "enter")
        assert "loading" in capture(render_screen(controller), color=False)
        executor.complete()
        controller.poll()
        output = capture(render_screen(controller), color=False)
        assert "demo-1.2.0-py3-none-any.whl" in output
        assert "A demo package" in output

    def test_help_screen(self):
        controller, _, _ = _controller()
        _press(controller, "?")
        assert "toggle this help" in capture(render_screen(controller), color=False)
