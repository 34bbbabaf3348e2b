"""kayak - Inspect Python package metadata from the package index.

    Raises:
        SystemExit: Always, with one of the ExitCodes values.

    Returns:
        int: Exit code
"""
import logging
import os
import sys
from typing import Optional, Set, Tuple

from constants import Constants, ExitCodes, OutputFormats
from common.errors import (
    ExtractionError,
    InvalidSelector,
    InvalidVersion,
    NotFound,
    TransportError,
)
from common.logging_utils import add_file_handler, configure_logging, extra_context, is_debug_enabled
from args import parse_args
from cli_config import apply_overrides
from catalog import (
    Distribution,
    Package,
    Release,
    check_selector,
    find_releases,
    from_index,
    pick_distribution,
    preferred_distribution,
    resolve_metadata,
)
from registry.pypi.client import fetch_index
from render import DisplayConfiguration, Field, ReleaseView, render, render_versions
from versioning import parse_filter

logger = logging.getLogger(__name__)

_FIELD_FLAGS = (
    ("SUMMARY", Field.SUMMARY),
    ("LICENSE", Field.LICENSE),
    ("URLS", Field.URLS),
    ("KEYWORDS", Field.KEYWORDS),
    ("CLASSIFIERS", Field.CLASSIFIERS),
    ("DEPENDENCIES", Field.DEPENDENCIES),
    ("PACKAGES", Field.PACKAGES),
    ("EXECUTABLES", Field.EXECUTABLES),
)


def build_display_config(args) -> DisplayConfiguration:
    """Translate verbosity counts and field flags into a DisplayConfiguration."""
    forced: Set[Field] = {field for attr, field in _FIELD_FLAGS if getattr(args, attr, False)}
    return DisplayConfiguration.from_flags(
        verbose=getattr(args, "VERBOSE", 0) or 0,
        quiet=getattr(args, "QUIET", 0) or 0,
        forced=forced,
        artifact_detail=getattr(args, "ARTIFACTS", 0) or 0,
    )


def output_format(args) -> str:
    if getattr(args, "INTERACTIVE", False):
        return OutputFormats.INTERACTIVE.value
    return getattr(args, "OUTPUT_FORMAT", None) or Constants.DEFAULT_FORMAT


def write_output(text: str, path: Optional[str]) -> None:
    """Write ``text`` to ``path``, or to stdout when no path is given."""
    if not path:
        sys.stdout.write(text)
        sys.stdout.flush()
        return
    with open(path, "w", encoding="utf-8", newline="") as fh:
        fh.write(text)
    logger.info("Report written to %s", path)


def choose_distribution(release: Release, selector: Optional[str]) -> Optional[Distribution]:
    """The requested distribution, or the preferred one (None if the release has none)."""
    if selector:
        return pick_distribution(release, selector)
    return preferred_distribution(release)


def resolve_for_display(
    dist: Optional[Distribution], config: DisplayConfiguration
) -> Tuple[Optional[str], ExitCodes]:
    """Fetch metadata when the shown fields need it.

    Returns:
        tuple: (failure message or None, exit code to report).
    """
    if dist is None or not config.needs_metadata:
        return None, ExitCodes.SUCCESS
    try:
        resolve_metadata(dist)
    except ExtractionError as exc:
        return str(exc), ExitCodes.SUCCESS
    except TransportError as exc:
        logger.warning("Could not download %s: %s", dist.filename, exc)
        return str(exc), ExitCodes.EXIT_WARNINGS
    return None, ExitCodes.SUCCESS


def run(args) -> ExitCodes:
    """Run one invocation; engine errors propagate to ``main``."""
    fmt = output_format(args)
    config = build_display_config(args)

    # Reject bad input before touching the network.
    release_filter = parse_filter(args.VERSION)
    if args.DIST:
        check_selector(args.DIST)

    package: Package = from_index(fetch_index(args.PROJECT))
    logger.info("Found %d release(s) of %s", len(package.releases), package.name)

    if getattr(args, "VERSIONS", False):
        if fmt == OutputFormats.INTERACTIVE.value:
            fmt = OutputFormats.TEXT.value
        write_output(render_versions(package, config, fmt, color=Constants.USE_COLOR), args.OUTPUT)
        return ExitCodes.SUCCESS

    if fmt == OutputFormats.INTERACTIVE.value:
        # textual is only needed here; keep it off the one-shot path.
        from interactive.app import run_interactive  # pylint: disable=import-outside-toplevel
        if args.OUTPUT:
            logger.warning("--output is ignored in interactive mode")
        initial = find_releases(package, release_filter).first if args.VERSION else None
        run_interactive(package, config, initial=initial)
        return ExitCodes.SUCCESS

    selection = find_releases(package, release_filter)
    release = selection.first
    if len(selection) > 1:
        logger.info("%d releases match %s; showing %s", len(selection), release_filter.describe(), release.version)
    dist = choose_distribution(release, args.DIST)

    if getattr(args, "URL_ONLY", False):
        if dist is None:
            raise NotFound(f"release {release.version} has no distributions")
        write_output(dist.url + "\n", args.OUTPUT)
        return ExitCodes.SUCCESS

    failure, code = resolve_for_display(dist, config)
    view = ReleaseView.build(
        package,
        release,
        dist,
        failure=failure,
        yanked_fallback=selection.yanked_fallback,
        explicit_distribution=bool(args.DIST),
    )
    write_output(render(view, config, fmt, color=Constants.USE_COLOR), args.OUTPUT)
    return code


def main(argv=None):
    """Main function of the program."""
    args = parse_args(argv)
    # Honor CLI --loglevel by passing it to centralized logger via env
    if getattr(args, "LOG_LEVEL", None):
        os.environ[Constants.ENV_LOG_LEVEL] = str(args.LOG_LEVEL).upper()
    configure_logging()
    if getattr(args, "LOG_FILE", None):
        try:
            add_file_handler(args.LOG_FILE)
        except OSError as exc:
            logger.error("Cannot open log file %s: %s", args.LOG_FILE, exc)
            sys.exit(ExitCodes.FILE_ERROR.value)

    apply_overrides(args)

    if is_debug_enabled(logger):
        logger.debug(
            "CLI start",
            extra=extra_context(event="function_entry", component="cli", action="main", package=args.PROJECT)
        )

    try:
        code = run(args)
    except NotFound as exc:
        logger.error("%s", exc)
        code = ExitCodes.NOT_FOUND
    except TransportError as exc:
        logger.error("%s", exc)
        code = ExitCodes.CONNECTION_ERROR
    except (InvalidVersion, InvalidSelector) as exc:
        logger.error("%s", exc)
        code = ExitCodes.INVALID_INPUT
    except OSError as exc:
        logger.error("Cannot write output: %s", exc)
        code = ExitCodes.FILE_ERROR

    if is_debug_enabled(logger):
        logger.debug(
            "CLI finished",
            extra=extra_context(event="function_exit", component="cli", action="main", outcome=code.name.lower())
        )
    sys.exit(code.value)


if __name__ == "__main__":
    main()
