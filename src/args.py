"""Argument parsing functionality for kayak."""

import argparse
from constants import Constants


def build_parser():
    """Builds the command-line parser."""
    parser = argparse.ArgumentParser(
        prog="kayak",
        description=(
            "kayak - Inspect Python package metadata from the package index"
        ),
        add_help=True,
    )

    parser.add_argument("PROJECT",
                        help="Project name on the package index, e.g. requests")
    parser.add_argument("VERSION",
                        help="Exact version or version prefix (default: latest non-yanked release)",
                        nargs="?")
    parser.add_argument("DIST",
                        help="Distribution: 'sdist' or a wheel tag such as py3-none-any "
                             "(default: the most portable one)",
                        nargs="?")

    slice_group = parser.add_mutually_exclusive_group()
    slice_group.add_argument("--versions",
                             dest="VERSIONS",
                             help="Only list the available versions",
                             action="store_true")
    slice_group.add_argument("--url",
                             dest="URL_ONLY",
                             help="Only print the chosen distribution's download URL",
                             action="store_true")

    fields = parser.add_argument_group("fields")
    fields.add_argument("-s", "--summary", dest="SUMMARY", action="store_true",
                        help="Show the summary line")
    fields.add_argument("-l", "--license", dest="LICENSE", action="store_true",
                        help="Show license and author")
    fields.add_argument("-u", "--urls", dest="URLS", action="store_true",
                        help="Show project links")
    fields.add_argument("-k", "--keywords", dest="KEYWORDS", action="store_true",
                        help="Show keywords")
    fields.add_argument("-c", "--classifiers", dest="CLASSIFIERS", action="store_true",
                        help="Show trove classifiers")
    fields.add_argument("-a", "--artifacts", dest="ARTIFACTS", action="count", default=0,
                        help="Show distributions; repeat for one line each, three times for URLs")
    fields.add_argument("-d", "--dependencies", dest="DEPENDENCIES", action="store_true",
                        help="Show requires-python and dependencies")
    fields.add_argument("-p", "--packages", dest="PACKAGES", action="store_true",
                        help="Show top-level import names provided by the wheel")
    fields.add_argument("-e", "--executables", dest="EXECUTABLES", action="store_true",
                        help="Show executables and console scripts provided by the wheel")

    parser.add_argument("-v", "--verbose",
                        dest="VERBOSE",
                        help="Show more fields (repeatable)",
                        action="count", default=0)
    parser.add_argument("-q", "--quiet",
                        dest="QUIET",
                        help="Show fewer fields (-qq for the bare minimum)",
                        action="count", default=0)

    parser.add_argument("-f", "--format",
                        dest="OUTPUT_FORMAT",
                        help=f"Output format (default: {Constants.DEFAULT_FORMAT})",
                        action="store",
                        type=str.lower,
                        choices=Constants.SUPPORTED_FORMATS)
    parser.add_argument("-i", "--interactive",
                        dest="INTERACTIVE",
                        help="Browse releases in a terminal UI (same as --format interactive)",
                        action="store_true")
    parser.add_argument("-o", "--output",
                        dest="OUTPUT",
                        help="Write the report to this file instead of stdout",
                        action="store",
                        type=str)
    parser.add_argument("--color",
                        dest="COLOR",
                        help="Colorize pretty output (default: off)",
                        action=argparse.BooleanOptionalAction,
                        default=None)

    parser.add_argument("--index-url",
                        dest="INDEX_URL",
                        help=f"Base URL of the JSON index (default: {Constants.REGISTRY_URL_PYPI})",
                        action="store",
                        type=str)
    parser.add_argument("--config",
                        dest="CONFIG",
                        help="Path to configuration file (YAML, YML, or JSON)",
                        action="store",
                        type=str)
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str.upper,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        default=None)
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)
    return parser


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    return build_parser().parse_args(argv)
