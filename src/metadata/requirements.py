"""Dependency specifier parsing.

Grammar (one ``Requires-Dist`` value)::

    <name> [ "[" extras "]" ] [ "(" <range> ")" | <range> | "@" <url> ] [ ";" <marker> ]

The range must be a valid specifier set and the marker a valid marker
expression. Markers are parsed for validity only; they are never evaluated
against the running environment.
"""
from __future__ import annotations

import logging
import re
from typing import Iterable, List, Tuple

from packaging.markers import InvalidMarker, Marker
from packaging.specifiers import InvalidSpecifier, SpecifierSet

from common.errors import UnparsableField
from .models import DependencySpecifier

logger = logging.getLogger(__name__)

_NAME = r"[A-Za-z0-9](?:[A-Za-z0-9._-]*[A-Za-z0-9])?"
_DEPENDENCY = re.compile(
    r"^\s*(?P<name>" + _NAME + r")\s*"
    r"(?:\[(?P<extras>[^\]]*)\])?\s*"
    r"(?:\((?P<paren>[^()]*)\)|@\s*(?P<url>\S+)|(?P<bare>[^;()@]*?))\s*"
    r"(?:;(?P<marker>.*))?$"
)
_EXTRA = re.compile(r"^" + _NAME + r"$")


def parse_dependency(line: str) -> DependencySpecifier:
    """Split one dependency line into name, range, marker, extras and URL.

    Raises:
        UnparsableField: If the line does not follow the grammar.
    """
    match = _DEPENDENCY.match(line or "")
    if not match:
        raise UnparsableField(f"malformed dependency line: {line!r}")

    extras: Tuple[str, ...] = ()
    if match.group("extras") is not None:
        extras = tuple(e.strip() for e in match.group("extras").split(",") if e.strip())
        if not all(_EXTRA.match(e) for e in extras):
            raise UnparsableField(f"malformed extras in dependency line: {line!r}")

    constraint = (match.group("paren") if match.group("paren") is not None else match.group("bare") or "").strip()
    if constraint:
        try:
            SpecifierSet(constraint)
        except InvalidSpecifier as exc:
            raise UnparsableField(f"malformed version range in dependency line: {line!r}") from exc

    marker = match.group("marker")
    if marker is not None:
        marker = marker.strip()
        if not marker:
            raise UnparsableField(f"empty marker in dependency line: {line!r}")
        try:
            Marker(marker)
        except InvalidMarker as exc:
            raise UnparsableField(f"malformed marker in dependency line: {line!r}") from exc

    return DependencySpecifier(
        name=match.group("name"),
        constraint=constraint,
        marker=marker,
        extras=extras,
        url=match.group("url"),
    )


def parse_dependencies(lines: Iterable[str]) -> Tuple[List[DependencySpecifier], int]:
    """Parse every line, skipping malformed ones.

    Returns:
        Tuple of (parsed specifiers in input order, number of skipped lines).
    """
    parsed: List[DependencySpecifier] = []
    skipped = 0
    for line in lines:
        try:
            parsed.append(parse_dependency(line))
        except UnparsableField as exc:
            skipped += 1
            logger.debug("Skipping dependency: %s", exc)
    return parsed, skipped
