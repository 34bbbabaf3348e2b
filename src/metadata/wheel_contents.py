"""Wheel inspection: importable top-level names and executable commands.

Reads the ``RECORD`` file and ``entry_points.txt`` of a wheel's
``.dist-info`` directory. Both are optional; anything unreadable simply
yields no names.
"""
from __future__ import annotations

import configparser
import csv
import io
import logging
import zipfile
from typing import Iterable, List, Optional, Set, Tuple

from constants import Constants

logger = logging.getLogger(__name__)

_EXTENSION_SUFFIXES = (".so", ".pyd")


def _read_text(zf: zipfile.ZipFile, name: str) -> Optional[str]:
    try:
        info = zf.getinfo(name)
    except KeyError:
        return None
    if info.file_size > Constants.MAX_RECORD_BYTES:
        logger.debug("Skipping oversized wheel member %s", name)
        return None
    try:
        return zf.read(info).decode("utf-8", errors="replace")
    except (OSError, zipfile.BadZipFile, RuntimeError) as exc:
        logger.debug("Could not read wheel member %s: %s", name, exc)
        return None


def record_paths(record_text: str) -> List[str]:
    """Return the file paths listed in a PEP 376 RECORD file."""
    paths = []
    for row in csv.reader(io.StringIO(record_text)):
        if row and row[0]:
            paths.append(row[0])
    return paths


def _is_metadata_dir(segment: str) -> bool:
    return segment.endswith(".dist-info") or segment.endswith(".data")


def top_level_names(paths: Iterable[str]) -> Tuple[str, ...]:
    """Importable top-level packages and modules provided by ``paths``."""
    names: Set[str] = set()
    for path in paths:
        head, sep, _ = path.partition("/")
        if _is_metadata_dir(head):
            continue
        if not sep:
            if head.endswith(".py"):
                head = head[:-3]
            elif head.endswith(_EXTENSION_SUFFIXES):
                head = head.split(".", 1)[0]
            elif head.endswith(".pth"):
                continue
        if head:
            names.add(head)
    return tuple(sorted(names))


def data_scripts(paths: Iterable[str]) -> Tuple[str, ...]:
    """Script file names installed from ``<name>.data/scripts/``."""
    scripts: Set[str] = set()
    for path in paths:
        parts = path.split("/")
        if len(parts) == 3 and parts[0].endswith(".data") and parts[1] == "scripts" and parts[2]:
            scripts.add(parts[2])
    return tuple(sorted(scripts))


def console_scripts(entry_points_text: str) -> Tuple[str, ...]:
    """Names declared in the ``console_scripts`` group of ``entry_points.txt``."""
    parser = configparser.ConfigParser(delimiters=("=",), interpolation=None)
    parser.optionxform = str  # type: ignore[assignment]
    try:
        parser.read_string(entry_points_text)
    except configparser.Error as exc:
        logger.debug("Unreadable entry_points.txt: %s", exc)
        return ()
    if not parser.has_section("console_scripts"):
        return ()
    return tuple(sorted(parser.options("console_scripts")))


def inspect_wheel(zf: zipfile.ZipFile, dist_info: str) -> Tuple[Tuple[str, ...], Tuple[str, ...]]:
    """Return (top-level names, executables) for the wheel open in ``zf``."""
    record = _read_text(zf, f"{dist_info}/RECORD")
    paths = record_paths(record) if record else []
    packages = top_level_names(paths)

    executables = set(data_scripts(paths))
    entry_points = _read_text(zf, f"{dist_info}/entry_points.txt")
    if entry_points:
        executables.update(console_scripts(entry_points))
    return packages, tuple(sorted(executables))
