"""Version parsing, comparison and constraint matching."""

from typing import Optional, Sequence

from packaging import version as _pv
from packaging.specifiers import InvalidSpecifier, SpecifierSet

from common.errors import InvalidVersion
from .models import ReleaseFilter, Version


def parse(text: str) -> Version:
    """Parse ``text`` as a PEP 440 version.

    Raises:
        InvalidVersion: If the text is empty or not a valid version.
    """
    if not isinstance(text, str) or not text.strip():
        raise InvalidVersion("empty version string")
    try:
        return Version(_pv.Version(text.strip()))
    except _pv.InvalidVersion as exc:
        raise InvalidVersion(f"'{text}' is not a valid version") from exc


def compare(a: Version, b: Version) -> int:
    """Three-way comparison on public precedence.

    Returns -1, 0 or 1. Versions differing only in their local label compare
    equal here even though they remain distinct values.
    """
    left = _pv.Version(a.public)
    right = _pv.Version(b.public)
    if left < right:
        return -1
    if left > right:
        return 1
    return 0


def matches(version: Version, constraint: Optional[str]) -> bool:
    """Evaluate a comma-separated comparator list against ``version``.

    Prereleases are always eligible; an empty constraint matches everything.

    Raises:
        InvalidVersion: If the constraint does not parse.
    """
    constraint = (constraint or "").strip()
    if not constraint:
        return True
    try:
        spec = SpecifierSet(constraint)
    except InvalidSpecifier as exc:
        raise InvalidVersion(f"'{constraint}' is not a valid version constraint") from exc
    return spec.contains(version.packaging, prereleases=True)


def has_prefix(version: Version, components: Sequence[int]) -> bool:
    """True when the leading release components equal ``components``.

    Missing trailing components of ``version`` count as zero, so ``2`` has
    the prefix ``2.0``.
    """
    wanted = tuple(components)
    release = version.release
    if len(release) < len(wanted):
        release = release + (0,) * (len(wanted) - len(release))
    return release[:len(wanted)] == wanted


def parse_filter(text: Optional[str]) -> ReleaseFilter:
    """Turn a user-supplied version argument into a release filter.

    An empty value or ``latest`` selects the newest non-yanked release;
    anything else must be a valid version and starts out as an exact filter.

    Raises:
        InvalidVersion: If the text is not a valid version.
    """
    if text is None or not text.strip() or text.strip().lower() == "latest":
        return ReleaseFilter.latest()
    return ReleaseFilter.exact(parse(text), raw=text.strip())
