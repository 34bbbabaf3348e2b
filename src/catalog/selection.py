"""Release and distribution selection over a built Package."""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional, Tuple

from packaging.tags import parse_tag
from packaging.utils import InvalidWheelFilename, parse_wheel_filename

from constants import Constants
from common.errors import InvalidSelector, NotFound
from versioning.models import FilterMode, ReleaseFilter
from versioning.parser import compare, has_prefix

from .models import Distribution, Package, Release

logger = logging.getLogger(__name__)

_TAG_TRIPLE = re.compile(r"^[^-\s]+-[^-\s]+-[^-\s]+$")


@dataclass(frozen=True)
class Selection:
    """Releases chosen by a filter, newest first.

    ``yanked_fallback`` is set when the default filter found only yanked
    releases and returned the newest of them anyway.
    """
    releases: Tuple[Release, ...]
    release_filter: ReleaseFilter
    yanked_fallback: bool = False

    @property
    def first(self) -> Optional[Release]:
        return self.releases[0] if self.releases else None

    def __bool__(self) -> bool:
        return bool(self.releases)

    def __len__(self) -> int:
        return len(self.releases)


def _exact(release: Release, release_filter: ReleaseFilter) -> bool:
    wanted = release_filter.version
    if wanted.local is not None:
        return release.version == wanted
    return compare(release.version, wanted) == 0


def releases_matching(package: Package, release_filter: ReleaseFilter) -> Selection:
    """Select releases of ``package`` according to ``release_filter``.

    EXACT returns every release with the requested version (local variants
    of a public version are all kept), PREFIX every release whose leading
    release components equal the prefix, LATEST the single newest non-yanked
    release, falling back to the newest yanked one.
    """
    if release_filter.mode is FilterMode.LATEST:
        for release in package.releases:
            if not release.yanked:
                return Selection((release,), release_filter)
        if package.releases:
            logger.warning("Every release of %s is yanked; showing %s", package.name, package.releases[0].version)
            return Selection((package.releases[0],), release_filter, yanked_fallback=True)
        return Selection((), release_filter)

    if release_filter.mode is FilterMode.PREFIX:
        chosen = tuple(r for r in package.releases if has_prefix(r.version, release_filter.prefix))
    else:
        chosen = tuple(r for r in package.releases if _exact(r, release_filter))
    return Selection(chosen, release_filter)


def find_releases(package: Package, release_filter: ReleaseFilter) -> Selection:
    """Like ``releases_matching`` but treat a plain numeric version as a prefix.

    ``2.30`` selects 2.30.1 and 2.30.0 alike, newest first. Zero padding in
    ``has_prefix`` keeps the release equal to the request in the result.

    Raises:
        NotFound: If nothing matches.
    """
    if release_filter.can_widen_to_prefix:
        logger.debug("Treating %s as a version prefix", release_filter.raw)
        release_filter = release_filter.as_prefix()
    selection = releases_matching(package, release_filter)
    if not selection:
        if release_filter.mode is FilterMode.LATEST:
            raise NotFound(f"{package.name} has no releases")
        raise NotFound(f"{package.name} has no release matching {release_filter.describe()}")
    return selection


def _rank(dist: Distribution) -> Tuple:
    tag = dist.wheel_tag
    if tag is None:
        return (-1 if dist.is_source else -2,)
    if tag.is_universal:
        score = 5
    elif tag.is_pure:
        score = 4
    elif tag.for_any_platform:
        score = 3
    elif tag.for_any_abi:
        score = 2
    else:
        score = 1
    return (score, dist.build_tag)


def preferred_distribution(release: Release) -> Optional[Distribution]:
    """Pick the most broadly usable distribution of a release.

    Universal wheel, then pure wheel, any-platform wheel, any-abi wheel,
    any other wheel and finally the source archive. Ties keep index order.
    """
    best: Optional[Distribution] = None
    best_rank: Tuple = ()
    for dist in release.distributions:
        rank = _rank(dist)
        if best is None or rank > best_rank:
            best, best_rank = dist, rank
    return best


def _wheel_tags(dist: Distribution) -> frozenset:
    try:
        return parse_wheel_filename(dist.filename)[3]
    except InvalidWheelFilename:
        return frozenset()


def check_selector(selector: str) -> str:
    """Return the stripped selector if it is 'sdist' or a wheel tag triple.

    Raises:
        InvalidSelector: Otherwise.
    """
    selector = (selector or "").strip()
    if selector.lower() == Constants.SOURCE_SELECTOR or _TAG_TRIPLE.match(selector):
        return selector
    raise InvalidSelector(f"'{selector}' is neither 'sdist' nor a wheel tag like 'py3-none-any'")


def pick_distribution(release: Release, selector: Optional[str] = None) -> Distribution:
    """Choose a distribution of ``release``.

    Args:
        release: The release to choose from.
        selector: ``None`` for the preferred distribution, ``sdist`` for the
            source archive, or a wheel tag triple such as ``py3-none-any``.
            A triple matches every wheel whose tag set covers it; the exact
            triple and then the highest build tag win.

    Raises:
        InvalidSelector: If the selector is neither ``sdist`` nor a tag triple.
        NotFound: If no distribution of the release matches.
    """
    if not selector:
        dist = preferred_distribution(release)
        if dist is None:
            raise NotFound(f"release {release.version} has no distributions")
        return dist

    selector = selector.strip()
    if selector.lower() == Constants.SOURCE_SELECTOR:
        if release.source is None:
            raise NotFound(f"release {release.version} has no source distribution")
        return release.source

    wanted = parse_tag(check_selector(selector))

    candidates = [d for d in release.built if wanted and wanted <= _wheel_tags(d)]
    if not candidates:
        raise NotFound(f"release {release.version} has no distribution for {selector}")
    return max(candidates, key=lambda d: (d.label == selector, d.build_tag))
