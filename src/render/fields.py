"""Which fields a rendering shows, driven by a verbosity level."""

from dataclasses import dataclass, replace
from enum import Enum
from typing import FrozenSet, Iterable, Optional, Tuple

from constants import Constants


class Field(Enum):
    """Displayable groups of release information, in display order."""
    NAME = "name"
    SUMMARY = "summary"
    LICENSE = "license"
    URLS = "urls"
    KEYWORDS = "keywords"
    CLASSIFIERS = "classifiers"
    ARTIFACTS = "artifacts"
    DEPENDENCIES = "dependencies"
    PACKAGES = "packages"
    EXECUTABLES = "executables"


# Lowest verbosity level at which a field is shown. Fields missing here are
# only ever shown when asked for explicitly.
THRESHOLDS = {
    Field.NAME: 1,
    Field.SUMMARY: 2,
    Field.LICENSE: 3,
    Field.URLS: 3,
    Field.KEYWORDS: 4,
    Field.CLASSIFIERS: 4,
    Field.ARTIFACTS: 5,
    Field.DEPENDENCIES: 6,
}

METADATA_FIELDS = frozenset({
    Field.SUMMARY,
    Field.LICENSE,
    Field.URLS,
    Field.KEYWORDS,
    Field.CLASSIFIERS,
    Field.DEPENDENCIES,
    Field.PACKAGES,
    Field.EXECUTABLES,
})

# Only a wheel's own file list can answer these.
ARCHIVE_FIELDS = frozenset({Field.PACKAGES, Field.EXECUTABLES})


def verbosity_level(verbose: int = 0, quiet: int = 0) -> int:
    """Map ``-v``/``-q`` counts onto a level: ``-qq`` 0, ``-q`` 1, else 2 plus ``-v``."""
    if quiet >= 2:
        return 0
    if quiet == 1:
        return 1
    return min(Constants.DEFAULT_VERBOSITY + max(verbose, 0), Constants.MAX_VERBOSITY)


@dataclass(frozen=True)
class DisplayConfiguration:
    """Fields to show: everything up to ``level`` plus the ``forced`` ones.

    ``artifact_detail`` controls distribution listings: below 2 a one-line
    summary, from 2 one line per distribution, above 2 with download URLs.
    """
    level: int = Constants.DEFAULT_VERBOSITY
    forced: FrozenSet[Field] = frozenset()
    artifact_detail: int = 0

    @classmethod
    def from_flags(
        cls,
        verbose: int = 0,
        quiet: int = 0,
        forced: Optional[Iterable[Field]] = None,
        artifact_detail: int = 0,
    ) -> "DisplayConfiguration":
        forced_set = set(forced or ())
        if artifact_detail:
            forced_set.add(Field.ARTIFACTS)
        return cls(
            level=verbosity_level(verbose, quiet),
            forced=frozenset(forced_set),
            artifact_detail=artifact_detail,
        )

    def shows(self, field: Field) -> bool:
        if field in self.forced:
            return True
        threshold = THRESHOLDS.get(field)
        return threshold is not None and self.level >= threshold

    @property
    def fields(self) -> Tuple[Field, ...]:
        return tuple(f for f in Field if self.shows(f))

    @property
    def needs_metadata(self) -> bool:
        """True when some shown field comes from a distribution's metadata."""
        return any(self.shows(f) for f in METADATA_FIELDS)

    @property
    def needs_archive(self) -> bool:
        """True when some shown field can only come from the archive itself."""
        return any(self.shows(f) for f in ARCHIVE_FIELDS)

    def with_level(self, level: int) -> "DisplayConfiguration":
        return replace(self, level=max(0, min(level, Constants.MAX_VERBOSITY)))
