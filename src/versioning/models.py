"""Data models for versions and release filters."""

import functools
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from packaging import version as _pv


@functools.total_ordering
class Version:
    """A parsed, immutable PEP 440 version.

    Equality and ordering follow full PEP 440 precedence, so versions that
    differ only in their local label are distinct and sort next to each other
    (public part first, local label as tie-break).
    """

    __slots__ = ("_parsed",)

    def __init__(self, parsed: _pv.Version):
        self._parsed = parsed

    @property
    def packaging(self) -> _pv.Version:
        """The underlying ``packaging`` version object."""
        return self._parsed

    @property
    def public(self) -> str:
        return self._parsed.public

    @property
    def local(self) -> Optional[str]:
        return self._parsed.local

    @property
    def epoch(self) -> int:
        return self._parsed.epoch

    @property
    def release(self) -> Tuple[int, ...]:
        return self._parsed.release

    @property
    def pre(self) -> Optional[Tuple[str, int]]:
        return self._parsed.pre

    @property
    def post(self) -> Optional[int]:
        return self._parsed.post

    @property
    def dev(self) -> Optional[int]:
        return self._parsed.dev

    @property
    def is_prerelease(self) -> bool:
        return self._parsed.is_prerelease

    @property
    def is_plain_release(self) -> bool:
        """True for bare numeric versions such as ``2.30`` (no epoch or qualifiers)."""
        return (
            self.epoch == 0
            and self.pre is None
            and self.post is None
            and self.dev is None
            and self.local is None
        )

    @property
    def sort_key(self) -> _pv.Version:
        """Ordering key: public precedence first, local label as tie-break."""
        return self._parsed

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._parsed == other._parsed

    def __lt__(self, other: "Version") -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._parsed < other._parsed

    def __hash__(self) -> int:
        return hash(self._parsed)

    def __str__(self) -> str:
        return str(self._parsed)

    def __repr__(self) -> str:
        return f"<Version('{self}')>"


class FilterMode(Enum):
    """How a release filter selects releases."""
    EXACT = "exact"
    PREFIX = "prefix"
    LATEST = "latest"


@dataclass(frozen=True)
class ReleaseFilter:
    """A user request for one or more releases of a package."""
    mode: FilterMode
    version: Optional[Version] = None
    prefix: Tuple[int, ...] = ()
    raw: Optional[str] = None

    @classmethod
    def latest(cls) -> "ReleaseFilter":
        return cls(FilterMode.LATEST)

    @classmethod
    def exact(cls, version: Version, raw: Optional[str] = None) -> "ReleaseFilter":
        return cls(FilterMode.EXACT, version=version, raw=raw or str(version))

    @classmethod
    def prefixed(cls, components: Tuple[int, ...], raw: Optional[str] = None) -> "ReleaseFilter":
        return cls(
            FilterMode.PREFIX,
            prefix=tuple(components),
            raw=raw or ".".join(str(c) for c in components),
        )

    @property
    def can_widen_to_prefix(self) -> bool:
        return self.mode == FilterMode.EXACT and self.version is not None and self.version.is_plain_release

    def as_prefix(self) -> "ReleaseFilter":
        """Reinterpret an exact numeric filter as a version prefix."""
        if not self.can_widen_to_prefix:
            raise ValueError(f"filter {self.raw!r} cannot be used as a prefix")
        return ReleaseFilter.prefixed(self.version.release, raw=self.raw)

    def describe(self) -> str:
        if self.mode == FilterMode.LATEST:
            return "latest"
        if self.mode == FilterMode.PREFIX:
            return f"{self.raw}.*"
        return str(self.raw)
