"""In-memory model of a package, its releases and their distributions."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from packaging import version as _pv
from packaging.utils import InvalidWheelFilename, parse_wheel_filename

from common.errors import ExtractionError
from metadata.models import DistributionMetadata
from versioning.models import Version


class DistributionKind(Enum):
    """Source archive or built (wheel-style) distribution."""
    SOURCE = "sdist"
    BUILT = "built"


class MetadataState(Enum):
    """Whether a distribution's metadata has been extracted yet."""
    UNRESOLVED = "unresolved"
    RESOLVED = "resolved"
    FAILED = "failed"


@dataclass(frozen=True)
class WheelTag:
    """A PEP 425 compatibility tag triple as written in a wheel file name."""
    python: str
    abi: str
    platform: str

    @classmethod
    def from_filename(cls, filename: str) -> Optional["WheelTag"]:
        try:
            parse_wheel_filename(filename)
        except InvalidWheelFilename:
            return None
        python, abi, platform = filename[:-len(".whl")].split("-")[-3:]
        return cls(python, abi, platform)

    @property
    def python_tags(self) -> Tuple[str, ...]:
        return tuple(self.python.split("."))

    @property
    def for_any_platform(self) -> bool:
        return self.platform == "any"

    @property
    def for_any_abi(self) -> bool:
        return self.abi == "none"

    @property
    def is_pure(self) -> bool:
        return self.for_any_platform and self.for_any_abi

    @property
    def is_universal(self) -> bool:
        return self.is_pure and self.python_tags == ("py2", "py3")

    def __str__(self) -> str:
        return f"{self.python}-{self.abi}-{self.platform}"


@dataclass(eq=False)
class Distribution:
    """One downloadable archive of a release.

    ``metadata`` stays ``None`` until extraction has run; a failed extraction
    is kept in ``metadata_error`` so that "not fetched", "fetched" and
    "failed" remain distinguishable.
    """
    filename: str
    url: str
    kind: DistributionKind
    packagetype: str = ""
    requires_python: Optional[str] = None
    size: Optional[int] = None
    upload_time: Optional[str] = None
    sha256: Optional[str] = None
    yanked: bool = False
    yanked_reason: Optional[str] = None
    metadata: Optional[DistributionMetadata] = None
    metadata_error: Optional[ExtractionError] = None

    @property
    def metadata_state(self) -> MetadataState:
        if self.metadata is not None:
            return MetadataState.RESOLVED
        if self.metadata_error is not None:
            return MetadataState.FAILED
        return MetadataState.UNRESOLVED

    @property
    def is_source(self) -> bool:
        return self.kind is DistributionKind.SOURCE

    @property
    def wheel_tag(self) -> Optional[WheelTag]:
        if self.is_source:
            return None
        return WheelTag.from_filename(self.filename)

    @property
    def build_tag(self) -> Tuple:
        """Wheel build tag as ``(number, suffix)``; empty when absent."""
        if self.is_source:
            return ()
        try:
            return parse_wheel_filename(self.filename)[2]
        except InvalidWheelFilename:
            return ()

    @property
    def label(self) -> str:
        """Short display name: ``sdist`` or the wheel's compatibility tag."""
        if self.is_source:
            return "sdist"
        tag = self.wheel_tag
        return str(tag) if tag else self.filename


@dataclass(eq=False)
class Release:
    """One published version with its yank status and distributions."""
    version: Version
    distributions: List[Distribution] = field(default_factory=list)
    yanked: bool = False
    yanked_reason: Optional[str] = None

    @property
    def source(self) -> Optional[Distribution]:
        return next((d for d in self.distributions if d.is_source), None)

    @property
    def built(self) -> List[Distribution]:
        return [d for d in self.distributions if not d.is_source]

    @property
    def upload_time(self) -> Optional[str]:
        times = sorted(d.upload_time for d in self.distributions if d.upload_time)
        return times[0] if times else None

    def summarize_distributions(self) -> str:
        """Describe the kinds of archives on offer, e.g. ``sdist and pure wheel``."""
        sdist = universal = pure = platform = 0
        for dist in self.distributions:
            if dist.is_source:
                sdist += 1
                continue
            tag = dist.wheel_tag
            if tag is None:
                continue
            if tag.is_universal:
                universal += 1
            elif tag.is_pure:
                pure += 1
            else:
                platform += 1
        parts = []
        if sdist:
            parts.append("sdist")
        if universal:
            parts.append("universal wheel")
        if pure:
            parts.append("pure wheels" if pure > 1 else "pure wheel")
        if platform:
            parts.append("platform-specific wheels" if platform > 1 else "platform-specific wheel")
        return " and ".join(parts)


@dataclass(eq=False)
class Package:
    """A project on the index; ``releases`` are ordered newest first.

    ``index_metadata`` is what the index itself reports, which describes
    ``info_version`` only.
    """
    name: str
    normalized_name: str
    releases: List[Release] = field(default_factory=list)
    info_version: Optional[str] = None
    index_metadata: Optional[DistributionMetadata] = None
    project_url: Optional[str] = None

    @property
    def versions(self) -> List[Version]:
        return [r.version for r in self.releases]

    def index_metadata_for(self, release: Release) -> Optional[DistributionMetadata]:
        """Index-level metadata, only when it describes ``release``."""
        if self.index_metadata is None or not self.info_version:
            return None
        try:
            current = _pv.Version(self.info_version)
        except _pv.InvalidVersion:
            return None
        return self.index_metadata if release.version.packaging == current else None
