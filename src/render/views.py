"""Read-only snapshots handed to the renderers."""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from catalog.models import Distribution, MetadataState, Package, Release
from metadata.models import DistributionMetadata


class MetadataSource(Enum):
    """Where the metadata in a view came from."""
    ARCHIVE = "archive"
    INDEX = "index"
    NONE = "none"


# Icons for well-known project link labels, as shown on the index's own pages.
_URL_ICONS = (
    (("package index",), "📦"),
    (("download",), "⇩"),
    (("home", "homepage", "home page"), "🏠"),
    (("changelog", "change log", "changes", "release notes", "news", "what's new", "history"), "📜"),
    (("docs", "documentation"), "📄"),
    (("bug", "issue", "issues", "tracker", "report", "bug tracker", "issue tracker"), "🐞"),
    (("funding", "donate", "donation", "sponsor"), "💸"),
    (("source", "source code", "repository", "code"), "🧩"),
    (("mastodon",), "🐘"),
)
_DEFAULT_ICON = "🔗"

PACKAGE_INDEX_LABEL = "Package Index"


def url_icon(label: str) -> str:
    key = (label or "").strip().lower()
    for labels, icon in _URL_ICONS:
        if key in labels:
            return icon
    return _DEFAULT_ICON


@dataclass(frozen=True)
class ReleaseView:
    """Everything needed to render one release (and one of its distributions).

    Attributes:
        package_name: Display name of the package.
        project_url: The package's page on the index.
        release: The release being shown.
        distribution: The distribution whose metadata is shown, if any.
        metadata: Effective metadata, from the archive or the index.
        metadata_source: Origin of ``metadata``.
        failure: Why metadata could not be read, if it could not.
        yanked_fallback: The release was chosen although it is yanked.
        loading: A fetch for ``distribution`` is in flight.
        explicit_distribution: The distribution was picked by the user.
    """
    package_name: str
    project_url: Optional[str]
    release: Release
    distribution: Optional[Distribution] = None
    metadata: Optional[DistributionMetadata] = None
    metadata_source: MetadataSource = MetadataSource.NONE
    failure: Optional[str] = None
    yanked_fallback: bool = False
    loading: bool = False
    explicit_distribution: bool = False

    @classmethod
    def build(
        cls,
        package: Package,
        release: Release,
        distribution: Optional[Distribution] = None,
        *,
        failure: Optional[str] = None,
        yanked_fallback: bool = False,
        loading: bool = False,
        explicit_distribution: bool = False,
    ) -> "ReleaseView":
        """Snapshot the current state of ``release``.

        Archive metadata wins; otherwise index metadata is used when it
        describes this very release.
        """
        metadata = None
        source = MetadataSource.NONE
        if distribution is not None and distribution.metadata is not None:
            metadata, source = distribution.metadata, MetadataSource.ARCHIVE
        else:
            fallback = package.index_metadata_for(release)
            if fallback is not None:
                metadata, source = fallback, MetadataSource.INDEX
        if failure is None and distribution is not None and distribution.metadata_error is not None:
            failure = str(distribution.metadata_error)
        return cls(
            package_name=package.name,
            project_url=package.project_url,
            release=release,
            distribution=distribution,
            metadata=metadata,
            metadata_source=source,
            failure=failure,
            yanked_fallback=yanked_fallback,
            loading=loading,
            explicit_distribution=explicit_distribution,
        )

    @property
    def version(self) -> str:
        return str(self.release.version)

    @property
    def title(self) -> str:
        text = f"{self.package_name}@{self.version}"
        if self.release.yanked:
            text += " [YANKED]"
        return text

    @property
    def status(self) -> str:
        """Short metadata status, also used as a CSV cell."""
        if self.loading:
            return "loading"
        if self.metadata_source is MetadataSource.ARCHIVE:
            return "archive"
        if self.failure:
            return "failed"
        if self.metadata_source is MetadataSource.INDEX:
            return "index"
        return "unresolved"

    @property
    def requires_python(self) -> Optional[str]:
        if self.metadata is not None and self.metadata.requires_python:
            return self.metadata.requires_python
        if self.distribution is not None:
            return self.distribution.requires_python
        return None

    def urls(self) -> List[Tuple[str, str]]:
        """Project links, starting with the package's index page."""
        links: List[Tuple[str, str]] = []
        if self.project_url:
            links.append((PACKAGE_INDEX_LABEL, self.project_url))
        if self.metadata is not None:
            links.extend(self.metadata.project_urls.items())
        return links

    def distributions(self) -> List[Distribution]:
        """Distributions to list: the chosen one only, or all of the release."""
        if self.explicit_distribution and self.distribution is not None:
            return [self.distribution]
        return list(self.release.distributions)

    def metadata_for(self, distribution: Distribution) -> Tuple[Optional[DistributionMetadata], str]:
        """Metadata and status for one row of a per-distribution listing."""
        if distribution is self.distribution:
            return self.metadata, self.status
        if distribution.metadata_state is MetadataState.RESOLVED:
            return distribution.metadata, "archive"
        if distribution.metadata_state is MetadataState.FAILED:
            return None, "failed"
        return None, "unresolved"
