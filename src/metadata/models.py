"""Data models for extracted distribution metadata."""

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple


@dataclass(frozen=True)
class DependencySpecifier:
    """One ``Requires-Dist`` entry split into its parts.

    The marker is kept verbatim for display; it is never evaluated.
    """
    name: str
    constraint: str = ""
    marker: Optional[str] = None
    extras: Tuple[str, ...] = ()
    url: Optional[str] = None

    def __str__(self) -> str:
        text = self.name
        if self.extras:
            text += "[" + ",".join(self.extras) + "]"
        if self.url:
            text += f" @ {self.url}"
        elif self.constraint:
            text += f" {self.constraint}"
        if self.marker:
            text += f" ; {self.marker}"
        return text


def split_classifier(classifier: str) -> Tuple[str, ...]:
    """Split a trove classifier into its ``::``-delimited taxonomy path."""
    return tuple(part.strip() for part in classifier.split("::") if part.strip())


@dataclass(frozen=True)
class DistributionMetadata:
    """Normalized core metadata of one distribution.

    Every optional field is ``None`` (or empty) when the record does not carry
    it; absence is never an error.
    """
    name: str
    version: Optional[str] = None
    metadata_version: Optional[str] = None
    summary: Optional[str] = None
    license: Optional[str] = None
    license_expression: Optional[str] = None
    author: Optional[str] = None
    author_email: Optional[str] = None
    maintainer: Optional[str] = None
    maintainer_email: Optional[str] = None
    keywords: Tuple[str, ...] = ()
    classifiers: Tuple[str, ...] = ()
    project_urls: Dict[str, str] = field(default_factory=dict)
    requires_python: Optional[str] = None
    dependencies: Tuple[DependencySpecifier, ...] = ()
    provides_extras: Tuple[str, ...] = ()
    skipped_dependencies: int = 0
    skipped_fields: Tuple[str, ...] = ()
    # Wheel-only; None means "not inspectable" (e.g. a source archive).
    top_level_names: Optional[Tuple[str, ...]] = None
    executables: Optional[Tuple[str, ...]] = None

    @property
    def license_text(self) -> Optional[str]:
        """SPDX expression when present, otherwise the free-text license."""
        return self.license_expression or self.license

    @property
    def contact(self) -> Optional[str]:
        """Author contact, falling back to the maintainer."""
        return _format_contact(self.author, self.author_email) or _format_contact(
            self.maintainer, self.maintainer_email
        )


def _format_contact(name: Optional[str], email: Optional[str]) -> Optional[str]:
    name = (name or "").strip()
    email = (email or "").replace('"', "").strip()
    if name and email:
        if name in email:
            return email
        return f"{name} <{email}>"
    return name or email or None
