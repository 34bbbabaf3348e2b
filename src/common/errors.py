"""Error taxonomy shared by the resolver, extractor and front ends.

Engine modules raise these; only the CLI entry point maps them to exit codes.
"""
from __future__ import annotations


class KayakError(Exception):
    """Base class for every error this program reports to the user."""


class NotFound(KayakError):
    """The package, or the requested version/distribution, is not on the index."""


class TransportError(KayakError):
    """The index or an archive host could not be reached or answered badly."""


class InvalidVersion(KayakError, ValueError):
    """A version or version constraint does not parse."""


class InvalidSelector(KayakError, ValueError):
    """A distribution selector is neither ``sdist`` nor a wheel tag triple."""


class ExtractionError(KayakError):
    """An archive was fetched but its metadata record could not be read."""


class MalformedArchive(ExtractionError):
    """The archive bytes are not a readable archive of the expected kind."""


class MissingMetadataRecord(ExtractionError):
    """No single unambiguous metadata record exists inside the archive."""


class UnparsableField(ExtractionError):
    """A field required to identify the distribution could not be parsed."""
