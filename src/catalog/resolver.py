"""Lazy metadata resolution for distributions.

``load_metadata`` does the work without touching the catalog so it can run
on a background worker; ``store_metadata`` applies a result on the thread
that owns the catalog. ``resolve_metadata`` chains both for synchronous
callers.
"""
from __future__ import annotations

import logging
from typing import Callable, Optional

from common.errors import ExtractionError
from common.logging_utils import Timer, extra_context, is_debug_enabled
from metadata.extractor import archive_kind_for, extract
from metadata.models import DistributionMetadata
from registry.pypi import client

from .models import Distribution

logger = logging.getLogger(__name__)

FetchBytes = Callable[[str], bytes]


def load_metadata(distribution: Distribution, fetch_bytes: Optional[FetchBytes] = None) -> DistributionMetadata:
    """Fetch the distribution's archive and extract its metadata.

    The archive bytes are dropped once extraction finishes.

    Raises:
        TransportError: If the archive cannot be downloaded.
        ExtractionError: If the archive carries no readable metadata.
    """
    fetch = fetch_bytes or client.fetch_bytes
    kind = archive_kind_for(distribution.filename)
    with Timer() as timer:
        payload = fetch(distribution.url)
        metadata = extract(payload, kind)
    if is_debug_enabled(logger):
        logger.debug(
            "Distribution metadata loaded",
            extra=extra_context(
                event="resolve",
                component="catalog",
                action="load_metadata",
                outcome="success",
                target=distribution.filename,
                duration_ms=timer.duration_ms(),
            )
        )
    return metadata


def store_metadata(
    distribution: Distribution,
    metadata: Optional[DistributionMetadata] = None,
    error: Optional[BaseException] = None,
) -> None:
    """Record the outcome of ``load_metadata`` on the distribution.

    Only extraction failures are remembered; anything else (a transport
    failure) leaves the slot unresolved so it can be retried.
    """
    if metadata is not None:
        distribution.metadata = metadata
        distribution.metadata_error = None
    elif isinstance(error, ExtractionError):
        logger.warning("Could not read metadata from %s: %s", distribution.filename, error)
        distribution.metadata_error = error


def resolve_metadata(distribution: Distribution, fetch_bytes: Optional[FetchBytes] = None) -> DistributionMetadata:
    """Return the distribution's metadata, fetching it on first use.

    Both successful and failed extractions are cached on the distribution
    for the rest of the process.

    Raises:
        TransportError: If the archive cannot be downloaded (not cached).
        ExtractionError: If extraction fails now or failed earlier.
    """
    if distribution.metadata is not None:
        return distribution.metadata
    if distribution.metadata_error is not None:
        raise distribution.metadata_error
    try:
        metadata = load_metadata(distribution, fetch_bytes)
    except ExtractionError as exc:
        store_metadata(distribution, error=exc)
        raise
    store_metadata(distribution, metadata=metadata)
    return metadata
