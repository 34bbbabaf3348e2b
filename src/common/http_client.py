"""Shared HTTP helpers used by the index and archive clients.

Encapsulates common request/timeout error handling so callers avoid
duplicating try/except blocks. Failures surface as ``TransportError``;
no retries are attempted here.
"""
from __future__ import annotations

import logging
from typing import Any

import requests

from constants import Constants
from common.errors import TransportError
from common.logging_utils import extra_context, is_debug_enabled, safe_url, Timer

logger = logging.getLogger(__name__)


def safe_get(url: str, *, context: str, **kwargs: Any) -> requests.Response:
    """Perform a GET request with consistent error handling and DEBUG traces.

    Args:
        url: Target URL.
        context: Human-readable source tag for logs (e.g., "index", "archive").
        **kwargs: Passed through to requests.get.

    Returns:
        requests.Response: The HTTP response object, whatever its status.

    Raises:
        TransportError: On timeout or connection failure.
    """
    safe_target = safe_url(url)
    with Timer() as t:
        if is_debug_enabled(logger):
            logger.debug(
                "HTTP request",
                extra=extra_context(
                    event="http_request",
                    component="http_client",
                    action="GET",
                    target=safe_target,
                )
            )
        try:
            res = requests.get(url, timeout=Constants.REQUEST_TIMEOUT, **kwargs)
        except requests.Timeout as exc:
            logger.debug("%s request timed out", context)
            raise TransportError(
                f"{context} request to {safe_target} timed out after {Constants.REQUEST_TIMEOUT} seconds"
            ) from exc
        except requests.RequestException as exc:  # includes ConnectionError
            raise TransportError(f"{context} connection error: {exc}") from exc
        if is_debug_enabled(logger):
            logger.debug(
                "HTTP response",
                extra=extra_context(
                    event="http_response",
                    component="http_client",
                    action="GET",
                    outcome="success" if res.status_code == 200 else "non_200",
                    status_code=res.status_code,
                    duration_ms=t.duration_ms(),
                    target=safe_target,
                )
            )
        return res


def get_bytes(url: str, *, context: str, limit: int = Constants.MAX_ARCHIVE_BYTES) -> bytes:
    """GET ``url`` and return the body, refusing bodies larger than ``limit``.

    Raises:
        TransportError: On connection failure, non-200 status, or oversize body.
    """
    res = safe_get(url, context=context, stream=True)
    try:
        if res.status_code != 200:
            raise TransportError(f"{context} returned HTTP {res.status_code} for {safe_url(url)}")
        declared = res.headers.get("Content-Length")
        if declared and declared.isdigit() and int(declared) > limit:
            raise TransportError(f"{context} body of {declared} bytes exceeds limit of {limit}")
        chunks = []
        received = 0
        for chunk in res.iter_content(chunk_size=64 * 1024):
            received += len(chunk)
            if received > limit:
                raise TransportError(f"{context} body exceeds limit of {limit} bytes")
            chunks.append(chunk)
        return b"".join(chunks)
    except requests.RequestException as exc:
        raise TransportError(f"{context} read error: {exc}") from exc
    finally:
        res.close()
