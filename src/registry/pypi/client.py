"""PyPI registry client: fetch the JSON index document and distribution archives."""
from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, Optional

from packaging.utils import canonicalize_name

from constants import Constants
from common.errors import NotFound, TransportError
from common.http_client import safe_get, get_bytes
from common.logging_utils import extra_context, is_debug_enabled, safe_url

logger = logging.getLogger(__name__)

HEADERS_JSON = {"Accept": "application/json"}

_VALID_NAME = re.compile(r"^([A-Z0-9]|[A-Z0-9][A-Z0-9._-]*[A-Z0-9])$", re.IGNORECASE)


def normalize_name(name: str) -> str:
    """Validate a project name and return its normalized form.

    Args:
        name: Project name as typed by the user, e.g. ``Flask_RESTful``.

    Returns:
        str: Canonical name, e.g. ``flask-restful``.

    Raises:
        NotFound: If the name can never exist on a package index.
    """
    candidate = (name or "").strip()
    if not _VALID_NAME.match(candidate):
        raise NotFound(f"'{name}' is not a valid project name")
    return canonicalize_name(candidate)


def fetch_index(name: str, url: Optional[str] = None) -> Dict[str, Any]:
    """Fetch the project's JSON index document.

    Args:
        name: Project name (normalized here).
        url: Index base URL. Defaults to Constants.REGISTRY_URL_PYPI.

    Returns:
        dict: The decoded JSON document with ``info`` and ``releases`` keys.

    Raises:
        NotFound: If the index has no such project.
        TransportError: If the index cannot be reached or answers badly.
    """
    base = url or Constants.REGISTRY_URL_PYPI
    if not base.endswith("/"):
        base += "/"
    normalized = normalize_name(name)
    fullurl = f"{base}{normalized}/json"
    logger.info("Looking up %s on %s", normalized, safe_url(base))

    res = safe_get(fullurl, context="index", headers=HEADERS_JSON)
    if res.status_code == 404:
        raise NotFound(f"project '{name}' was not found on the index")
    if res.status_code != 200:
        raise TransportError(f"index returned HTTP {res.status_code} for {safe_url(fullurl)}")
    try:
        document = json.loads(res.text)
    except json.JSONDecodeError as exc:
        raise TransportError(f"index returned invalid JSON for {normalized}") from exc
    if not isinstance(document, dict) or not isinstance(document.get("info"), dict):
        raise TransportError(f"index document for {normalized} has no project info")

    if is_debug_enabled(logger):
        logger.debug(
            "Index document received",
            extra=extra_context(
                event="parse",
                component="client",
                action="fetch_index",
                outcome="success",
                package=normalized,
                count=len(document.get("releases") or {}),
            )
        )
    return document


def fetch_bytes(url: str) -> bytes:
    """Download a distribution archive.

    Raises:
        TransportError: If the archive host cannot be reached or answers badly.
    """
    if is_debug_enabled(logger):
        logger.debug(
            "Archive download",
            extra=extra_context(event="http_request", component="client", action="fetch_bytes", target=safe_url(url))
        )
    return get_bytes(url, context="archive", limit=Constants.MAX_ARCHIVE_BYTES)
