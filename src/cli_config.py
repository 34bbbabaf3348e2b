"""Runtime configuration: config file, environment and CLI overrides.

Extracted from kayak.py to keep the entrypoint slim. Every tunable is
resolved with precedence CLI flag > environment > config file > built-in
default and written onto ``Constants``. Bad values are logged and ignored.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, Optional

import yaml

from constants import Constants
from common.logging_utils import safe_url

logger = logging.getLogger(__name__)


def load_config_file(path: Optional[str]) -> Dict[str, Any]:
    """Read a YAML or JSON mapping from ``path``.

    Files ending in ``.json`` are read as JSON, anything else as YAML.

    Returns:
        dict: The mapping, or ``{}`` if there is no usable file.
    """
    if not path:
        return {}
    if not os.path.isfile(path):
        logger.warning("Config file not found: %s", path)
        return {}
    try:
        with open(path, "r", encoding="utf-8") as fh:
            if path.lower().endswith(".json"):
                data = json.load(fh)
            else:
                data = yaml.safe_load(fh)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        logger.warning("Failed to load config %s: %s", path, exc)
        return {}
    if data is None:
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring config %s: top level is not a mapping", path)
        return {}
    return data


def _first(*values: Any) -> Any:
    for value in values:
        if value is not None and value != "":
            return value
    return None


def _positive_number(name: str, value: Any) -> Optional[float]:
    if value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        logger.warning("Ignoring %s=%r: not a number", name, value)
        return None
    if number <= 0:
        logger.warning("Ignoring %s=%r: must be positive", name, value)
        return None
    return number


_TRUE_WORDS = ("true", "yes", "on", "1")
_FALSE_WORDS = ("false", "no", "off", "0")


def _flag(name: str, value: Any) -> Optional[bool]:
    if value is None or isinstance(value, bool):
        return value
    word = str(value).strip().lower()
    if word in _TRUE_WORDS:
        return True
    if word in _FALSE_WORDS:
        return False
    logger.warning("Ignoring %s=%r: expected true or false", name, value)
    return None


def apply_overrides(args) -> Dict[str, Any]:
    """Resolve tunables from CLI, environment and config file onto Constants.

    Returns:
        dict: The config file contents that were used.
    """
    config_path = _first(getattr(args, "CONFIG", None), os.environ.get(Constants.ENV_CONFIG))
    config = load_config_file(config_path)

    index_url = _first(
        getattr(args, "INDEX_URL", None),
        os.environ.get(Constants.ENV_INDEX_URL),
        config.get("index_url"),
    )
    if index_url is not None:
        index_url = str(index_url).strip()
        Constants.REGISTRY_URL_PYPI = index_url if index_url.endswith("/") else index_url + "/"

    timeout = _positive_number(
        "request_timeout",
        _first(os.environ.get(Constants.ENV_REQUEST_TIMEOUT), config.get("request_timeout")),
    )
    if timeout is not None:
        Constants.REQUEST_TIMEOUT = timeout

    fmt = config.get("format")
    if fmt is not None:
        if str(fmt).lower() in Constants.SUPPORTED_FORMATS:
            Constants.DEFAULT_FORMAT = str(fmt).lower()
        else:
            logger.warning("Ignoring format=%r: expected one of %s", fmt, ", ".join(Constants.SUPPORTED_FORMATS))

    verbosity = config.get("verbosity")
    if verbosity is not None:
        if isinstance(verbosity, int) and not isinstance(verbosity, bool) and 0 <= verbosity <= Constants.MAX_VERBOSITY:
            Constants.DEFAULT_VERBOSITY = verbosity
        else:
            logger.warning("Ignoring verbosity=%r: expected 0..%d", verbosity, Constants.MAX_VERBOSITY)

    color = _flag("color", _first(getattr(args, "COLOR", None), config.get("color")))
    if color is not None:
        Constants.USE_COLOR = color

    logger.debug(
        "Effective settings: index=%s timeout=%s format=%s verbosity=%s color=%s",
        safe_url(Constants.REGISTRY_URL_PYPI),
        Constants.REQUEST_TIMEOUT,
        Constants.DEFAULT_FORMAT,
        Constants.DEFAULT_VERBOSITY,
        Constants.USE_COLOR,
    )
    return config
