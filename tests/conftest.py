"""Shared fixtures."""
import pytest

from constants import Constants

_TUNABLES = ("REGISTRY_URL_PYPI", "REQUEST_TIMEOUT", "DEFAULT_FORMAT", "DEFAULT_VERBOSITY", "USE_COLOR")


@pytest.fixture(autouse=True)
def restore_constants(monkeypatch):
    """Undo any runtime override of Constants and clear KAYAK_* variables."""
    for name in _TUNABLES:
        monkeypatch.setattr(Constants, name, getattr(Constants, name))
    for name in (
        Constants.ENV_INDEX_URL,
        Constants.ENV_REQUEST_TIMEOUT,
        Constants.ENV_CONFIG,
        Constants.ENV_LOG_LEVEL,
        Constants.ENV_LOG_FORMAT,
    ):
        monkeypatch.delenv(name, raising=False)
