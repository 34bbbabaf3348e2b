"""Tests for config file loading and override precedence."""
import argparse
import json

from cli_config import apply_overrides, load_config_file
from constants import Constants


def _args(**kwargs):
    defaults = {"CONFIG": None, "INDEX_URL": None, "COLOR": None}
    defaults.update(kwargs)
    return argparse.Namespace(**defaults)


class TestLoadConfigFile:
    """YAML and JSON mappings; anything unusable yields an empty config."""

    def test_yaml(self, tmp_path):
        path = tmp_path / "kayak.yml"
        path.write_text("index_url: https://mirror.example.org/pypi\nverbosity: 4\n", encoding="utf-8")
        assert load_config_file(str(path)) == {"index_url": "https://mirror.example.org/pypi", "verbosity": 4}

    def test_json(self, tmp_path):
        path = tmp_path / "kayak.json"
        path.write_text(json.dumps({"format": "csv"}), encoding="utf-8")
        assert load_config_file(str(path)) == {"format": "csv"}

    def test_missing_file(self, tmp_path):
        assert load_config_file(str(tmp_path / "absent.yml")) == {}

    def test_no_path(self):
        assert load_config_file(None) == {}

    def test_top_level_must_be_a_mapping(self, tmp_path):
        path = tmp_path / "kayak.yml"
        path.write_text("- one\n- two\n", encoding="utf-8")
        assert load_config_file(str(path)) == {}

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "kayak.yml"
        path.write_text("index_url: [unclosed\n", encoding="utf-8")
        assert load_config_file(str(path)) == {}

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "kayak.json"
        path.write_text("{not json", encoding="utf-8")
        assert load_config_file(str(path)) == {}

    def test_empty_file(self, tmp_path):
        path = tmp_path / "kayak.yml"
        path.write_text("", encoding="utf-8")
        assert load_config_file(str(path)) == {}


class TestApplyOverrides:
    """CLI flag > environment > config file > default."""

    def _config(self, tmp_path, text):
        path = tmp_path / "kayak.yml"
        path.write_text(text, encoding="utf-8")
        return str(path)

    def test_defaults_untouched(self):
        apply_overrides(_args())
        assert Constants.REGISTRY_URL_PYPI == "https://pypi.org/pypi/"
        assert Constants.DEFAULT_FORMAT == "text"

    def test_index_url_from_file_gets_trailing_slash(self, tmp_path):
        apply_overrides(_args(CONFIG=self._config(tmp_path, "index_url: https://file.example.org/pypi\n")))
        assert Constants.REGISTRY_URL_PYPI == "https://file.example.org/pypi/"

    def test_environment_beats_file(self, tmp_path, monkeypatch):
        monkeypatch.setenv(Constants.ENV_INDEX_URL, "https://env.example.org/pypi/")
        apply_overrides(_args(CONFIG=self._config(tmp_path, "index_url: https://file.example.org/pypi\n")))
        assert Constants.REGISTRY_URL_PYPI == "https://env.example.org/pypi/"

    def test_cli_beats_environment(self, monkeypatch):
        monkeypatch.setenv(Constants.ENV_INDEX_URL, "https://env.example.org/pypi/")
        apply_overrides(_args(INDEX_URL="https://cli.example.org/pypi"))
        assert Constants.REGISTRY_URL_PYPI == "https://cli.example.org/pypi/"

    def test_config_path_from_environment(self, tmp_path, monkeypatch):
        monkeypatch.setenv(Constants.ENV_CONFIG, self._config(tmp_path, "format: pretty\n"))
        apply_overrides(_args())
        assert Constants.DEFAULT_FORMAT == "pretty"

    def test_timeout(self, tmp_path, monkeypatch):
        apply_overrides(_args(CONFIG=self._config(tmp_path, "request_timeout: 5\n")))
        assert Constants.REQUEST_TIMEOUT == 5
        monkeypatch.setenv(Constants.ENV_REQUEST_TIMEOUT, "12.5")
        apply_overrides(_args(CONFIG=self._config(tmp_path, "request_timeout: 5\n")))
        assert Constants.REQUEST_TIMEOUT == 12.5

    def test_bad_timeout_is_ignored(self, monkeypatch):
        before = Constants.REQUEST_TIMEOUT
        monkeypatch.setenv(Constants.ENV_REQUEST_TIMEOUT, "-3")
        apply_overrides(_args())
        assert Constants.REQUEST_TIMEOUT == before

    def test_unknown_format_is_ignored(self, tmp_path):
        apply_overrides(_args(CONFIG=self._config(tmp_path, "format: xml\n")))
        assert Constants.DEFAULT_FORMAT == "text"

    def test_verbosity(self, tmp_path):
        apply_overrides(_args(CONFIG=self._config(tmp_path, "verbosity: 5\n")))
        assert Constants.DEFAULT_VERBOSITY == 5

    def test_out_of_range_verbosity_is_ignored(self, tmp_path):
        apply_overrides(_args(CONFIG=self._config(tmp_path, "verbosity: 12\n")))
        assert Constants.DEFAULT_VERBOSITY == 2

    def test_cli_color_beats_file(self, tmp_path):
        apply_overrides(_args(COLOR=False, CONFIG=self._config(tmp_path, "color: true\n")))
        assert Constants.USE_COLOR is False

    def test_color_from_file(self, tmp_path):
        apply_overrides(_args(CONFIG=self._config(tmp_path, "color: true\n")))
        assert Constants.USE_COLOR is True

    def test_quoted_false_turns_color_off(self, tmp_path, monkeypatch):
        monkeypatch.setattr(Constants, "USE_COLOR", True)
        apply_overrides(_args(CONFIG=self._config(tmp_path, 'color: "false"\n')))
        assert Constants.USE_COLOR is False

    def test_quoted_false_in_json(self, tmp_path, monkeypatch):
        monkeypatch.setattr(Constants, "USE_COLOR", True)
        path = tmp_path / "kayak.json"
        path.write_text(json.dumps({"color": "false"}), encoding="utf-8")
        apply_overrides(_args(CONFIG=str(path)))
        assert Constants.USE_COLOR is False

    def test_color_words(self, tmp_path):
        apply_overrides(_args(CONFIG=self._config(tmp_path, 'color: "Yes"\n')))
        assert Constants.USE_COLOR is True
        apply_overrides(_args(CONFIG=self._config(tmp_path, "color: 0\n")))
        assert Constants.USE_COLOR is False

    def test_unrecognised_color_is_ignored(self, tmp_path):
        apply_overrides(_args(CONFIG=self._config(tmp_path, "color: maybe\n")))
        assert Constants.USE_COLOR is False
