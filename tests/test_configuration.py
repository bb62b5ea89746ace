import pytest

from bistree.core.configuration import SettingsLoader, load_settings
from bistree.core.errors import ConfigurationError
from bistree.core.models import RunnerSettings


def test_defaults():
    s = RunnerSettings()
    assert s.view_limit == 10
    assert s.separator == " > "
    assert s.live == "auto"
    assert s.errors_as_failures is True
    assert s.log_level == "WARNING"


def test_validation():
    with pytest.raises(Exception):
        RunnerSettings(view_limit=0)
    with pytest.raises(Exception):
        RunnerSettings(separator="")
    with pytest.raises(Exception):
        RunnerSettings(live="sometimes")
    with pytest.raises(Exception):
        RunnerSettings(colour=True)
    assert RunnerSettings(log_level="debug").log_level == "DEBUG"


def test_loader_top_level_and_section(tmp_path):
    flat = tmp_path / "flat.yaml"
    flat.write_text("view_limit: 4\nseparator: ' / '\n")
    s = SettingsLoader(flat).load()
    assert s.view_limit == 4 and s.separator == " / "

    nested = tmp_path / "nested.yaml"
    nested.write_text("bistree:\n  live: never\n  errors_as_failures: false\nother: ignored\n")
    s = SettingsLoader(nested).load()
    assert s.live == "never" and s.errors_as_failures is False


def test_loader_empty_file(tmp_path):
    empty = tmp_path / "empty.yaml"
    empty.write_text("")
    assert SettingsLoader(empty).load() == RunnerSettings()


def test_loader_errors(tmp_path):
    with pytest.raises(ConfigurationError):
        SettingsLoader(tmp_path / "missing.yaml").load()
    bad = tmp_path / "bad.yaml"
    bad.write_text("view_limit: [1, 2\n")
    with pytest.raises(ConfigurationError):
        SettingsLoader(bad).load()
    listy = tmp_path / "list.yaml"
    listy.write_text("- 1\n- 2\n")
    with pytest.raises(ConfigurationError):
        SettingsLoader(listy).load()
    unknown = tmp_path / "unknown.yaml"
    unknown.write_text("refresh: 3\n")
    with pytest.raises(ConfigurationError, match="refresh"):
        SettingsLoader(unknown).load()


def test_load_settings_overrides(tmp_path, monkeypatch):
    monkeypatch.delenv("BIST_NO_LIVE", raising=False)
    cfg = tmp_path / "bist.yaml"
    cfg.write_text("view_limit: 4\nlog_level: INFO\n")
    s = load_settings(cfg, view_limit=7, log_level=None)
    assert s.view_limit == 7
    assert s.log_level == "INFO"
    assert load_settings().view_limit == 10


def test_env_disables_live(monkeypatch):
    monkeypatch.setenv("BIST_NO_LIVE", "1")
    assert load_settings(live="always").live == "never"
    monkeypatch.setenv("BIST_NO_LIVE", "0")
    assert load_settings().live == "auto"
