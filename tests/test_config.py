from pathlib import Path

import pytest

from digisign.config import DEFAULT_CONFIG, dump_default_config, load_config


@pytest.fixture(autouse=True)
def _isolated(monkeypatch, tmp_path: Path):
    monkeypatch.chdir(tmp_path)
    for name in ("DIGISIGN_REGISTRY_URL", "DIGISIGN_LOG_LEVEL", "DIGISIGN_STORE_DIR"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("digisign.config.runtime_config_dir", lambda: tmp_path / "user-config")


def test_defaults_without_file():
    config = load_config()
    assert config.registry.url == "http://localhost:3000"
    assert config.registry.timeout == 10.0
    assert config.logging.normalized_level() == "INFO"


def test_explicit_yaml(tmp_path: Path):
    path = tmp_path / "custom.yaml"
    path.write_text("registry:\n  url: https://keys.example.org/\n  timeout: 2.5\nlogging:\n  level: debug\n")
    config = load_config(path)
    assert config.registry.url == "https://keys.example.org"
    assert config.registry.timeout == 2.5
    assert config.logging.normalized_level() == "DEBUG"


def test_project_config_is_discovered(tmp_path: Path):
    (tmp_path / ".digisign").mkdir()
    (tmp_path / ".digisign" / "config.yaml").write_text("registry:\n  url: http://127.0.0.1:4000\n")
    assert load_config().registry.url == "http://127.0.0.1:4000"


def test_invalid_yaml_values(tmp_path: Path):
    path = tmp_path / "bad.yaml"
    path.write_text("registry:\n  url: ftp://nope\n")
    with pytest.raises(ValueError, match="Invalid configuration"):
        load_config(path)


def test_environment_overrides(monkeypatch, tmp_path: Path):
    monkeypatch.setenv("DIGISIGN_REGISTRY_URL", "http://env.example:8080/")
    monkeypatch.setenv("DIGISIGN_LOG_LEVEL", "warning")
    monkeypatch.setenv("DIGISIGN_STORE_DIR", str(tmp_path / "store"))
    config = load_config()
    assert config.registry.url == "http://env.example:8080"
    assert config.logging.normalized_level() == "WARNING"
    assert config.store.dir == tmp_path / "store"


def test_dump_default_config(tmp_path: Path):
    target = tmp_path / "out" / "config.yaml"
    dump_default_config(target)
    assert load_config(target).registry == DEFAULT_CONFIG.registry
