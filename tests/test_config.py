import pytest
from pydantic import ValidationError

from zipkin_loader.config import (
    LoaderSettings,
    TranslationConfig,
    get_loader_settings,
    load_translation_config,
)


def test_packaged_tables():
    config = load_translation_config()
    assert config.server_aliases["compute node agent"] == "cn-agent"
    assert config.server_aliases["WorkflowAPI"] == "wfapi"
    assert config.flatten_extra_depth == {"moray.rpc": 1}
    assert config.annotation_codes["server-request"] == "sr"
    assert "/ping" in config.health_check_prefixes


def test_yaml_extends_tables(tmp_path):
    path = tmp_path / "translation.yaml"
    path.write_text(
        "server_aliases:\n"
        "  Manta: manta\n"
        "noise:\n"
        "  - operation: heartbeat\n"
        "    service: cn-agent\n"
    )
    config = load_translation_config(str(path))
    assert config.server_aliases == {"Manta": "manta"}
    assert config.noise[0].service == "cn-agent"
    assert config.magic_key == "TritonTracing"


def test_missing_yaml_falls_back_to_defaults(tmp_path):
    config = load_translation_config(str(tmp_path / "missing.yaml"))
    assert config == TranslationConfig()


def test_precedence(monkeypatch):
    monkeypatch.setenv("ZIPKIN_LOADER_HOST", "env-host")
    monkeypatch.setenv("ZIPKIN_LOADER_PUMP_INTERVAL_MS", "250")

    settings = get_loader_settings(zipkin_host="cli-host", zipkin_port=None)

    assert settings.zipkin_host == "cli-host"
    assert settings.zipkin_port == 9411
    assert settings.pump_interval_ms == 250
    assert settings.collector_url == "http://cli-host:9411"


def test_interval_must_be_positive():
    with pytest.raises(ValidationError):
        LoaderSettings(pump_interval_ms=0)
