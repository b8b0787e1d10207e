"""test_settings_main.py — configuration loading and process bootstrap."""

import pytest

from ynab_analyst.mcp_server import server
from ynab_analyst.mcp_server.data_source import LocalTransactionSource, RemoteProviderSource
from ynab_analyst.mcp_server.settings import ServerSettings


def test_defaults():
    settings = ServerSettings.load()
    assert settings.api_token is None
    assert settings.base_url == "https://api.ynab.com/v1"
    assert settings.cache_ttl_sec == 300.0
    assert settings.http is False
    assert settings.port == 8001


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("YNAB_API_TOKEN", " abc ")
    monkeypatch.setenv("YNAB_MCP_CACHE_TTL_SEC", "60")
    monkeypatch.setenv("YNAB_MCP_STRUCTURED_LOGS", "yes")
    monkeypatch.setenv("YNAB_MCP_PORT", "9100")

    settings = ServerSettings.load()

    assert settings.api_token == "abc"
    assert settings.has_token
    assert settings.cache_ttl_sec == 60.0
    assert settings.structured_logs is True
    assert settings.port == 9100


def test_invalid_env_values_fall_back(monkeypatch):
    monkeypatch.setenv("YNAB_MCP_CACHE_TTL_SEC", "-5")
    monkeypatch.setenv("YNAB_MCP_PORT", "http")
    settings = ServerSettings.load()
    assert settings.cache_ttl_sec == 300.0
    assert settings.port == 8001


def test_yaml_file_then_env(tmp_path, monkeypatch):
    path = tmp_path / "settings.yaml"
    path.write_text("cache_ttl_sec: 30\nport: 9000\nunknown_key: 1\n", encoding="utf-8")
    monkeypatch.setenv("YNAB_MCP_PORT", "9500")

    settings = ServerSettings.load(path)

    assert settings.cache_ttl_sec == 30.0
    assert settings.port == 9500


def test_non_mapping_yaml_is_rejected(tmp_path):
    path = tmp_path / "settings.yaml"
    path.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ValueError):
        ServerSettings.load(path)


def test_build_data_source_prefers_local_file(tmp_path):
    path = tmp_path / "data.yaml"
    path.write_text("transactions: []\n", encoding="utf-8")
    settings = ServerSettings(api_token="tok", data_path=str(path))
    assert isinstance(server.build_data_source(settings), LocalTransactionSource)


def test_build_data_source_uses_token():
    source = server.build_data_source(ServerSettings(api_token="tok", cache_ttl_sec=12))
    assert isinstance(source, RemoteProviderSource)
    assert source.client.cache.default_ttl == 12


def test_main_without_token_exits_with_message(capsys):
    assert server.main([]) == 1
    err = capsys.readouterr().err
    assert "Error: YNAB_API_TOKEN environment variable is required" in err
    assert "export YNAB_API_TOKEN=your_token_here" in err


def test_main_runs_stdio_session(monkeypatch, mocker):
    monkeypatch.setenv("YNAB_API_TOKEN", "tok")
    run_stdio = mocker.patch.object(server, "run_stdio", new=mocker.AsyncMock())

    assert server.main([]) == 0
    source, settings = run_stdio.await_args.args
    assert isinstance(source, RemoteProviderSource)
    assert settings.http is False


def test_main_http_mode(tmp_path, mocker):
    path = tmp_path / "data.yaml"
    path.write_text("transactions: []\n", encoding="utf-8")
    uvicorn_run = mocker.patch("uvicorn.run")
    mocker.patch.object(server.app.state, "source", None)

    assert server.main(["--http", "--port", "9001", "--data", str(path)]) == 0

    assert uvicorn_run.call_args.kwargs["port"] == 9001
    assert isinstance(server.app.state.source, LocalTransactionSource)
