import importlib
import sys


def _reload_config():
    import hlsproxy

    if "hlsproxy.config" in sys.modules:
        del sys.modules["hlsproxy.config"]
    if hasattr(hlsproxy, "config"):
        delattr(hlsproxy, "config")
    return importlib.import_module("hlsproxy.config")


def test_cors_origins_parsing(monkeypatch):
    monkeypatch.setenv("CORS_ORIGINS", "  http://a.example , , http://b.example,, http://a.example ")
    cfg = _reload_config()

    assert cfg.CORS_ORIGINS_LIST == ["http://a.example", "http://b.example"]


def test_timeouts_fall_back_on_invalid_values(monkeypatch):
    monkeypatch.setenv("PLAYLIST_FETCH_TIMEOUT", "abc")
    monkeypatch.setenv("SEGMENT_FETCH_TIMEOUT", "-5")
    cfg = _reload_config()

    assert cfg.PLAYLIST_FETCH_TIMEOUT == 15.0
    assert cfg.SEGMENT_FETCH_TIMEOUT == 30.0


def test_port_falls_back_to_port_env(monkeypatch):
    monkeypatch.delenv("HLSPROXY_PORT", raising=False)
    monkeypatch.setenv("PORT", "8123")
    cfg = _reload_config()

    assert cfg.HLSPROXY_PORT == 8123


def test_as_bool():
    cfg = _reload_config()

    assert cfg._as_bool(None, True) is True
    assert cfg._as_bool(" Yes ", False) is True
    assert cfg._as_bool("off", True) is False


def test_reload_flag_accepts_any_truthy_spelling(monkeypatch):
    monkeypatch.setenv("HLSPROXY_RELOAD", "on")
    cfg = _reload_config()

    assert cfg.HLSPROXY_RELOAD is True
