import pytest

from app.config import DEFAULT_PORT, Settings, load_settings, normalize_log_level, resolve_port


@pytest.mark.parametrize("value", ["3000", "0", "abc", " 80 ", "70000"])
def test_resolve_port_passes_value_through(monkeypatch, value):
    monkeypatch.setenv("PORT", value)
    assert resolve_port() == value


def test_resolve_port_defaults_when_unset(monkeypatch):
    monkeypatch.delenv("PORT", raising=False)
    assert resolve_port() == 8080
    assert resolve_port() is DEFAULT_PORT


def test_resolve_port_defaults_when_empty(monkeypatch):
    monkeypatch.setenv("PORT", "")
    assert resolve_port() == 8080


def test_resolve_port_reads_explicit_mapping(monkeypatch):
    monkeypatch.setenv("PORT", "9999")
    assert resolve_port({"PORT": "3000"}) == "3000"
    assert resolve_port({}) == 8080


def test_load_settings_defaults(monkeypatch):
    monkeypatch.setattr("app.config.load_dotenv", lambda: False)
    for name in ("PORT", "HOST", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)

    assert load_settings() == Settings(port=8080, host="0.0.0.0", log_level="INFO")


def test_load_settings_reads_environment(monkeypatch):
    monkeypatch.setattr("app.config.load_dotenv", lambda: False)
    monkeypatch.setenv("PORT", "3000")
    monkeypatch.setenv("HOST", "127.0.0.1")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = load_settings()

    assert settings.port == "3000"
    assert settings.host == "127.0.0.1"
    assert settings.log_level == "DEBUG"


def test_load_settings_reads_dotenv_without_overriding(monkeypatch, tmp_path):
    (tmp_path / ".env").write_text("PORT=4000\nHOST=127.0.0.1\n")
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("app.config.load_dotenv", _load_dotenv_from_cwd)
    # Registered first so the value loaded from .env is undone after the test
    monkeypatch.setenv("PORT", "")
    monkeypatch.delenv("PORT")
    monkeypatch.setenv("HOST", "0.0.0.0")

    settings = load_settings()

    assert settings.port == "4000"
    assert settings.host == "0.0.0.0"


def _load_dotenv_from_cwd():
    from dotenv import find_dotenv, load_dotenv

    return load_dotenv(find_dotenv(usecwd=True))


@pytest.mark.parametrize(
    "value, expected",
    [
        ("debug", "DEBUG"),
        (" Warning ", "WARNING"),
        ("warn", "WARNING"),
        ("fatal", "CRITICAL"),
        ("trace", "INFO"),
        ("verbose", "INFO"),
        ("", "INFO"),
        (None, "INFO"),
    ],
)
def test_normalize_log_level(value, expected):
    assert normalize_log_level(value) == expected


def test_load_settings_maps_warn_to_warning(monkeypatch):
    monkeypatch.setattr("app.config.load_dotenv", lambda: False)
    monkeypatch.setenv("LOG_LEVEL", "warn")
    assert load_settings().log_level == "WARNING"
