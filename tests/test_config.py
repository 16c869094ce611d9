import pytest

from jobdesk.config import DEFAULT_BASE_URL, DEFAULT_TIMEOUT, load_settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("JOBDESK_API_BASE_URL", "JOBDESK_API_TIMEOUT", "JOBDESK_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    settings = load_settings(use_dotenv=False)

    assert settings.api_base_url == DEFAULT_BASE_URL
    assert settings.api_timeout == DEFAULT_TIMEOUT
    assert settings.log_level == "WARNING"


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("JOBDESK_API_BASE_URL", "https://jobs.example.com/")
    monkeypatch.setenv("JOBDESK_API_TIMEOUT", "3.5")
    monkeypatch.setenv("JOBDESK_LOG_LEVEL", "debug")

    settings = load_settings(use_dotenv=False)

    assert settings.api_base_url == "https://jobs.example.com"
    assert settings.api_timeout == 3.5
    assert settings.log_level == "DEBUG"


def test_flag_beats_env(monkeypatch):
    monkeypatch.setenv("JOBDESK_API_BASE_URL", "https://jobs.example.com")
    assert load_settings("http://other:8080", use_dotenv=False).api_base_url == "http://other:8080"


def test_bad_timeout_exits(monkeypatch):
    monkeypatch.setenv("JOBDESK_API_TIMEOUT", "soon")
    with pytest.raises(SystemExit):
        load_settings(use_dotenv=False)
