import pytest
from pydantic import ValidationError

from wipelog.config import ConfigurationError, ReportConfig, Settings, get_settings


def test_default_settings_have_sane_defaults():
    settings = Settings(_env_file=None)
    assert settings.wcl.api_url == "https://www.warcraftlogs.com/api/v2/client"
    assert settings.wcl.report_url == "https://www.warcraftlogs.com/reports"
    assert settings.report.output_dir == "logs"
    assert settings.report.max_deaths == 3
    assert settings.report.event_limit == 500
    assert settings.report.death_window_ms == 5000
    assert settings.report.concurrency == 1
    assert settings.log_level == "INFO"


def test_env_override(monkeypatch):
    monkeypatch.setenv("WCL__ACCESS_TOKEN", "test-token")
    monkeypatch.setenv("REPORT__CODE", "vkpJ2qRdrGAWFQaV")
    monkeypatch.setenv("REPORT__CONCURRENCY", "4")
    settings = Settings(_env_file=None)
    assert settings.wcl.access_token.get_secret_value() == "test-token"
    assert settings.report.code == "vkpJ2qRdrGAWFQaV"
    assert settings.report.concurrency == 4


def test_token_not_in_repr(monkeypatch):
    monkeypatch.setenv("WCL__ACCESS_TOKEN", "super-secret")
    settings = Settings(_env_file=None)
    assert "super-secret" not in repr(settings)


def test_require_passes_when_configured(monkeypatch):
    monkeypatch.setenv("WCL__ACCESS_TOKEN", "tok")
    monkeypatch.setenv("REPORT__CODE", "ABC")
    Settings(_env_file=None).require()


def test_require_lists_missing_values(monkeypatch):
    monkeypatch.delenv("WCL__ACCESS_TOKEN", raising=False)
    monkeypatch.delenv("REPORT__CODE", raising=False)
    with pytest.raises(ConfigurationError, match="WCL__ACCESS_TOKEN, REPORT__CODE"):
        Settings(_env_file=None).require()


def test_require_missing_report_code_only(monkeypatch):
    monkeypatch.setenv("WCL__ACCESS_TOKEN", "tok")
    monkeypatch.delenv("REPORT__CODE", raising=False)
    with pytest.raises(ConfigurationError, match="REPORT__CODE"):
        Settings(_env_file=None).require()


def test_concurrency_must_be_positive():
    with pytest.raises(ValidationError, match="REPORT__CONCURRENCY"):
        Settings(_env_file=None, report=ReportConfig(concurrency=0))


def test_get_settings_returns_same_instance():
    get_settings.cache_clear()
    s1 = get_settings()
    s2 = get_settings()
    assert s1 is s2
    get_settings.cache_clear()


def test_invalid_log_level_rejected(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "verbose")
    with pytest.raises(ValidationError, match="LOG_LEVEL 'verbose'"):
        Settings(_env_file=None)


def test_log_level_case_insensitive(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "debug")
    assert Settings(_env_file=None).log_level == "debug"


def test_url_defaults_shared_with_client_and_document():
    from wipelog.pipeline.document import DEFAULT_REPORT_URL
    from wipelog.wcl.client import DEFAULT_API_URL

    settings = Settings(_env_file=None)
    assert settings.wcl.api_url == DEFAULT_API_URL
    assert settings.wcl.report_url == DEFAULT_REPORT_URL
