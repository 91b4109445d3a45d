import pytest
from pydantic import ValidationError

from atlas.config.settings import Settings


class TestSettingsDefaults:
    def test_default_app_env(self) -> None:
        s = Settings()
        assert s.app_env == "dev"

    def test_default_db_port(self) -> None:
        s = Settings()
        assert s.db_port == 5432

    def test_default_max_concurrency(self) -> None:
        s = Settings()
        assert s.max_concurrency == 7

    def test_default_timeouts(self) -> None:
        s = Settings()
        assert s.analysis_timeout_seconds == 60
        assert s.store_timeout_seconds == 10

    def test_default_transient_signatures(self) -> None:
        s = Settings()
        assert s.transient_error_signatures == ["decommissioned", "Rate limit"]

    def test_default_pdf_engine(self) -> None:
        s = Settings()
        assert s.pdf_engine == "pdfplumber"


class TestSettingsFromEnv:
    def test_loads_app_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("APP_ENV", "production")
        s = Settings()
        assert s.app_env == "production"

    def test_loads_log_level(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        s = Settings()
        assert s.log_level == "DEBUG"

    def test_loads_db_host(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DB_HOST", "db.example.com")
        s = Settings()
        assert s.db_host == "db.example.com"

    def test_loads_max_concurrency(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MAX_CONCURRENCY", "3")
        s = Settings()
        assert s.max_concurrency == 3

    def test_loads_signatures_as_json(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TRANSIENT_ERROR_SIGNATURES", '["quota"]')
        s = Settings()
        assert s.transient_error_signatures == ["quota"]

    def test_loads_provider_key(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GROQ_API_KEY", "gk")
        s = Settings()
        assert s.groq_api_key == "gk"


class TestSettingsValidation:
    def test_invalid_db_port_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DB_PORT", "not_a_number")
        with pytest.raises(ValidationError):
            Settings()

    def test_invalid_max_concurrency_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MAX_CONCURRENCY", "abc")
        with pytest.raises(ValidationError):
            Settings()
