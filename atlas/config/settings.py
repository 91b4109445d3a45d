from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    db_host: str = "host.docker.internal"
    db_port: int = 5432
    db_database: str = "legal_atlas"
    db_username: str = "legal_atlas"
    db_password: str = "secret"
    db_pool_max_size: int = 4
    store_timeout_seconds: float = 10.0

    max_concurrency: int = 7
    rotation_counter_bound: int = 1000
    transient_error_signatures: list[str] = ["decommissioned", "Rate limit"]

    analysis_timeout_seconds: float = 60.0
    analysis_temperature: float = 0.1
    analysis_provider_override: str = ""

    pdf_engine: str = "pdfplumber"

    groq_api_key: str = ""
    groq_base_url: str = ""
    mistral_api_key: str = ""
    mistral_base_url: str = ""
    codestral_api_key: str = ""
    codestral_base_url: str = ""
    openai_compatible_api_key: str = ""
    openai_compatible_base_url: str = ""
