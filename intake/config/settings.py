from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    db_host: str = "host.docker.internal"
    db_port: int = 5432
    db_database: str = "intake"
    db_username: str = "intake"
    db_password: str = "secret"
    db_pool_max_size: int = 10

    staging_dir: str = "/app/staging"
    retained_dir: str = "/app/retained"
    max_upload_bytes: int = 100 * 1024 * 1024

    worker_pool_size: int = 4
    job_poll_interval_seconds: int = 5
    max_job_attempts: int = 3
    capability_timeout_seconds: float = 60.0

    pdf_engine: str = "pdfplumber"

    analysis_provider: str = "openai"
    analysis_openai_api_key: str = ""
    analysis_openai_model_name: str = "gpt-4.1"
    analysis_openai_timeout_seconds: int = 30
    analysis_openai_temperature: float = 0.0
    analysis_openai_compatible_base_url: str = ""
    analysis_openai_compatible_api_key: str = ""
    analysis_openai_compatible_model_name: str = ""
    analysis_openrouter_api_key: str = ""
    analysis_openrouter_model_name: str = ""
    analysis_groq_api_key: str = ""
    analysis_groq_model_name: str = ""
    analysis_ollama_api_key: str = "ollama"
    analysis_ollama_model_name: str = ""

    ocr_provider: str = "openai"
    ocr_openai_api_key: str = ""
    ocr_openai_model_name: str = "gpt-4.1"
    ocr_openai_timeout_seconds: int = 60

    email_provider: str = "sendgrid"
    sendgrid_api_key: str = ""
    sendgrid_api_url: str = "https://api.sendgrid.com/v3/mail/send"
    email_sender_address: str = "noreply@example.org"
    email_sender_name: str = "Document Intake"

    fax_provider: str = "http"
    fax_api_url: str = ""
    fax_api_key: str = ""
    fax_sender_number: str = ""
