from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    ocr_backend: str = "textract"
    storage_backend: str = "s3"

    aws_region: str = "us-east-1"
    aws_access_key_id: str = ""
    aws_secret_access_key: str = ""
    s3_bucket_name: str = ""
    textract_output_prefix: str = "textract-output"

    local_files_root: str = "./files"
    example_fixture_path: str = ""

    pdf_engine: str = "pdfplumber"

    async_size_threshold_bytes: int = 5 * 1024 * 1024
    job_poll_interval_seconds: float = 5.0
    job_timeout_seconds: float = 300.0

    quality_confidence_weight: float = 0.7
    quality_coverage_weight: float = 0.3
    default_confidence_threshold: float = 0.8
