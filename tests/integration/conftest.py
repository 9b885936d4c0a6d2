import pytest

from medocr.config.settings import Settings


@pytest.fixture
def test_settings() -> Settings:
    return Settings(job_poll_interval_seconds=0.01, job_timeout_seconds=2.0)
