"""Application configuration helpers."""

import logging
import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

COMPANIES_HOUSE_BASE_URL = "https://api.company-information.service.gov.uk"

SEARCH_TERMS = (
    "Financial Advi",
    "Financial Planning",
    "Wealth Management",
    "Investment Advice",
    "Pension Advice",
    "Financial Consultant",
    "Financial Adviser",
    "Financial Advisor",
    "IFA",
    "Independent Financial",
    "Wealth Adviser",
    "Wealth Advisor",
    "Pension Consultant",
    "Investment Consultant",
    "Financial Services",
    "Wealth Planning",
    "Retirement Planning",
    "Financial Guidance",
    "Financial Solutions",
    "Financial Expertise",
)


class ConfigError(RuntimeError):
    """Raised when mandatory configuration is missing."""


@dataclass(frozen=True)
class Settings:
    companies_house_api_key: str
    openai_api_key: str = ""
    openai_model: str = "gpt-4o-mini"
    companies_house_base_url: str = COMPANIES_HOUSE_BASE_URL
    registry_timeout: float = 10.0
    worker_port: int = 9000

    def require_registry_key(self) -> str:
        if not self.companies_house_api_key:
            raise ConfigError("API key not configured")
        return self.companies_house_api_key


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings from environment variables with sensible defaults."""
    load_dotenv()

    companies_house_api_key = os.getenv("COMPANIES_HOUSE_API_KEY", "").strip()
    openai_api_key = os.getenv("OPENAI_API_KEY", "").strip()
    openai_model = os.getenv("OPENAI_MODEL") or "gpt-4o-mini"
    base_url = (os.getenv("COMPANIES_HOUSE_BASE_URL") or COMPANIES_HOUSE_BASE_URL).rstrip("/")
    registry_timeout = float(os.getenv("REGISTRY_TIMEOUT", "10"))
    worker_port = int(os.getenv("WORKER_PORT", "9000"))

    if not companies_house_api_key:
        logger.warning("COMPANIES_HOUSE_API_KEY is not configured; registry searches will fail.")
    if not openai_api_key:
        logger.warning("OPENAI_API_KEY is not configured; email generation will not be available.")

    return Settings(
        companies_house_api_key=companies_house_api_key,
        openai_api_key=openai_api_key,
        openai_model=openai_model,
        companies_house_base_url=base_url,
        registry_timeout=registry_timeout,
        worker_port=worker_port,
    )
