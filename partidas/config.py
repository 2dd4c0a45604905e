import os
from functools import lru_cache
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel

# Load environment variables
load_dotenv()

DEFAULT_CADASTRAL_URL = "https://epok.buenosaires.gob.ar/catastro/parcela/"


class Settings(BaseModel):
    """Runtime configuration, read once from the environment (and .env)."""

    port: int = 3000
    logo_url: str = ""
    reference_url: str = ""

    # Mail transport
    mail_transport: str = "smtp"
    smtp_host: str = ""
    smtp_port: int = 465
    smtp_user: str = ""
    smtp_pass: str = ""
    smtp_from: str = ""
    smtp_bcc: Optional[str] = None
    sendgrid_api_key: str = ""

    # Cadastral service and browser
    cadastral_url: str = DEFAULT_CADASTRAL_URL
    headless: bool = True
    navigation_timeout_ms: int = 15000
    request_timeout: float = 30.0
    max_concurrent_pages: int = 0

    cors_origins: List[str] = ["*"]

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            port=int(os.getenv("PORT", "3000")),
            logo_url=os.getenv("LOGO_URL", ""),
            reference_url=os.getenv("REFERENCE_URL", ""),
            mail_transport=os.getenv("MAIL_TRANSPORT", "smtp").lower(),
            smtp_host=os.getenv("SMTP_HOST", ""),
            smtp_port=int(os.getenv("SMTP_PORT", "465")),
            smtp_user=os.getenv("SMTP_USER", ""),
            smtp_pass=os.getenv("SMTP_PASS", ""),
            smtp_from=os.getenv("SMTP_FROM", ""),
            smtp_bcc=os.getenv("SMTP_BCC") or None,
            sendgrid_api_key=os.getenv("SENDGRID_API_KEY", ""),
            cadastral_url=os.getenv("CADASTRAL_URL", DEFAULT_CADASTRAL_URL),
            headless=os.getenv("HEADLESS", "true").lower() == "true",
            navigation_timeout_ms=int(os.getenv("NAVIGATION_TIMEOUT_MS", "15000")),
            request_timeout=float(os.getenv("REQUEST_TIMEOUT", "30")),
            max_concurrent_pages=int(os.getenv("MAX_CONCURRENT_PAGES", "0")),
            cors_origins=os.getenv("CORS_ORIGINS", "*").split(","),
        )


@lru_cache()
def get_settings() -> Settings:
    return Settings.from_env()
