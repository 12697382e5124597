import os
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv

load_dotenv()


def _flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


@dataclass
class Settings:
    app_name: str = os.getenv("APP_NAME", "BookDesk")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    cors_origins: List[str] = field(
        default_factory=lambda: [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
    )

    # Database
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./bookdesk.db")

    # Security
    secret_key: str = os.getenv("SECRET_KEY", "bookdesk_dev_secret_change_in_prod")

    # Admin account seeded on startup
    admin_email: Optional[str] = os.getenv("ADMIN_EMAIL", "admin@example.com")
    admin_password: Optional[str] = os.getenv("ADMIN_PASSWORD", "admin1234")
    admin_first_name: str = os.getenv("ADMIN_FIRST_NAME", "Admin")

    # Mail provider
    mail_api_url: str = os.getenv("MAIL_API_URL", "https://api.resend.com/emails")
    mail_api_key: Optional[str] = os.getenv("MAIL_API_KEY")
    mail_from: str = os.getenv("MAIL_FROM", "BookDesk <noreply@bookdesk.dev>")
    mail_timeout: float = float(os.getenv("MAIL_TIMEOUT", "10"))
    otp_subject: str = os.getenv("OTP_SUBJECT", "Your OTP Code")
    # Echoing the code back defeats out-of-band delivery; legacy clients only.
    expose_otp: bool = _flag("EXPOSE_OTP")

    # Loans
    loan_period_days: int = int(os.getenv("LOAN_PERIOD_DAYS", "14"))


settings = Settings()
