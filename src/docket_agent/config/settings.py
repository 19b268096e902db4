"""
Configuration settings for the voice-note case workflow.
"""

import os
from typing import Optional


class Settings:
    """Application settings loaded from environment variables."""

    def __init__(self):
        # Application Configuration
        self.ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
        self.PORT: int = int(os.getenv("PORT", 8080))
        self.LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

        # Case store (backend) Configuration
        self.BACKEND_URL: Optional[str] = os.getenv("BACKEND_URL")
        self.BACKEND_API_KEY: Optional[str] = os.getenv("BACKEND_API_KEY")
        self.RECORD_BASE_URL: str = os.getenv("RECORD_BASE_URL", "https://notion.so")

        # Entity extraction providers - Anthropic first, OpenAI as fallback
        self.ANTHROPIC_API_KEY: Optional[str] = os.getenv("ANTHROPIC_API_KEY")
        self.ANTHROPIC_MODEL: str = os.getenv("ANTHROPIC_MODEL", "claude-3-5-sonnet-20241022")
        self.OPENAI_API_KEY: Optional[str] = os.getenv("OPENAI_API_KEY")
        self.OPENAI_MODEL: str = os.getenv("OPENAI_MODEL", "gpt-4o")

        # Calendar Configuration
        self.GOOGLE_CALENDAR_TOKEN: Optional[str] = os.getenv("GOOGLE_CALENDAR_TOKEN")
        self.CALENDAR_API_URL: str = os.getenv("CALENDAR_API_URL", "https://www.googleapis.com/calendar/v3")
        self.CALENDAR_TIMEZONE: str = os.getenv("CALENDAR_TIMEZONE", "Asia/Kolkata")

        # Email relay Configuration
        self.EMAIL_SERVICE_URL: Optional[str] = os.getenv("EMAIL_SERVICE_URL")
        self.EMAIL_FROM: str = os.getenv("EMAIL_FROM", "noreply@legalfirm.com")

        # Fallback recipient for client emails when the client address is missing or a placeholder
        self.DEMO_USER_EMAIL: Optional[str] = os.getenv("DEMO_USER_EMAIL")

        # Validate required settings
        self._validate_required_settings()

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    def _validate_required_settings(self) -> None:
        """Validate that all required environment variables are set (production only)."""
        if not self.is_production:
            return

        required_settings = [
            ("BACKEND_URL", self.BACKEND_URL),
            ("ANTHROPIC_API_KEY", self.ANTHROPIC_API_KEY),
        ]

        for setting_name, setting_value in required_settings:
            if not setting_value:
                raise ValueError(f"{setting_name} environment variable is required")


def get_record_url(case_id: Optional[str]) -> Optional[str]:
    """
    Build the human-facing link to a case record

    Returns:
        URL string or None if no case id is available
    """
    if not case_id:
        return None
    return f"{settings.RECORD_BASE_URL.rstrip('/')}/{case_id.replace('-', '')}"


# Global settings instance
settings = Settings()
