import json
from functools import lru_cache

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

SUPPORTED_AI_PROVIDERS = ("gemini", "mock")


def _parse_list_value(value: str) -> list[str]:
    """Accept either a JSON array or a comma separated string."""
    raw = (value or "").strip()
    if raw == "":
        return []
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError:
        parsed = None
    if isinstance(parsed, list):
        return [str(item).strip() for item in parsed if str(item).strip()]
    return [item.strip() for item in raw.split(",") if item.strip()]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        validate_by_name=True,
        populate_by_name=True,
    )

    environment: str = Field(
        default="development",
        validation_alias=AliasChoices("ENVIRONMENT", "APP_ENV"),
    )

    docs_enabled: bool = Field(default=True)
    openapi_enabled: bool = Field(default=True)
    expose_error_details: bool = False

    gemini_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("GEMINI_API_KEY", "GOOGLE_API_KEY"),
    )
    gemini_model: str = "gemini-1.5-flash"
    gemini_api_base_url: str = "https://generativelanguage.googleapis.com/v1beta"

    ai_provider: str = "gemini"
    ai_allow_mock_fallback: bool = False
    ai_timeout_seconds: float = 30.0
    ai_temperature: float = 0.4
    ai_max_tokens: int = 2048
    ai_debug_store_raw: bool = False

    # 10 MiB of decoded image data.
    max_image_bytes: int = 10 * 1024 * 1024

    security_headers_enabled: bool = Field(
        default=True,
        validation_alias=AliasChoices("SECURITY_HEADERS_ENABLED", "SECURE_HEADERS_ENABLED"),
    )

    # Kept as raw strings: pydantic-settings JSON-decodes list fields from env.
    cors_allow_origins_raw: str = Field(
        default="",
        validation_alias=AliasChoices("CORS_ALLOW_ORIGINS"),
    )
    cors_allow_methods_raw: str = Field(
        default="POST,OPTIONS",
        validation_alias=AliasChoices("CORS_ALLOW_METHODS"),
    )
    cors_allow_headers_raw: str = Field(
        default="Content-Type,Accept",
        validation_alias=AliasChoices("CORS_ALLOW_HEADERS"),
    )

    @field_validator("ai_provider", mode="before")
    @classmethod
    def _normalize_provider(cls, value):
        if isinstance(value, str):
            return value.lower().strip() or "gemini"
        return value

    @property
    def is_production(self) -> bool:
        return self.environment.lower().strip() in {"production", "prod"}

    @property
    def cors_allow_origins(self) -> list[str]:
        return _parse_list_value(self.cors_allow_origins_raw)

    @property
    def cors_allow_methods(self) -> list[str]:
        return _parse_list_value(self.cors_allow_methods_raw)

    @property
    def cors_allow_headers(self) -> list[str]:
        return _parse_list_value(self.cors_allow_headers_raw)

    @property
    def max_request_bytes(self) -> int:
        """Upper bound for a JSON body carrying ``max_image_bytes`` of base64 data.

        The 10% margin covers MIME line breaks (76 columns, CRLF) once they are
        JSON-escaped; the fixed 4 KiB covers the envelope and data URI prefix.
        """
        encoded = (self.max_image_bytes * 4) // 3
        return encoded * 11 // 10 + 4096

    def validate_required_config(self) -> list[str]:
        errors: list[str] = []
        if self.ai_provider not in SUPPORTED_AI_PROVIDERS:
            errors.append(
                f"AI_PROVIDER={self.ai_provider!r} is not supported; use one of {list(SUPPORTED_AI_PROVIDERS)}"
            )
        if self.ai_provider == "gemini" and not self.gemini_api_key.strip():
            errors.append("GEMINI_API_KEY is required when AI_PROVIDER=gemini")
        if self.ai_timeout_seconds <= 0:
            errors.append("AI_TIMEOUT_SECONDS must be positive")
        if self.ai_max_tokens <= 0:
            errors.append("AI_MAX_TOKENS must be positive")
        if self.max_image_bytes <= 0:
            errors.append("MAX_IMAGE_BYTES must be positive")
        return errors


@lru_cache

def get_settings() -> Settings:
    return Settings()
