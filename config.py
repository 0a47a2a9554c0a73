"""
Application configuration via pydantic-settings.

Settings are either passed explicitly by the host application or loaded
from environment variables (and .env file). reCAPTCHA options use the
RECAPTCHA_ prefix; proxy options are nested with a double underscore,
e.g. RECAPTCHA_HTTP_PROXY__HOST.

public_key and private_key are required: a missing key fails at load time,
before any request is processed.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from errors import ConfigurationError

PROXY_TYPES = ("http", "https", "socks5", "socks5h")


class HttpProxySettings(BaseModel):
    type: Optional[str] = None
    host: Optional[str] = None
    port: Optional[int] = Field(default=None, ge=1, le=65535)
    auth: Optional[str] = None  # "user:password"

    @field_validator("type")
    @classmethod
    def _known_type(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        value = value.lower()
        if value not in PROXY_TYPES:
            raise ValueError(f"unsupported proxy type {value!r}")
        return value

    @property
    def is_active(self) -> bool:
        # Both host and port are needed, anything less means a direct connection
        return bool(self.host) and self.port is not None

    @property
    def url(self) -> Optional[str]:
        if not self.is_active:
            return None
        return f"{self.type or 'http'}://{self.host}:{self.port}"


class RecaptchaSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="RECAPTCHA_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    public_key: str
    private_key: str
    secure: bool = False
    enabled: bool = True
    locale_key: str = "kernel.default_locale"
    http_proxy: HttpProxySettings = Field(default_factory=HttpProxySettings)

    # Verification endpoint (legacy plain-HTTP API)
    verify_server: str = "www.google.com"
    verify_path: str = "/recaptcha/api/verify"
    verify_port: int = 80
    timeout_seconds: float = 10.0
    user_agent: str = "reCAPTCHA/PHP"

    follow_redirects: bool = True
    verify_tls: bool = True

    @property
    def verify_url(self) -> str:
        if self.verify_port == 80:
            return f"http://{self.verify_server}{self.verify_path}"
        return f"http://{self.verify_server}:{self.verify_port}{self.verify_path}"


def load_recaptcha_settings(**overrides) -> RecaptchaSettings:
    """Build RecaptchaSettings, turning schema violations into ConfigurationError."""
    try:
        return RecaptchaSettings(**overrides)
    except PydanticValidationError as e:
        problems = [
            {"loc": ".".join(str(part) for part in err["loc"]), "msg": err["msg"]}
            for err in e.errors()
        ]
        raise ConfigurationError(
            "Invalid reCAPTCHA configuration", details=problems
        ) from e


class LoggingSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    log_level: str = "INFO"
    log_format: str = "console"  # "json" in production


class SentrySettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    sentry_dsn: str = ""
    sentry_send_pii: bool = False
    sentry_traces_sample_rate: float = 0.1


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    env: str = "development"
    app_name: str = "recaptcha-gate"
    default_locale: str = "en"

    # Only trust X-Forwarded-For / X-Real-IP behind a known reverse proxy
    trust_proxy_headers: bool = False

    # OpenAPI docs URL (None disables the docs UI in production)
    docs_url: Optional[str] = "/docs"

    # Sub-configs (composed via model_validator below)
    recaptcha: Optional[RecaptchaSettings] = None
    logging: Optional[LoggingSettings] = None
    sentry: Optional[SentrySettings] = None

    @model_validator(mode="after")
    def _populate_sub_configs(self) -> "AppSettings":
        if self.recaptcha is None:
            self.recaptcha = load_recaptcha_settings()
        if self.logging is None:
            self.logging = LoggingSettings()
        if self.sentry is None:
            self.sentry = SentrySettings()
        return self

    @property
    def is_production(self) -> bool:
        return self.env == "production"

    def parameters(self) -> dict[str, str]:
        """Flat parameter store that widget options such as locale_key point into."""
        return {
            "kernel.default_locale": self.default_locale,
            "app.name": self.app_name,
            "app.env": self.env,
        }
