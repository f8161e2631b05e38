"""Environment-driven settings and the startup check run before serving."""

from dataclasses import dataclass, field
from pathlib import Path

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from eventpay.processor import ProcessorPolicy
from eventpay.validation import CURRENCY, MAX_AMOUNT_CENTS, MIN_AMOUNT_CENTS, AmountPolicy


class Settings(BaseSettings):
    """Typed view of runtime configuration from environment variables."""

    stripe_secret_key: SecretStr = SecretStr("")
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"
    static_dir: Path = Path("public")
    max_body_size: int = 10 * 1024 * 1024

    min_amount_cents: int = MIN_AMOUNT_CENTS
    max_amount_cents: int = MAX_AMOUNT_CENTS
    currency: str = CURRENCY

    processor_timeout_seconds: float = Field(default=10.0, gt=0)
    processor_max_retries: int = Field(default=0, ge=0)
    processor_retry_backoff_seconds: float = Field(default=0.25, ge=0)

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    def amount_policy(self) -> AmountPolicy:
        return AmountPolicy(
            min_cents=self.min_amount_cents,
            max_cents=self.max_amount_cents,
            currency=self.currency,
        )

    def processor_policy(self) -> ProcessorPolicy:
        return ProcessorPolicy(
            timeout_seconds=self.processor_timeout_seconds,
            max_retries=self.processor_max_retries,
            retry_backoff_seconds=self.processor_retry_backoff_seconds,
        )


@dataclass
class StartupCheck:
    errors: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def check_startup(settings: Settings) -> StartupCheck:
    """Validate settings that must hold before the service accepts requests."""
    result = StartupCheck()
    if not settings.stripe_secret_key.get_secret_value().strip():
        result.errors.append("STRIPE_SECRET_KEY is not set")
    if settings.min_amount_cents > settings.max_amount_cents:
        result.errors.append(
            f"MIN_AMOUNT_CENTS ({settings.min_amount_cents}) exceeds "
            f"MAX_AMOUNT_CENTS ({settings.max_amount_cents})"
        )
    return result
