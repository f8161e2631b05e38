import asyncio
import logging
from dataclasses import dataclass
from typing import Protocol

import stripe

logger = logging.getLogger(__name__)


class ProcessorError(Exception):
    """The payment processor failed to create a payment intent."""


@dataclass(frozen=True)
class ProcessorIntent:
    id: str
    client_secret: str


@dataclass(frozen=True)
class ProcessorPolicy:
    """Timeout and retry limits for a single outbound creation call.

    Only connection failures are retried. Timeouts are not, since the
    abandoned request may still create the intent; card, validation and
    authentication errors fail immediately.
    """

    timeout_seconds: float = 10.0
    max_retries: int = 0
    retry_backoff_seconds: float = 0.25

    def __post_init__(self) -> None:
        if self.max_retries < 0:
            raise ValueError(f"max_retries must be >= 0, got {self.max_retries}")
        if self.timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be > 0, got {self.timeout_seconds}")


class PaymentProcessor(Protocol):
    async def create_payment_intent(
        self,
        *,
        amount: int,
        currency: str,
        metadata: dict[str, str],
        receipt_email: str | None,
        description: str,
    ) -> ProcessorIntent: ...


class StripeProcessor:
    def __init__(self, api_key: str, policy: ProcessorPolicy | None = None) -> None:
        self.api_key = api_key
        self.policy = policy or ProcessorPolicy()

    @property
    def mode(self) -> str:
        return "TEST" if self.api_key.startswith("sk_test") else "LIVE"

    async def create_payment_intent(
        self,
        *,
        amount: int,
        currency: str,
        metadata: dict[str, str],
        receipt_email: str | None,
        description: str,
    ) -> ProcessorIntent:
        params = {
            "amount": amount,
            "currency": currency,
            "metadata": metadata,
            "description": description,
        }
        if receipt_email:
            params["receipt_email"] = receipt_email

        attempts = self.policy.max_retries + 1
        attempt = 0
        while True:
            attempt += 1
            try:
                intent = await asyncio.wait_for(
                    asyncio.to_thread(self._create, params),
                    timeout=self.policy.timeout_seconds,
                )
            except asyncio.TimeoutError as exc:
                # The worker thread may still complete the create at Stripe.
                raise ProcessorError(
                    f"Stripe call timed out after {self.policy.timeout_seconds}s"
                ) from exc
            except stripe.APIConnectionError as exc:
                if attempt >= attempts:
                    raise ProcessorError(
                        f"Stripe unreachable after {attempts} attempt(s): {exc!r}"
                    ) from exc
                logger.warning(
                    "Stripe call failed (attempt %d/%d), retrying: %r",
                    attempt, attempts, exc,
                )
                await asyncio.sleep(self.policy.retry_backoff_seconds * attempt)
            except stripe.StripeError as exc:
                raise ProcessorError(str(exc)) from exc
            else:
                return ProcessorIntent(id=intent.id, client_secret=intent.client_secret)

    def _create(self, params: dict):
        return stripe.PaymentIntent.create(api_key=self.api_key, **params)
