import logging

from eventpay.processor import PaymentProcessor, ProcessorError
from eventpay.schemas import PaymentRequest
from eventpay.validation import AmountPolicy, format_dollars

logger = logging.getLogger(__name__)

GENERIC_FAILURE_MESSAGE = "Failed to create payment intent. Please try again."
DESCRIPTION_PREFIX = "Event Coverage Package"


def build_metadata(request: PaymentRequest) -> dict[str, str]:
    """Pair each business field with the caller's value for the processor record.

    Fields the caller left out are omitted; currency fields are dollar strings.
    """
    metadata = {
        "customer_name": request.name,
        "customer_email": request.email,
        "customer_phone": request.phone,
        "event_title": request.event_title,
        "venue_name": request.venue_name,
        "event_date": request.event_date,
        "event_location": request.location,
        "event_times": request.event_times,
        "notes": request.notes or "None",
        "payment_amount": format_dollars(request.amount),
    }
    if request.total_package_price is not None:
        metadata["package_total"] = format_dollars(request.total_package_price)
    if request.remaining_balance is not None:
        metadata["remaining_balance"] = format_dollars(request.remaining_balance)
    return {key: value for key, value in metadata.items() if value is not None}


def build_description(request: PaymentRequest) -> str:
    parts = [part for part in (request.event_title, request.venue_name) if part]
    if not parts:
        return DESCRIPTION_PREFIX
    return f"{DESCRIPTION_PREFIX} - {' at '.join(parts)}"


class PaymentIntentRequestHandler:
    """Validate a payment request and create the matching payment intent.

    Raises AmountTooLow / AmountTooHigh before any processor call, and
    ProcessorError (carrying only the generic message) when the processor
    fails. The original failure is logged and chained as __cause__.
    """

    def __init__(
        self,
        processor: PaymentProcessor,
        policy: AmountPolicy | None = None,
    ) -> None:
        self.processor = processor
        self.policy = policy or AmountPolicy()

    async def create_payment_intent(self, request: PaymentRequest) -> str:
        amount = self.policy.check(request.amount)

        try:
            intent = await self.processor.create_payment_intent(
                amount=amount,
                currency=self.policy.currency,
                metadata=build_metadata(request),
                receipt_email=request.email,
                description=build_description(request),
            )
        except Exception as exc:  # noqa: BLE001
            logger.error("Error creating payment intent: %r", exc)
            raise ProcessorError(GENERIC_FAILURE_MESSAGE) from exc

        logger.info("Payment intent created: %s for %s", intent.id, request.email)
        return intent.client_secret
