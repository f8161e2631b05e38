import json
import logging

import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import ValidationError

from eventpay.config import Settings, check_startup
from eventpay.intents import PaymentIntentRequestHandler
from eventpay.logging_config import setup_logging
from eventpay.processor import PaymentProcessor, ProcessorError, StripeProcessor
from eventpay.schemas import PaymentRequest
from eventpay.validation import AmountOutOfBounds

logger = logging.getLogger(__name__)

INDEX_PAGE = "EventCoverage.html"
THANK_YOU_PAGE = "thank-you.html"


class StartupError(RuntimeError):
    """Configuration is not fit to start serving requests."""

    def __init__(self, errors: list[str]) -> None:
        super().__init__("; ".join(errors))
        self.errors = errors


def create_app(
    settings: Settings | None = None,
    processor: PaymentProcessor | None = None,
) -> FastAPI:
    settings = settings or Settings()
    if processor is None:
        check = check_startup(settings)
        if not check.ok:
            raise StartupError(check.errors)
        processor = StripeProcessor(
            settings.stripe_secret_key.get_secret_value(),
            policy=settings.processor_policy(),
        )

    application = FastAPI(title="Event Coverage Payments")
    application.state.settings = settings
    application.state.handler = PaymentIntentRequestHandler(
        processor, policy=settings.amount_policy()
    )

    @application.post("/create-payment-intent")
    async def create_payment_intent(request: Request) -> Response:
        # 1. Read raw body with size limit
        body = await request.body()
        if len(body) > request.app.state.settings.max_body_size:
            return JSONResponse(status_code=413, content={"error": "Payload too large"})

        # 2. Parse JSON -> 400 if not a JSON object
        if not body:
            return JSONResponse(status_code=400, content={"error": "Empty body"})
        try:
            raw = json.loads(body)
        except (json.JSONDecodeError, UnicodeDecodeError, RecursionError):
            return JSONResponse(status_code=400, content={"error": "Invalid JSON"})
        if not isinstance(raw, dict):
            return JSONResponse(status_code=400, content={"error": "Expected JSON object"})

        # 3. Validate schema -> 400 for missing fields, 422 for bad values
        try:
            payment_request = PaymentRequest.model_validate(raw)
        except ValidationError as exc:
            errors = exc.errors()
            has_missing = any(e.get("type") == "missing" for e in errors)
            status_code = 400 if has_missing else 422
            return JSONResponse(status_code=status_code, content={"error": _describe(errors)})

        # 4. Bounds check and processor call
        handler: PaymentIntentRequestHandler = request.app.state.handler
        try:
            client_secret = await handler.create_payment_intent(payment_request)
        except AmountOutOfBounds as exc:
            return JSONResponse(status_code=400, content={"error": str(exc)})
        except ProcessorError as exc:
            return JSONResponse(status_code=500, content={"error": str(exc)})

        return JSONResponse(status_code=200, content={"clientSecret": client_secret})

    @application.get("/health")
    async def health() -> dict:
        return {"status": "OK", "message": "Server is running"}

    @application.get("/")
    async def index(request: Request) -> Response:
        return _page(request.app.state.settings, INDEX_PAGE)

    @application.get(f"/{THANK_YOU_PAGE}")
    async def thank_you(request: Request) -> Response:
        return _page(request.app.state.settings, THANK_YOU_PAGE)

    # Mounted last so the routes above take precedence.
    if settings.static_dir.is_dir():
        application.mount("/", StaticFiles(directory=settings.static_dir), name="static")

    return application


def _describe(errors: list[dict]) -> str:
    """Summarize pydantic errors without echoing submitted values."""
    parts = []
    for error in errors:
        field = ".".join(str(part) for part in error.get("loc", ())) or "body"
        parts.append(f"{field}: {error.get('msg', 'invalid')}")
    return "; ".join(parts)


def _page(settings: Settings, filename: str) -> Response:
    path = settings.static_dir / filename
    if not path.is_file():
        return JSONResponse(status_code=404, content={"error": "Not found"})
    return FileResponse(path)


def run() -> None:
    """Console entry point: validate configuration, then serve."""
    settings = Settings()
    setup_logging(settings.log_level)

    check = check_startup(settings)
    if not check.ok:
        for error in check.errors:
            logger.critical("Startup check failed: %s", error)
        raise SystemExit(1)

    processor = StripeProcessor(
        settings.stripe_secret_key.get_secret_value(),
        policy=settings.processor_policy(),
    )
    application = create_app(settings, processor=processor)

    logger.info("Event Coverage payment server running on port %d", settings.port)
    logger.info("Local: http://localhost:%d", settings.port)
    logger.info("Stripe mode: %s", processor.mode)
    uvicorn.run(application, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    run()
