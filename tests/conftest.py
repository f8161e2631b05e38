import pytest
from starlette.testclient import TestClient

from eventpay.config import Settings
from eventpay.main import create_app
from tests.helpers.processor import FakeProcessor

STRIPE_TEST_KEY = "sk_test_dummy"


@pytest.fixture(scope="function")
def static_dir(tmp_path):
    """Public directory holding the booking form pages."""
    public = tmp_path / "public"
    public.mkdir()
    (public / "EventCoverage.html").write_text("<h1>Event Coverage</h1>")
    (public / "thank-you.html").write_text("<h1>Thank you</h1>")
    (public / "styles.css").write_text("body { margin: 0; }")
    return public


@pytest.fixture(scope="function")
def settings(static_dir):
    """Settings isolated from the developer's environment and .env file."""
    return Settings(
        _env_file=None,
        stripe_secret_key=STRIPE_TEST_KEY,
        static_dir=static_dir,
        max_body_size=64 * 1024,
    )


@pytest.fixture(scope="function")
def fake_processor():
    return FakeProcessor()


@pytest.fixture(scope="function")
def app(settings, fake_processor):
    """FastAPI app wired to the fake processor."""
    return create_app(settings, processor=fake_processor)


@pytest.fixture(scope="function")
def client(app):
    """HTTP test client."""
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c
