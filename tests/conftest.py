import base64
import io
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from wearly.core import dependencies as core_deps
from wearly.core.gemini import get_image_generator
from wearly.core.rate_limit import limiter
from wearly.database import supabase_client
from wearly.modules.auth.service import clear_user_cache
from wearly.modules.razorpay.client import RazorpayClient, get_razorpay_client

GENERATED_IMAGE = "data:image/png;base64," + base64.b64encode(b"generated-image").decode()


def make_image_data_url(width: int = 1200, height: int = 900, color=(200, 30, 30), fmt: str = "PNG") -> str:
    """Build a real image as a data URL so no network is needed."""
    buf = io.BytesIO()
    Image.new("RGB", (width, height), color).save(buf, format=fmt)
    mime = "image/png" if fmt == "PNG" else "image/jpeg"
    return f"data:{mime};base64,{base64.b64encode(buf.getvalue()).decode()}"


@pytest.fixture(autouse=True)
def _reset_state():
    limiter.enabled = False
    clear_user_cache()
    yield
    clear_user_cache()


@pytest.fixture
def test_user_id() -> str:
    return "test-user-00000000-0000-0000-0000-000000000001"


@pytest.fixture
def rpc_results() -> dict:
    """Return values for supabase.rpc(name, ...) keyed by procedure name."""
    return {
        "ensure_monthly_topup": None,
        "consume_credits": True,
        "increment_credits": 42,
        "mark_payment_processed": True,
    }


@pytest.fixture
def rpc_calls() -> list:
    return []


@pytest.fixture
def service_supabase(rpc_results, rpc_calls) -> MagicMock:
    """Service-role Supabase double whose rpc() answers from rpc_results."""
    supabase = MagicMock(name="service_supabase")

    def rpc(name, params):
        rpc_calls.append((name, params))
        call = MagicMock(name=f"rpc:{name}")
        outcome = rpc_results.get(name)
        if isinstance(outcome, Exception):
            call.execute.side_effect = outcome
        else:
            call.execute.return_value = MagicMock(data=outcome)
        return call

    supabase.rpc.side_effect = rpc
    return supabase


@pytest.fixture
def anon_supabase() -> MagicMock:
    return MagicMock(name="anon_supabase")


@pytest.fixture
def generator() -> MagicMock:
    generator = MagicMock(name="gemini")
    generator.generate_image.return_value = GENERATED_IMAGE
    return generator


@pytest.fixture
def razorpay() -> MagicMock:
    client = MagicMock(spec=RazorpayClient)
    client.key_id = "rzp_test_key"
    client.key_secret = "rzp_test_secret"
    return client


@pytest.fixture
def app(anon_supabase, service_supabase, generator, razorpay):
    from wearly.main import app

    app.dependency_overrides[supabase_client.get_supabase] = lambda: anon_supabase
    app.dependency_overrides[supabase_client.new_session_client] = lambda: anon_supabase
    app.dependency_overrides[supabase_client.get_service_supabase] = lambda: service_supabase
    app.dependency_overrides[get_image_generator] = lambda: generator
    app.dependency_overrides[get_razorpay_client] = lambda: razorpay
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def anon_client(app) -> TestClient:
    """Client without a signed-in user; auth goes through the Supabase double."""
    with TestClient(app) as client:
        yield client


@pytest.fixture
def client(app, test_user_id) -> TestClient:
    """Client with get_current_user pinned to the test user."""
    app.dependency_overrides[core_deps.get_current_user] = lambda: {
        "id": test_user_id,
        "email": "test@test.com",
    }
    with TestClient(app) as client:
        yield client


@pytest.fixture
def rate_limited():
    """Turn the limiter on with empty counters for one test."""
    limiter.reset()
    limiter.enabled = True
    yield limiter
    limiter.enabled = False
    limiter.reset()
