"""
Failure Injection Tests.

Validates resilience against payment-processor and cache failures.
"""

from urllib.parse import parse_qs

import httpx
import pytest

from zapshift.app.core.exceptions import InternalError
from zapshift.app.core.reliability import CircuitBreaker, CircuitOpenError
from zapshift.app.services.payment_gateway import PaymentGateway, to_minor_units


def processor(status_code=200, body=None, seen=None):
    """Build a mock processor endpoint; captured requests go into ``seen``."""
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return httpx.Response(status_code, json=body if body is not None else {
            "id": "pi_123",
            "client_secret": "pi_123_secret_abc",
            "amount": 2500,
            "currency": "usd",
        })
    return handler


def gateway(handler, breaker=None, secret_key="sk_test_123"):
    return PaymentGateway(
        secret_key=secret_key,
        api_base="https://processor.test/v1",
        breaker=breaker or CircuitBreaker("test-processor", failure_threshold=2, reset_timeout=60),
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.asyncio
async def test_circuit_breaker_activates():
    """Test that circuit breaker opens after threshold failures."""
    cb = CircuitBreaker("test", failure_threshold=2, reset_timeout=1)

    async def failing_func():
        raise ValueError("Boom")

    # Fail 1
    with pytest.raises(ValueError):
        await cb.call(failing_func)

    # Fail 2 (Threshold reached)
    with pytest.raises(ValueError):
        await cb.call(failing_func)

    # Call 3 (Should be CircuitOpenError)
    with pytest.raises(CircuitOpenError):
        await cb.call(failing_func)


@pytest.mark.asyncio
async def test_circuit_breaker_half_open_recovers():
    cb = CircuitBreaker("test", failure_threshold=1, reset_timeout=30)

    async def failing_func():
        raise ValueError("Boom")

    async def healthy_func():
        return "ok"

    with pytest.raises(ValueError):
        await cb.call(failing_func)
    assert cb.state == "OPEN"

    # Pretend the reset timeout has elapsed
    cb.last_failure_time -= 31
    assert await cb.call(healthy_func) == "ok"
    assert cb.state == "CLOSED"
    assert cb.failures == 0


def test_minor_units():
    assert to_minor_units(25) == 2500
    assert to_minor_units(19.99) == 1999
    assert to_minor_units(0.1 + 0.2) == 30


@pytest.mark.asyncio
async def test_payment_intent_request_shape():
    seen = []
    client = gateway(processor(seen=seen))

    intent = await client.create_payment_intent(2500, metadata={"parcelId": "42"})

    assert intent.client_secret == "pi_123_secret_abc"
    request = seen[0]
    assert request.url.path == "/v1/payment_intents"
    assert request.headers["authorization"].startswith("Basic ")
    form = parse_qs(request.content.decode())
    assert form["amount"] == ["2500"]
    assert form["currency"] == ["usd"]
    assert form["metadata[parcelId]"] == ["42"]


@pytest.mark.asyncio
async def test_processor_error_is_internal_error():
    client = gateway(processor(402, body={"error": {"message": "Your card was declined."}}))

    with pytest.raises(InternalError) as exc_info:
        await client.create_payment_intent(2500)

    assert exc_info.value.message == "Your card was declined."
    assert exc_info.value.status_code == 500


@pytest.mark.asyncio
async def test_missing_secret_key_is_internal_error():
    seen = []
    client = gateway(processor(seen=seen), secret_key=None)

    with pytest.raises(InternalError):
        await client.create_payment_intent(2500)

    assert seen == []


@pytest.mark.asyncio
async def test_unreachable_processor_opens_circuit():
    attempts = []

    def handler(request):
        attempts.append(request)
        raise httpx.ConnectError("connection refused", request=request)

    client = gateway(handler)

    for _ in range(2):
        with pytest.raises(InternalError):
            await client.create_payment_intent(2500)

    with pytest.raises(InternalError) as exc_info:
        await client.create_payment_intent(2500)

    assert exc_info.value.message == "Payment processor temporarily unavailable"
    # The open circuit short-circuits without touching the network
    assert len(attempts) == 2


@pytest.mark.asyncio
async def test_processor_outage_surfaces_as_500(client, mocker):
    booked = await client.post("/parcels", json={"created_by": "user@zapshift.com", "cost": 25})
    mocker.patch(
        "zapshift.app.services.payment_gateway.PaymentGateway.create_payment_intent",
        side_effect=InternalError("Payment processor request failed"),
    )

    response = await client.post("/create-payment-intent", json={"parcelId": booked.json()["insertedId"]})

    assert response.status_code == 500
    assert response.json()["error_code"] == "ERR_INTERNAL_001"


@pytest.mark.asyncio
async def test_health_reports_cache_state(client, mocker):
    mocker.patch("zapshift.app.main.ping_redis", return_value=False)

    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.json()["redis"] is False


@pytest.mark.asyncio
async def test_root_banner(client):
    response = await client.get("/")

    assert response.status_code == 200
    assert response.text == "Zap shift server is running"


@pytest.mark.asyncio
async def test_correlation_id_is_echoed(client):
    response = await client.get("/", headers={"X-Correlation-ID": "booking-42"})

    assert response.headers["X-Correlation-ID"] == "booking-42"
    assert float(response.headers["X-Process-Time"]) >= 0


@pytest.mark.asyncio
async def test_processor_5xx_opens_circuit():
    seen = []
    breaker = CircuitBreaker("test-processor", failure_threshold=2, reset_timeout=60)
    client = gateway(processor(503, body={"error": {"message": "Service unavailable"}}, seen=seen), breaker=breaker)

    for _ in range(2):
        with pytest.raises(InternalError):
            await client.create_payment_intent(2500)

    assert breaker.state == "OPEN"
    with pytest.raises(InternalError) as exc_info:
        await client.create_payment_intent(2500)

    assert exc_info.value.message == "Payment processor temporarily unavailable"
    assert len(seen) == 2


@pytest.mark.asyncio
async def test_processor_4xx_does_not_trip_circuit():
    breaker = CircuitBreaker("test-processor", failure_threshold=2, reset_timeout=60)
    client = gateway(processor(402, body={"error": {"message": "Your card was declined."}}), breaker=breaker)

    for _ in range(3):
        with pytest.raises(InternalError):
            await client.create_payment_intent(2500)

    assert breaker.state == "CLOSED"
    assert breaker.failures == 0
