"""
Payment processor client.

Creates Stripe PaymentIntents over the processor's REST API. The browser
confirms the intent with the returned client secret; this service only
issues it.
"""

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, Optional

import httpx

from zapshift.app.core.config import settings
from zapshift.app.core.exceptions import InternalError
from zapshift.app.core.reliability import CircuitBreaker, CircuitOpenError, payment_circuit_breaker

logger = logging.getLogger(__name__)


@dataclass
class PaymentIntent:
    id: str
    client_secret: str
    amount: int
    currency: str


def to_minor_units(cost: float) -> int:
    """Convert a currency amount to cents (25 -> 2500, 12.345 -> 1235)."""
    return int(round(cost * 100))


class PaymentGateway:
    """Client for the payment processor's PaymentIntents endpoint."""

    def __init__(
        self,
        secret_key: Optional[str],
        api_base: str,
        currency: str = "usd",
        timeout: float = 30.0,
        breaker: Optional[CircuitBreaker] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.secret_key = secret_key
        self.api_base = api_base.rstrip("/")
        self.currency = currency
        self.timeout = timeout
        self.breaker = breaker or payment_circuit_breaker
        self.transport = transport

    async def _post(self, path: str, data: Dict[str, str]) -> httpx.Response:
        """
        POST to the processor; 5xx answers raise so the breaker counts them.

        4xx answers are returned: they reject this request, not the service.
        """
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            response = await client.post(
                f"{self.api_base}{path}",
                data=data,
                auth=(self.secret_key, ""),
            )
        if response.status_code >= 500:
            response.raise_for_status()
        return response

    async def create_payment_intent(self, amount: int, metadata: Optional[Dict[str, str]] = None) -> PaymentIntent:
        """
        Create a PaymentIntent for ``amount`` minor units.

        Raises:
            InternalError: processor not configured, unreachable or refused the request
        """
        if not self.secret_key:
            raise InternalError("Payment processor is not configured")

        data = {"amount": str(amount), "currency": self.currency}
        for key, value in (metadata or {}).items():
            data[f"metadata[{key}]"] = str(value)

        try:
            response = await self.breaker.call(self._post, "/payment_intents", data)
        except CircuitOpenError:
            logger.error("Payment processor circuit is open; refusing intent for %d", amount)
            raise InternalError("Payment processor temporarily unavailable")
        except httpx.HTTPError as exc:
            logger.error("Payment processor request failed: %s", exc)
            raise InternalError("Payment processor request failed")

        body = response.json() if response.content else {}
        if response.status_code >= 400:
            message = body.get("error", {}).get("message", response.text)
            logger.error("Payment processor refused intent (%d): %s", response.status_code, message)
            raise InternalError(message or "Payment processor refused the request")

        logger.info("Created payment intent %s for %d %s", body.get("id"), amount, self.currency)
        return PaymentIntent(
            id=body["id"],
            client_secret=body["client_secret"],
            amount=body.get("amount", amount),
            currency=body.get("currency", self.currency),
        )


@lru_cache
def get_payment_gateway() -> PaymentGateway:
    """FastAPI dependency returning the process-wide gateway."""
    return PaymentGateway(
        secret_key=settings.payment_secret_key,
        api_base=settings.payment_api_base,
        currency=settings.payment_currency,
        timeout=settings.payment_timeout_seconds,
    )
