# storefront/services/payment_gateway.py
from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from uuid import uuid4

import requests
from requests import RequestException

from storefront.domain.errors import PaymentDeclinedError, PaymentError
from storefront.utils.retry import http_retry
from storefront.utils.settings import (
    PAYMENT_API_URL,
    PAYMENT_BACKEND,
    PAYMENT_SECRET_KEY,
    PAYMENT_TIMEOUT_SECONDS,
)
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class PaymentResult:
    success: bool
    reference: str | None = None
    status: str | None = None
    message: str | None = None


def to_minor_units(amount: Decimal) -> int:
    """Kwota w najmniejszej jednostce waluty (centy)."""
    return int((Decimal(amount) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class PaymentGateway(ABC):
    """Kontrakt bramki platnosci - synchroniczna autoryzacja i zwrot."""

    @abstractmethod
    def authorize(self, amount_minor: int, currency: str, payment_method_token: str) -> PaymentResult:
        ...

    @abstractmethod
    def refund(self, reference: str) -> PaymentResult:
        ...


class StripeGateway(PaymentGateway):
    """
    Klient REST do Stripe (PaymentIntents).
    authorize nie ma retry - ponowienie bez klucza idempotencji moze obciazyc karte dwa razy
    refund idzie z Idempotency-Key wiec retry jest bezpieczny
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: int | None = None,
    ):
        self.api_key = api_key if api_key is not None else PAYMENT_SECRET_KEY
        self.base_url = (base_url or PAYMENT_API_URL).rstrip("/")
        self.timeout = timeout or PAYMENT_TIMEOUT_SECONDS

    def authorize(self, amount_minor: int, currency: str, payment_method_token: str) -> PaymentResult:
        url = f"{self.base_url}/v1/payment_intents"
        logger.info(f"StripeGateway POST {url} amount={amount_minor} {currency}")

        try:
            resp = requests.post(
                url,
                auth=(self.api_key, ""),
                data={
                    "amount": amount_minor,
                    "currency": currency,
                    "payment_method": payment_method_token,
                    "confirm": "true",
                    "automatic_payment_methods[enabled]": "true",
                    "automatic_payment_methods[allow_redirects]": "never",
                },
                timeout=self.timeout,
            )
        except RequestException as e:
            logger.error(f"Payment gateway unreachable: {e}")
            raise PaymentError(str(e)) from e

        body = self._json(resp)

        if resp.status_code >= 400:
            error = body.get("error", {})
            message = error.get("message") or f"HTTP {resp.status_code}"
            # odrzucona karta to decyzja klienta/banku, nie awaria bramki
            if error.get("type") == "card_error":
                logger.warning(f"Card declined: {message}")
                raise PaymentDeclinedError()
            logger.warning(f"Payment gateway rejected request: {message}")
            raise PaymentError(message)

        status = body.get("status")
        return PaymentResult(
            success=status == "succeeded",
            reference=body.get("id"),
            status=status,
        )

    @http_retry()
    def _post_refund(self, reference: str) -> requests.Response:
        url = f"{self.base_url}/v1/refunds"
        logger.info(f"StripeGateway POST {url} payment_intent={reference}")

        resp = requests.post(
            url,
            auth=(self.api_key, ""),
            data={"payment_intent": reference},
            headers={"Idempotency-Key": f"refund-{reference}"},
            timeout=self.timeout,
        )
        # 5xx ponawiamy tak jak bledy sieci
        if resp.status_code >= 500:
            resp.raise_for_status()
        return resp

    def refund(self, reference: str) -> PaymentResult:
        try:
            resp = self._post_refund(reference)
        except RequestException as e:
            raise PaymentError(str(e)) from e

        body = self._json(resp)

        if resp.status_code >= 400:
            message = body.get("error", {}).get("message") or f"HTTP {resp.status_code}"
            raise PaymentError(message)

        status = body.get("status")
        return PaymentResult(
            success=status in ("succeeded", "pending"),
            reference=body.get("id"),
            status=status,
        )

    @staticmethod
    def _json(resp: requests.Response) -> dict:
        try:
            return resp.json()
        except ValueError:
            return {}


class FakePaymentGateway(PaymentGateway):
    """
    Bramka w pamieci dla dev i testow.
    mode: succeed / decline / error, refund_mode: succeed / fail / error
    """

    def __init__(self, mode: str = "succeed"):
        self.mode = mode
        self.refund_mode = "succeed"
        self.calls: list[dict] = []

    def authorize(self, amount_minor: int, currency: str, payment_method_token: str) -> PaymentResult:
        self.calls.append(
            {
                "method": "authorize",
                "amount": amount_minor,
                "currency": currency,
                "payment_method": payment_method_token,
            }
        )

        if self.mode == "error":
            raise PaymentError("Gateway unavailable")
        if self.mode == "decline":
            return PaymentResult(
                success=False,
                reference=f"pi_fake_{uuid4().hex[:12]}",
                status="requires_payment_method",
                message="Card declined",
            )
        return PaymentResult(
            success=True,
            reference=f"pi_fake_{uuid4().hex[:12]}",
            status="succeeded",
        )

    def refund(self, reference: str) -> PaymentResult:
        self.calls.append({"method": "refund", "reference": reference})

        if self.refund_mode == "error":
            raise PaymentError("Gateway unavailable")
        if self.refund_mode == "fail":
            return PaymentResult(
                success=False,
                reference=f"re_fake_{uuid4().hex[:12]}",
                status="failed",
            )
        return PaymentResult(
            success=True,
            reference=f"re_fake_{uuid4().hex[:12]}",
            status="succeeded",
        )

    def calls_to(self, method: str) -> list[dict]:
        return [c for c in self.calls if c["method"] == method]


def build_payment_gateway() -> PaymentGateway:
    if PAYMENT_BACKEND == "fake":
        return FakePaymentGateway()
    return StripeGateway()
