import pytest

from storefront.domain.errors import PaymentError
from storefront.services.payment_gateway import FakePaymentGateway, PaymentResult
from storefront.tasks import payments


class PendingRefundGateway(FakePaymentGateway):
    def refund(self, reference):
        super().refund(reference)
        return PaymentResult(success=False, reference="re_x", status="failed")


def test_refund_task_refunds_payment(monkeypatch):
    gateway = FakePaymentGateway()
    monkeypatch.setattr(payments, "build_payment_gateway", lambda: gateway)

    result = payments.refund_payment_task.run("pi_abc")

    assert result["reference"] == "pi_abc"
    assert result["status"] == "succeeded"
    assert gateway.calls_to("refund") == [{"method": "refund", "reference": "pi_abc"}]


def test_refund_task_raises_when_gateway_unavailable(monkeypatch):
    gateway = FakePaymentGateway()
    gateway.refund_mode = "error"
    monkeypatch.setattr(payments, "build_payment_gateway", lambda: gateway)

    with pytest.raises(PaymentError):
        payments.refund_payment_task.run("pi_abc")


def test_refund_task_raises_on_unsuccessful_refund(monkeypatch):
    monkeypatch.setattr(payments, "build_payment_gateway", PendingRefundGateway)

    with pytest.raises(PaymentError):
        payments.refund_payment_task.run("pi_abc")
