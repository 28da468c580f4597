# storefront/tasks/payments.py
from storefront.celery_worker import celery_app
from storefront.domain.errors import PaymentError
from storefront.services.payment_gateway import build_payment_gateway
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@celery_app.task(
    name="storefront.tasks.payments.refund_payment_task",
    autoretry_for=(PaymentError,),
    retry_backoff=True,
    retry_backoff_max=600,
    max_retries=10,
)
def refund_payment_task(reference: str):
    """
    Zwrot platnosci, ktorej nie udalo sie zamienic w zamowienie.
    Wolane gdy synchroniczny zwrot w checkoucie sie nie powiodl.
    """
    logger.info(f"Refund task started for payment {reference}")

    result = build_payment_gateway().refund(reference)
    if not result.success:
        raise PaymentError(f"refund for {reference} ended with status {result.status}")

    logger.info(f"Payment {reference} refunded ({result.reference})")
    return {"reference": reference, "refund": result.reference, "status": result.status}
