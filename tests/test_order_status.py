import pytest

from storefront.domain.order_status import CANCELLABLE_STATUSES, OrderStatus, can_transition


@pytest.mark.parametrize(
    "current, requested",
    [
        (OrderStatus.PENDING, OrderStatus.PROCESSING),
        (OrderStatus.PENDING, OrderStatus.CANCELLED),
        (OrderStatus.PROCESSING, OrderStatus.SHIPPED),
        (OrderStatus.PROCESSING, OrderStatus.CANCELLED),
        (OrderStatus.SHIPPED, OrderStatus.DELIVERED),
    ],
)
def test_allowed_transitions(current, requested):
    assert can_transition(current, requested)


@pytest.mark.parametrize(
    "current, requested",
    [
        (OrderStatus.DELIVERED, OrderStatus.PENDING),
        (OrderStatus.SHIPPED, OrderStatus.CANCELLED),
        (OrderStatus.CANCELLED, OrderStatus.PROCESSING),
        (OrderStatus.PROCESSING, OrderStatus.PENDING),
        (OrderStatus.PROCESSING, OrderStatus.PROCESSING),
    ],
)
def test_rejected_transitions(current, requested):
    assert not can_transition(current, requested)


def test_accepts_raw_values():
    assert can_transition("Pending", "Processing")


def test_cancellable_statuses():
    assert CANCELLABLE_STATUSES == {OrderStatus.PENDING, OrderStatus.PROCESSING}
