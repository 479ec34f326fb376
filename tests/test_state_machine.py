"""Order state machine transitions."""

import pytest

from shopfront.api.v1.orders.state_machine import OrderStateMachine
from shopfront.models import OrderStatus


@pytest.fixture
def machine():
    return OrderStateMachine()


@pytest.mark.parametrize(
    "current,new",
    [
        (OrderStatus.PENDING, OrderStatus.CONFIRMED),
        (OrderStatus.PENDING, OrderStatus.CANCELLED),
        (OrderStatus.CONFIRMED, OrderStatus.PROCESSING),
        (OrderStatus.CONFIRMED, OrderStatus.CANCELLED),
        (OrderStatus.PROCESSING, OrderStatus.SHIPPED),
        (OrderStatus.SHIPPED, OrderStatus.DELIVERED),
        (OrderStatus.DELIVERED, OrderStatus.REFUNDED),
    ],
)
def test_forward_edges_allowed(machine, current, new):
    assert machine.can_transition(current, new)


@pytest.mark.parametrize(
    "current,new",
    [
        (OrderStatus.PENDING, OrderStatus.SHIPPED),
        (OrderStatus.PENDING, OrderStatus.REFUNDED),
        (OrderStatus.PROCESSING, OrderStatus.CANCELLED),
        (OrderStatus.SHIPPED, OrderStatus.CANCELLED),
        (OrderStatus.DELIVERED, OrderStatus.SHIPPED),
        (OrderStatus.CONFIRMED, OrderStatus.PENDING),
    ],
)
def test_other_edges_rejected(machine, current, new):
    assert not machine.can_transition(current, new)


def test_cancelled_and_refunded_are_terminal(machine):
    assert machine.is_terminal_state(OrderStatus.CANCELLED)
    assert machine.is_terminal_state(OrderStatus.REFUNDED)
    assert not machine.is_terminal_state(OrderStatus.DELIVERED)


def test_only_pending_and_confirmed_are_cancellable(machine):
    cancellable = {status for status in OrderStatus if machine.is_cancellable(status)}
    assert cancellable == {OrderStatus.PENDING, OrderStatus.CONFIRMED}


def test_refundable_states(machine):
    refundable = {status for status in OrderStatus if machine.is_refundable(status)}
    assert refundable == {
        OrderStatus.CONFIRMED,
        OrderStatus.PROCESSING,
        OrderStatus.SHIPPED,
        OrderStatus.DELIVERED,
    }


def test_refund_releases_stock_only_before_shipping(machine):
    assert machine.releases_stock_on_refund(OrderStatus.CONFIRMED)
    assert machine.releases_stock_on_refund(OrderStatus.PROCESSING)
    assert not machine.releases_stock_on_refund(OrderStatus.SHIPPED)
    assert not machine.releases_stock_on_refund(OrderStatus.DELIVERED)


def test_valid_transitions_listing(machine):
    assert machine.get_valid_transitions(OrderStatus.PENDING) == [
        OrderStatus.CANCELLED,
        OrderStatus.CONFIRMED,
    ]
    assert machine.get_valid_transitions(OrderStatus.REFUNDED) == []
