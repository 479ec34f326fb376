"""
Order state machine for managing order status transitions
"""

from typing import Dict, List, Set
from shopfront.models.order import OrderStatus

class OrderStateMachine:
    """
    Manages valid order status transitions
    """

    def __init__(self):
        # Define valid transitions
        self.transitions: Dict[OrderStatus, Set[OrderStatus]] = {
            OrderStatus.PENDING: {
                OrderStatus.CONFIRMED,
                OrderStatus.CANCELLED
            },
            OrderStatus.CONFIRMED: {
                OrderStatus.PROCESSING,
                OrderStatus.CANCELLED,
                OrderStatus.REFUNDED
            },
            OrderStatus.PROCESSING: {
                OrderStatus.SHIPPED,
                OrderStatus.REFUNDED
            },
            OrderStatus.SHIPPED: {
                OrderStatus.DELIVERED,
                OrderStatus.REFUNDED
            },
            OrderStatus.DELIVERED: {
                OrderStatus.REFUNDED  # For returns
            },
            OrderStatus.CANCELLED: set(),
            OrderStatus.REFUNDED: set()
        }

        # Goods are still in the warehouse, so stock goes back on refund
        self.restocking_refund_states: Set[OrderStatus] = {
            OrderStatus.CONFIRMED,
            OrderStatus.PROCESSING
        }

    def can_transition(
        self,
        current_status: OrderStatus,
        new_status: OrderStatus
    ) -> bool:
        """
        Check if transition is valid

        Args:
            current_status: Current order status
            new_status: Desired new status

        Returns:
            True if transition is allowed
        """
        valid_transitions = self.transitions.get(current_status, set())
        return new_status in valid_transitions

    def get_valid_transitions(
        self,
        current_status: OrderStatus
    ) -> List[OrderStatus]:
        """Get list of valid transitions from current status"""
        return sorted(self.transitions.get(current_status, set()), key=lambda s: s.value)

    def is_terminal_state(self, status: OrderStatus) -> bool:
        """True if no more transitions possible"""
        return len(self.transitions.get(status, set())) == 0

    def is_cancellable(self, status: OrderStatus) -> bool:
        return OrderStatus.CANCELLED in self.transitions.get(status, set())

    def is_refundable(self, status: OrderStatus) -> bool:
        return OrderStatus.REFUNDED in self.transitions.get(status, set())

    def releases_stock_on_refund(self, status: OrderStatus) -> bool:
        return status in self.restocking_refund_states

# Transitions are static; one instance is shared
order_state_machine = OrderStateMachine()
