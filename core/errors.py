"""
Order domain errors.

Services raise these; the Flet views catch them and turn them into toasts.
"""


class OrderError(Exception):
    """Base class for every order lifecycle failure."""


class OrderValidationError(OrderError):
    """Rejected locally before any write (missing fields, empty cart, bad payment mode)."""


class InvalidTransitionError(OrderValidationError):
    """The requested status change is not an edge of the order state machine."""

    def __init__(self, from_status, to_status, role=None):
        self.from_status = from_status
        self.to_status = to_status
        self.role = role
        if role:
            message = f"Role '{role}' cannot move an order from {from_status} to {to_status}"
        else:
            message = f"Cannot move an order from {from_status} to {to_status}"
        super().__init__(message)


class TransitionConflictError(OrderError):
    """The conditional update matched no row: the order moved on or does not exist."""

    def __init__(self, order_id, expected, current=None):
        self.order_id = order_id
        self.expected = expected
        self.current = current
        if current is None:
            message = f"Order {order_id} not found"
        else:
            message = f"Order {order_id} was already updated (expected {expected}, found {current})"
        super().__init__(message)

    @property
    def not_found(self):
        return self.current is None


class OrderCreationError(OrderError):
    """Order or item insert failed; nothing was persisted."""


class StoreUnavailableError(OrderError):
    """Transient store failure. Not retried automatically; the user re-invokes the action."""
