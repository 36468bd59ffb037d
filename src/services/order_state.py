"""Order status parsing and the status transition table."""

from src.api.middleware.error_handler import InvalidStatusError, InvalidTransitionError
from src.models.order import OrderStatus

TERMINAL_STATUSES: frozenset[OrderStatus] = frozenset(
    {OrderStatus.COMPLETED, OrderStatus.CANCELLED}
)

# Statuses shown on the kitchen display, in declaration order
KITCHEN_QUEUE_STATUSES: tuple[OrderStatus, ...] = tuple(
    status for status in OrderStatus if status not in TERMINAL_STATUSES
)

# Allowed targets per current status
TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.RECEIVED: frozenset({OrderStatus.PREPARING, OrderStatus.CANCELLED}),
    OrderStatus.PREPARING: frozenset({OrderStatus.READY, OrderStatus.CANCELLED}),
    OrderStatus.READY: frozenset({OrderStatus.COMPLETED, OrderStatus.CANCELLED}),
    OrderStatus.COMPLETED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}


def parse_status(value: str | OrderStatus) -> OrderStatus:
    """Convert a status string to OrderStatus.

    Only exact enum values are accepted. "Received" or " received" are
    rejected rather than normalized.

    Raises:
        InvalidStatusError: If value is not an order status.
    """
    if isinstance(value, OrderStatus):
        return value
    try:
        return OrderStatus(value)
    except ValueError:
        raise InvalidStatusError(str(value)) from None


def can_transition(current: OrderStatus, target: OrderStatus) -> bool:
    """Check whether the transition table allows moving current to target."""
    return target in TRANSITIONS[current]


def check_transition(current: OrderStatus, target: OrderStatus, strict: bool) -> None:
    """Validate a status change.

    In lenient mode every enumerated target is accepted from any status.

    Raises:
        InvalidTransitionError: In strict mode, when the table forbids the move.
    """
    if strict and not can_transition(current, target):
        raise InvalidTransitionError(current.value, target.value)
