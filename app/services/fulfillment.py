"""Order status changes made by sellers and buyers.

Nothing here commits; routes wrap calls in ``transactional()`` so the status
change, its log row and any restock land together.
"""
from sqlalchemy import update

from app.exceptions import AppError
from app.metrics import ORDER_TRANSITIONS
from app.services import inventory
from models import db
from models.order import Order, OrderStatusLog

ORDER_TRANSITIONS_MAP = {
    "pending": {"confirmed", "cancelled"},
    "confirmed": {"preparing", "ready", "cancelled"},
    "preparing": {"ready", "cancelled"},
    "ready": {"completed", "cancelled"},
    "completed": set(),
    "cancelled": set(),
}

TERMINAL_STATUSES = {s for s, targets in ORDER_TRANSITIONS_MAP.items() if not targets}


class OrderValidationError(AppError):
    pass


class OrderConflict(OrderValidationError):
    """The order changed status underneath the caller."""

    status = 409


def can_transition(current: str, new_status: str) -> bool:
    return new_status in ORDER_TRANSITIONS_MAP.get(current, set())


def _claim_status(order: Order, new_status: str):
    # Conditional on the status we validated against, so two concurrent
    # cancellations cannot both restock.
    stmt = (
        update(Order)
        .where(Order.id == order.id, Order.status == order.status)
        .values(status=new_status)
        .execution_options(synchronize_session=False)
    )
    if db.session.execute(stmt).rowcount != 1:
        raise OrderConflict("Order was updated by someone else, please reload")
    previous = order.status
    order.status = new_status
    return previous


def _restock_items(order: Order):
    for oi in order.items:
        inventory.restock(oi.product_id, oi.quantity)


def transition_order(order: Order, new_status: str, actor_id: int, role: str = "fbo") -> str:
    """Move ``order`` to ``new_status`` and record who did it."""
    if new_status not in ORDER_TRANSITIONS_MAP:
        raise OrderValidationError("Invalid status")
    if order.status in TERMINAL_STATUSES:
        raise OrderValidationError("Order already closed")
    if not can_transition(order.status, new_status):
        raise OrderValidationError(f"Cannot change order from {order.status} to {new_status}")

    previous = _claim_status(order, new_status)
    if new_status == "cancelled":
        _restock_items(order)
    db.session.add(OrderStatusLog(order_id=order.id, status=new_status, updated_by=actor_id))
    ORDER_TRANSITIONS.labels(new_status, role).inc()
    return previous


def update_status_by_seller(user, order: Order, new_status: str, pickup_time=None) -> str:
    if order.seller_id != user.id:
        raise OrderValidationError("Unauthorized")
    if new_status == "cancelled":
        raise OrderValidationError("Use the cancel endpoint to cancel an order")
    previous = transition_order(order, new_status, user.id, role="fbo")
    if pickup_time is not None:
        order.pickup_time = pickup_time
    return previous


def cancel_order_by_seller(user, order: Order) -> str:
    if order.seller_id != user.id:
        raise OrderValidationError("Unauthorized")
    return transition_order(order, "cancelled", user.id, role="fbo")


def cancel_order_by_buyer(user, order: Order) -> str:
    if order.buyer_id != user.id:
        raise OrderValidationError("Unauthorized")
    if order.status != "pending":
        raise OrderValidationError("Only pending orders can be cancelled")
    return transition_order(order, "cancelled", user.id, role="consumer")
