"""Checkout: turn the buyer's cart into one pending order per seller.

Every write below is its own committed round trip. Nothing is held open
across steps, so partial progress is undone through a CompensationStack
instead of a database rollback:

1. validate delivery address and phone number (no store access on failure)
2. re-check every cart line against current stock, itemizing shortages
3. split lines by seller
4. per seller: insert the order, insert its items (price snapshot), take
   stock with the conditional decrement
5. clear the cart; failures here are logged only
"""
import logging
from collections import OrderedDict
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, List

from flask import current_app

from app.metrics import CHECKOUT_OUTCOMES, COMPENSATION_FAILURES
from app.services import cart as cart_service
from app.services import inventory
from app.services.cart import CartLine
from app.services.compensation import CompensationStack
from app.telemetry import get_tracer
from app.utils.db import transactional
from app.utils.money import to_money
from models import db
from models.cart import CartItem
from models.order import Order, OrderItem, OrderStatusLog

logger = logging.getLogger(__name__)
tracer = get_tracer(__name__)


class CheckoutError(Exception):
    status = 400

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class CheckoutValidationError(CheckoutError):
    pass


@dataclass
class Shortage:
    product_id: int
    name: str
    requested: int
    available: int

    def to_dict(self):
        return {
            "product_id": self.product_id,
            "name": self.name,
            "requested": self.requested,
            "available": self.available,
        }


class InsufficientStock(CheckoutError):
    status = 409

    def __init__(self, shortages: List[Shortage]):
        names = ", ".join(f"{s.name} (only {s.available} available)" for s in shortages)
        super().__init__(f"Insufficient stock for {names}")
        self.shortages = shortages


class CheckoutFailed(CheckoutError):
    status = 500

    def __init__(self, message, needs_review=None):
        super().__init__(message)
        self.needs_review = list(needs_review or [])


class _StockMiss(Exception):
    def __init__(self, line: CartLine):
        super().__init__(f"stock taken concurrently for product {line.product_id}")
        self.line = line


@dataclass
class CheckoutResult:
    orders: List[Order] = field(default_factory=list)
    cart_cleared: bool = True


def validate_contact(delivery_address, phone_number):
    address = (delivery_address or "").strip()
    phone = (phone_number or "").strip()
    if not address or not phone:
        raise CheckoutValidationError("Please fill in delivery address and phone number")
    return address, phone


def find_shortages(lines: List[CartLine]) -> List[Shortage]:
    return [
        Shortage(line.product_id, line.name, line.quantity, line.stock if line.available else 0)
        for line in lines
        if not line.available or line.quantity > line.stock
    ]


def group_by_seller(lines: List[CartLine]) -> Dict[int, List[CartLine]]:
    groups: Dict[int, List[CartLine]] = OrderedDict()
    for line in lines:
        groups.setdefault(line.seller_id, []).append(line)
    return groups


def order_total(lines: List[CartLine]) -> Decimal:
    return to_money(sum((line.subtotal for line in lines), Decimal("0.00")))


# --- store round trips ---

def _insert_order(buyer_id, seller_id, lines, address, phone, notes) -> int:
    with transactional("Failed to create order"):
        order = Order(
            buyer_id=buyer_id,
            seller_id=seller_id,
            total_amount=order_total(lines),
            status="pending",
            delivery_address=address,
            phone_number=phone,
            notes=notes,
        )
        db.session.add(order)
        db.session.flush()
        db.session.add(OrderStatusLog(order_id=order.id, status="pending", updated_by=buyer_id))
    return order.id


def _insert_order_items(order_id, lines):
    with transactional("Failed to create order items"):
        for line in lines:
            db.session.add(
                OrderItem(
                    order_id=order_id,
                    product_id=line.product_id,
                    product_name=line.name,
                    unit_price=line.unit_price,
                    quantity=line.quantity,
                    total_price=line.subtotal,
                )
            )


def _take_stock(line: CartLine) -> bool:
    with transactional("Failed to decrement stock"):
        taken = inventory.decrement_stock(line.product_id, line.quantity)
    return taken


def _delete_order(order_id):
    with transactional("Failed to delete order during compensation"):
        order = db.session.get(Order, order_id)
        if order is not None:
            db.session.delete(order)


def _restock(product_id, quantity):
    with transactional("Failed to restock during compensation"):
        inventory.restock(product_id, quantity)


def _flag_for_review(order_ids, reason):
    for order_id in order_ids:
        try:
            with transactional("Failed to flag order for review"):
                order = db.session.get(Order, order_id)
                if order is not None:
                    order.needs_review = True
                    order.review_reason = reason
        except Exception:
            logger.error("Order %s needs review but could not be flagged: %s", order_id, reason)


def _clear_cart(user_id) -> bool:
    try:
        with transactional("Failed to clear cart after checkout"):
            CartItem.query.filter_by(user_id=user_id).delete()
        return True
    except Exception:
        return False


def _notify_sellers(orders):
    from app.tasks.notifications import notify_seller_new_order_task

    for order in orders:
        try:
            if current_app.config.get("TESTING"):
                notify_seller_new_order_task(order.id)
            else:
                notify_seller_new_order_task.delay(order.id)
        except Exception as e:
            logger.error("Failed to queue seller notification for order %s: %s", order.id, e)


# --- checkout ---

def _compensate(saga: CompensationStack, reason: str) -> List[int]:
    failures = saga.unwind()
    if not failures:
        return []
    COMPENSATION_FAILURES.inc(len(failures))
    stranded = sorted({f.step.ref for f in failures if f.step.ref is not None})
    _flag_for_review(stranded, reason)
    return stranded


def place_orders(user, delivery_address, phone_number, notes=None) -> CheckoutResult:
    try:
        address, phone = validate_contact(delivery_address, phone_number)
        notes = (notes or "").strip() or None

        lines = cart_service.load_lines(user.id)
        if not lines:
            raise CheckoutValidationError("Cart is empty")

        shortages = find_shortages(lines)
        if shortages:
            raise InsufficientStock(shortages)
    except InsufficientStock:
        CHECKOUT_OUTCOMES.labels("insufficient_stock").inc()
        raise
    except CheckoutValidationError:
        CHECKOUT_OUTCOMES.labels("invalid").inc()
        raise

    cfg = current_app.config
    saga = CompensationStack(
        retries=cfg.get("COMPENSATION_RETRIES", 3),
        delay=cfg.get("COMPENSATION_RETRY_DELAY", 0),
        label=f"checkout buyer={user.id}",
    )
    order_ids = []
    try:
        for seller_id, group in group_by_seller(lines).items():
            with tracer.start_as_current_span("checkout.seller_order") as span:
                span.set_attribute("seller.id", seller_id)
                order_id = _insert_order(user.id, seller_id, group, address, phone, notes)
                order_ids.append(order_id)
                saga.push(f"delete order {order_id}", _delete_order, order_id, ref=order_id)

                _insert_order_items(order_id, group)

                for line in group:
                    if not _take_stock(line):
                        raise _StockMiss(line)
                    saga.push(
                        f"restock product {line.product_id} x{line.quantity}",
                        _restock, line.product_id, line.quantity, ref=order_id,
                    )
    except _StockMiss as miss:
        stranded = _compensate(saga, "checkout rolled back after a concurrent stock change")
        if stranded:
            CHECKOUT_OUTCOMES.labels("needs_review").inc()
            raise CheckoutFailed("Checkout failed and needs manual review", needs_review=stranded)
        CHECKOUT_OUTCOMES.labels("insufficient_stock").inc()
        line = miss.line
        available = inventory.current_stock(line.product_id) or 0
        raise InsufficientStock([Shortage(line.product_id, line.name, line.quantity, available)])
    except Exception as exc:
        logger.error("Checkout failed for buyer %s: %s", user.id, exc)
        stranded = _compensate(saga, f"checkout rolled back after error: {exc}")
        if stranded:
            CHECKOUT_OUTCOMES.labels("needs_review").inc()
            raise CheckoutFailed("Checkout failed and needs manual review", needs_review=stranded) from exc
        CHECKOUT_OUTCOMES.labels("failed").inc()
        raise CheckoutFailed("Failed to place order. Please try again.") from exc

    saga.discard()
    cleared = _clear_cart(user.id)
    if not cleared:
        logger.warning("Cart for buyer %s was not cleared after checkout", user.id)

    orders = Order.query.filter(Order.id.in_(order_ids)).order_by(Order.id.asc()).all()
    CHECKOUT_OUTCOMES.labels("success").inc()
    logger.info({
        "event": "checkout_completed",
        "buyer_id": user.id,
        "order_ids": order_ids,
        "phone_number": phone,
    })
    _notify_sellers(orders)
    return CheckoutResult(orders=orders, cart_cleared=cleared)
