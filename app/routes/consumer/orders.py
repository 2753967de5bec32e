from flask import request, jsonify, current_app
from flask_limiter.util import get_remote_address
from extensions import limiter
from models import db
from models.order import Order
from app.schemas.checkout import CheckoutRequest
from app.services import checkout as checkout_service
from app.services.fulfillment import OrderValidationError, cancel_order_by_buyer
from app.utils import transactional, error, role_required
from app.utils.validation import validate_schema
from . import consumer_bp


@consumer_bp.route("/checkout", methods=["POST"])
@limiter.limit(
    lambda: current_app.config["ORDER_LIMIT_PER_IP"],
    key_func=get_remote_address,
    error_message="Too many orders from this IP",
)
@role_required("consumer:checkout")
@validate_schema(CheckoutRequest)
def checkout():
    """Place the cart as one order per seller
    ---
    tags: [Consumer]
    parameters:
      - in: body
        name: body
        schema:
          type: object
          required: [delivery_address, phone_number]
          properties:
            delivery_address: {type: string}
            phone_number: {type: string}
            notes: {type: string}
    responses:
      201: {description: Orders created and cart cleared}
      400: {description: Missing contact details or empty cart}
      409: {description: Insufficient stock, see shortages}
      500: {description: Checkout failed, see needs_review}
    """
    data: CheckoutRequest = request.validated_data
    try:
        result = checkout_service.place_orders(
            request.user, data.delivery_address, data.phone_number, data.notes
        )
    except checkout_service.InsufficientStock as e:
        return error(e.message, status=e.status, shortages=[s.to_dict() for s in e.shortages])
    except checkout_service.CheckoutFailed as e:
        extra = {"needs_review": e.needs_review} if e.needs_review else {}
        return error(e.message, status=e.status, **extra)
    except checkout_service.CheckoutError as e:
        return error(e.message, status=e.status)

    orders = [o.to_dict() for o in result.orders]
    return jsonify({
        "status": "success",
        "message": "Order placed successfully",
        "order_ids": [o["order_id"] for o in orders],
        "orders": orders,
        "cart_cleared": result.cart_cleared,
    }), 201


@consumer_bp.route("/orders", methods=["GET"])
def order_history():
    orders = (
        Order.query.filter_by(buyer_id=request.user.id)
        .order_by(Order.created_at.desc(), Order.id.desc())
        .all()
    )
    return jsonify({"status": "success", "orders": [o.to_dict() for o in orders]}), 200


def _own_order(order_id):
    order = db.session.get(Order, order_id)
    if not order or order.buyer_id != request.user.id:
        return None
    return order


@consumer_bp.route("/orders/<int:order_id>", methods=["GET"])
def order_detail(order_id):
    order = _own_order(order_id)
    if not order:
        return error("Order not found", status=404)
    data = order.to_dict()
    data["history"] = [log.to_dict() for log in sorted(order.status_logs, key=lambda entry: entry.id)]
    return jsonify({"status": "success", "order": data}), 200


@consumer_bp.route("/orders/<int:order_id>/cancel", methods=["POST"])
@role_required("consumer:cancel_order")
def cancel_order(order_id):
    order = _own_order(order_id)
    if not order:
        return error("Order not found", status=404)
    try:
        with transactional("Failed to cancel order"):
            cancel_order_by_buyer(request.user, order)
    except OrderValidationError as e:
        return error(e.message, status=e.status)
    return jsonify({"status": "success", "message": "Order cancelled"}), 200
