from flask import request, jsonify
from models import db
from models.order import Order, ORDER_STATUSES
from app.schemas.product import OrderStatusRequest
from app.services.fulfillment import (
    OrderValidationError,
    update_status_by_seller,
    cancel_order_by_seller,
)
from app.utils import role_required, transactional, error
from app.utils.validation import validate_schema
from . import seller_bp


def _error_for(e: OrderValidationError):
    status = 403 if "Unauthorized" in e.message else e.status
    return error(e.message, status=status)


@seller_bp.route("/orders", methods=["GET"])
def get_orders():
    query = Order.query.filter_by(seller_id=request.user.id)
    status = request.args.get("status")
    if status and status != "all":
        if status not in ORDER_STATUSES:
            return error("Invalid status", status=400)
        query = query.filter_by(status=status)
    orders = query.order_by(Order.created_at.desc(), Order.id.desc()).all()
    result = []
    for order in orders:
        data = order.to_dict()
        buyer = order.buyer
        data["customer"] = {
            "full_name": buyer.full_name if buyer else None,
            "email": buyer.email if buyer else None,
        }
        result.append(data)
    return jsonify({"status": "success", "orders": result}), 200


def _load(order_id):
    order = db.session.get(Order, order_id)
    if not order:
        return None, error("Order not found", status=404)
    if order.seller_id != request.user.id:
        return None, error("Unauthorized", status=403)
    return order, None


@seller_bp.route("/orders/<int:order_id>/status", methods=["POST"])
@role_required("fbo:update_order_status")
@validate_schema(OrderStatusRequest)
def update_order_status(order_id):
    data: OrderStatusRequest = request.validated_data
    order, err = _load(order_id)
    if err:
        return err
    try:
        with transactional("Failed to update order status"):
            update_status_by_seller(request.user, order, data.status, data.pickup_time)
    except OrderValidationError as e:
        return _error_for(e)
    return jsonify({
        "status": "success",
        "message": f"Order marked as {data.status}",
        "order": order.to_dict(),
    }), 200


@seller_bp.route("/orders/<int:order_id>/cancel", methods=["POST"])
@role_required("fbo:cancel_order_seller")
def cancel_order(order_id):
    order, err = _load(order_id)
    if err:
        return err
    try:
        with transactional("Failed to cancel order"):
            cancel_order_by_seller(request.user, order)
    except OrderValidationError as e:
        return _error_for(e)
    return jsonify({"status": "success", "message": "Order cancelled"}), 200
