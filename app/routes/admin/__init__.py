from flask import Blueprint, request, jsonify
from app.version import API_PREFIX
from app.utils import auth_required, role_required, transactional, error
from models import db
from models.profile import Profile
from models.order import Order

admin_bp = Blueprint("admin", __name__, url_prefix=f"{API_PREFIX}/admin")


@admin_bp.before_request
@auth_required
@role_required("admin")
def _enforce_admin_role():
    """Ensure the requester is an authenticated admin."""
    return None

@admin_bp.route("/users", methods=["GET"])
def list_users():
    users = Profile.query.order_by(Profile.id.asc()).limit(50).all()
    return jsonify({
        "status": "success",
        "users": [{"id": u.id, "email": u.email, "role": u.role} for u in users],
    }), 200

@admin_bp.route("/orders", methods=["GET"])
def list_orders():
    orders = Order.query.order_by(Order.id.desc()).limit(50).all()
    return jsonify({"status": "success", "orders": [o.to_dict(with_items=False) for o in orders]}), 200

@admin_bp.route("/orders/review", methods=["GET"])
def orders_needing_review():
    orders = Order.query.filter_by(needs_review=True).order_by(Order.id.asc()).all()
    return jsonify({
        "status": "success",
        "orders": [dict(o.to_dict(), review_reason=o.review_reason) for o in orders],
    }), 200

@admin_bp.route("/orders/<int:order_id>/resolve", methods=["POST"])
def resolve_order(order_id):
    order = db.session.get(Order, order_id)
    if not order:
        return error("Order not found", status=404)
    if not order.needs_review:
        return error("Order is not flagged for review", status=400)
    note = (request.get_json(silent=True) or {}).get("note")
    with transactional("Failed to resolve order review"):
        order.needs_review = False
        order.review_reason = f"resolved by {request.user.id}: {note}" if note else None
    return jsonify({"status": "success", "message": "Review resolved"}), 200
