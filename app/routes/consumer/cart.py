from flask import request, jsonify
from sqlalchemy.exc import IntegrityError
from app.services import cart as cart_service
from app.schemas.cart import CartAddRequest, CartUpdateRequest, CartItemRequest
from app.utils import transactional, role_required
from app.utils.validation import validate_schema
from . import consumer_bp


@consumer_bp.route("/cart/add", methods=["POST"])
@role_required("consumer:manage_cart")
@validate_schema(CartAddRequest)
def add_to_cart():
    data: CartAddRequest = request.validated_data
    try:
        with transactional("Failed to add to cart"):
            item = cart_service.add_item(request.user.id, data.product_id, data.quantity)
    except IntegrityError:
        # A concurrent first add created the row; add on top of it
        with transactional("Failed to add to cart"):
            item = cart_service.add_item(request.user.id, data.product_id, data.quantity)
    return jsonify({
        "status": "success",
        "message": "Item added to cart",
        "item_id": item.id,
        "quantity": item.quantity,
    }), 200


@consumer_bp.route("/cart/update", methods=["POST"])
@role_required("consumer:manage_cart")
@validate_schema(CartUpdateRequest)
def update_cart_quantity():
    data: CartUpdateRequest = request.validated_data
    with transactional("Failed to update cart quantity"):
        cart_service.update_item(request.user.id, data.item_id, data.quantity)
    return jsonify({"status": "success", "message": "Cart quantity updated"}), 200


@consumer_bp.route("/cart/view", methods=["GET"])
@role_required("consumer:manage_cart")
def view_cart():
    lines = cart_service.load_lines(request.user.id)
    sellers = cart_service.seller_names({line.seller_id for line in lines})
    cart_data = [
        {
            "id": line.item_id,
            "product_id": line.product_id,
            "name": line.name,
            "available": line.available,
            "stock": line.stock,
            "discounted_price": float(line.unit_price),
            "original_price": float(line.original_price),
            "savings": float(line.savings),
            "quantity": line.quantity,
            "subtotal": float(line.subtotal),
            "seller_id": line.seller_id,
            "seller_name": sellers.get(line.seller_id),
        }
        for line in lines
    ]
    return jsonify({
        "status": "success",
        "cart": cart_data,
        **cart_service.summarize(lines),
    }), 200


@consumer_bp.route("/cart/remove", methods=["POST"])
@role_required("consumer:manage_cart")
@validate_schema(CartItemRequest)
def remove_item():
    data: CartItemRequest = request.validated_data
    with transactional("Failed to remove cart item"):
        cart_service.remove_item(request.user.id, data.item_id)
    return jsonify({"status": "success", "message": "Item removed"}), 200


@consumer_bp.route("/cart/clear", methods=["POST"])
@role_required("consumer:manage_cart")
def clear_cart():
    with transactional("Failed to clear cart"):
        cart_service.clear(request.user.id)
    return jsonify({"status": "success", "message": "Cart cleared"}), 200
