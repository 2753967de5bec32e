from flask import request, jsonify
from app.schemas.product import ProductCreateRequest, ProductUpdateRequest, StockAdjustRequest
from app.services import products as product_service
from app.utils import role_required, transactional
from app.utils.validation import validate_schema
from . import seller_bp


@seller_bp.route("/products", methods=["GET"])
def list_products():
    products = product_service.list_for_seller(request.user.id)
    return jsonify({"status": "success", "products": [p.to_dict() for p in products]}), 200


@seller_bp.route("/products", methods=["POST"])
@role_required("fbo:manage_products")
@validate_schema(ProductCreateRequest)
def create_product():
    data: ProductCreateRequest = request.validated_data
    with transactional("Failed to create product"):
        product = product_service.create_product(request.user.id, data)
    return jsonify({
        "status": "success",
        "message": "Product created successfully",
        "product": product.to_dict(),
    }), 201


@seller_bp.route("/products/<int:product_id>", methods=["GET"])
def get_product(product_id):
    product = product_service.own_product(request.user.id, product_id)
    return jsonify({"status": "success", "product": product.to_dict()}), 200


@seller_bp.route("/products/<int:product_id>", methods=["POST"])
@role_required("fbo:manage_products")
@validate_schema(ProductUpdateRequest)
def update_product(product_id):
    data: ProductUpdateRequest = request.validated_data
    with transactional("Failed to update product"):
        product = product_service.own_product(request.user.id, product_id)
        product_service.update_product(product, data)
    return jsonify({
        "status": "success",
        "message": "Product updated successfully",
        "product": product.to_dict(),
    }), 200


@seller_bp.route("/products/<int:product_id>/toggle", methods=["POST"])
@role_required("fbo:manage_products")
def toggle_product(product_id):
    with transactional("Failed to toggle product"):
        product = product_service.own_product(request.user.id, product_id)
        is_active = product_service.toggle_active(product)
    return jsonify({
        "status": "success",
        "message": "Product activated" if is_active else "Product deactivated",
        "is_active": is_active,
    }), 200


@seller_bp.route("/products/<int:product_id>/stock", methods=["POST"])
@role_required("fbo:manage_products")
@validate_schema(StockAdjustRequest)
def adjust_stock(product_id):
    data: StockAdjustRequest = request.validated_data
    with transactional("Failed to adjust stock"):
        product = product_service.own_product(request.user.id, product_id)
        quantity = product_service.adjust_stock(product, data.delta)
    return jsonify({"status": "success", "message": "Stock updated", "quantity": quantity}), 200


@seller_bp.route("/products/<int:product_id>", methods=["DELETE"])
@role_required("fbo:manage_products")
def delete_product(product_id):
    with transactional("Failed to delete product"):
        product = product_service.own_product(request.user.id, product_id)
        outcome = product_service.delete_product(product)
    message = "Product deleted" if outcome == "deleted" else "Product has orders and was deactivated"
    return jsonify({"status": "success", "message": message, "result": outcome}), 200
