from flask import request, jsonify
from app.services import favorites as favorites_service
from app.schemas.cart import ProductRefRequest
from app.utils import transactional, error, role_required
from app.utils.validation import validate_schema
from . import consumer_bp


@consumer_bp.route("/favorites/toggle", methods=["POST"])
@role_required("consumer:manage_favorites")
@validate_schema(ProductRefRequest)
def toggle_favorite():
    data: ProductRefRequest = request.validated_data
    with transactional("Failed to toggle favorite"):
        is_favorite = favorites_service.toggle(request.user.id, data.product_id)
    return jsonify({
        "status": "success",
        "message": "Added to favorites" if is_favorite else "Removed from favorites",
        "is_favorite": is_favorite,
    }), 200


@consumer_bp.route("/favorites", methods=["GET"])
@role_required("consumer:manage_favorites")
def list_favorites():
    favs = favorites_service.list_for(request.user.id)
    return jsonify({
        "status": "success",
        "favorites": [
            {
                "id": f.id,
                "product": f.product.to_dict(with_seller=True),
                "available": f.product.is_listable(),
                "created_at": f.created_at.isoformat() if f.created_at else None,
            }
            for f in favs
        ],
    }), 200


@consumer_bp.route("/favorites/remove", methods=["POST"])
@role_required("consumer:manage_favorites")
@validate_schema(ProductRefRequest)
def remove_favorite():
    data: ProductRefRequest = request.validated_data
    with transactional("Failed to remove favorite"):
        removed = favorites_service.remove(request.user.id, data.product_id)
    if not removed:
        return error("Favorite not found", status=404)
    return jsonify({"status": "success", "message": "Removed from favorites"}), 200
