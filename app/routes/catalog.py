from flask import Blueprint, request, jsonify
from app.version import API_PREFIX
from app.services import catalog
from models.product import CATEGORIES

catalog_bp = Blueprint("catalog", __name__, url_prefix=f"{API_PREFIX}/products")


@catalog_bp.route("", methods=["GET"])
def list_products():
    """Browse listable products
    ---
    tags: [Catalog]
    parameters:
      - {name: category, in: query, type: string}
      - {name: search, in: query, type: string}
      - {name: sort, in: query, type: string, enum: [price_low, price_high, expiry, newest]}
    responses:
      200: {description: Active, unexpired products}
    """
    category = request.args.get("category") or None
    if category and category not in CATEGORIES:
        return jsonify({"status": "success", "products": [], "count": 0}), 200
    products = catalog.list_products(
        category=category,
        search=request.args.get("search"),
        sort=request.args.get("sort"),
    )
    return jsonify({
        "status": "success",
        "products": [p.to_dict(with_seller=True) for p in products],
        "count": len(products),
    }), 200


@catalog_bp.route("/categories", methods=["GET"])
def list_categories():
    return jsonify({"status": "success", "categories": catalog.categories()}), 200


@catalog_bp.route("/<int:product_id>", methods=["GET"])
def product_detail(product_id):
    return jsonify({"status": "success", "product": catalog.product_detail(product_id)}), 200
