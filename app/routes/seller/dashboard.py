from flask import request, jsonify
from app.services.dashboard import seller_stats
from . import seller_bp


@seller_bp.route("/dashboard", methods=["GET"])
def dashboard():
    return jsonify({"status": "success", "stats": seller_stats(request.user.id)}), 200
