from flask import Blueprint, request, jsonify
from app.version import API_PREFIX
from app.schemas.profile import ProfileUpdateRequest
from app.services import accounts
from app.utils import auth_required, transactional
from app.utils.validation import validate_schema

profile_bp = Blueprint("profile", __name__, url_prefix=f"{API_PREFIX}/profile")


@profile_bp.route("/me", methods=["GET"])
@auth_required
def me():
    return jsonify({"status": "success", "profile": request.user.to_dict()}), 200


@profile_bp.route("/edit", methods=["POST"])
@auth_required
@validate_schema(ProfileUpdateRequest)
def edit_profile():
    data: ProfileUpdateRequest = request.validated_data
    with transactional("Failed to update profile"):
        profile = accounts.update_profile(request.user, data)
    return jsonify({
        "status": "success",
        "message": "Profile updated successfully",
        "profile": profile.to_dict(),
    }), 200
