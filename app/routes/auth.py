from flask import Blueprint, request, jsonify, current_app
from flask_limiter.util import get_remote_address
from extensions import limiter
from app.version import API_PREFIX
from app.services import accounts
from app.services import session as session_service
from app.schemas.auth import SignUpRequest, SignInRequest, RefreshRequest, ChangePasswordRequest
from app.utils.validation import validate_schema
from app.utils import (
    auth_required,
    error,
    create_access_token,
    create_refresh_token,
    decode_token,
    TokenError,
)
from models import db
from models.profile import Profile
import logging


auth_bp = Blueprint("auth", __name__, url_prefix=API_PREFIX)


def _token_payload(profile: Profile):
    return {
        "access_token": create_access_token(profile.id, profile.role),
        "refresh_token": create_refresh_token(profile.id),
        "expires_in": current_app.config["ACCESS_TOKEN_LIFETIME_MIN"] * 60,
    }


@auth_bp.route("/auth/signup", methods=["POST"])
@limiter.limit(
    lambda: current_app.config["SIGNUP_LIMIT_PER_IP"],
    key_func=get_remote_address,
    error_message="Too many sign ups from this IP",
)
@validate_schema(SignUpRequest)
def signup():
    """Create an account
    ---
    tags: [Auth]
    responses:
      201: {description: Account created, tokens issued}
      400: {description: Validation error}
      409: {description: Email already registered}
    """
    data: SignUpRequest = request.validated_data
    try:
        profile = accounts.sign_up(data)
    except accounts.AccountError as e:
        return error(e.message, status=e.status)
    logging.info({"event": "signup", "user_id": profile.id, "role": profile.role, "email": profile.email})
    return jsonify({
        "status": "success",
        "message": "Account created successfully",
        "profile": profile.to_dict(),
        **_token_payload(profile),
    }), 201


@auth_bp.route("/auth/signin", methods=["POST"])
@limiter.limit(
    lambda: current_app.config["LOGIN_LIMIT_PER_IP"],
    key_func=get_remote_address,
    error_message="Too many logins from this IP",
)
@validate_schema(SignInRequest)
def signin():
    data: SignInRequest = request.validated_data
    try:
        profile = accounts.sign_in(data.email, data.password)
    except accounts.AccountError as e:
        return error(e.message, status=e.status)
    return jsonify({
        "status": "success",
        "message": "Signed in successfully",
        "role": profile.role,
        **_token_payload(profile),
    }), 200


@auth_bp.route("/auth/refresh", methods=["POST"])
@validate_schema(RefreshRequest)
def refresh_tokens():
    data: RefreshRequest = request.validated_data
    try:
        payload = decode_token(data.refresh_token, expected_type="refresh")
    except TokenError as e:
        return error(str(e), status=401)

    profile = db.session.get(Profile, payload["user_id"])
    if not profile:
        return error("User not found", status=401)
    return jsonify(_token_payload(profile)), 200


@auth_bp.route("/auth/signout", methods=["POST"])
def signout():
    auth = request.headers.get("Authorization", "")
    if not auth.startswith("Bearer "):
        return error("Token missing", status=401)
    try:
        decode_token(auth.split(" ", 1)[1])
    except TokenError as e:
        return error(str(e), status=401)
    return jsonify({"status": "success", "message": "Signed out"}), 200


@auth_bp.route("/auth/password", methods=["POST"])
@auth_required
@validate_schema(ChangePasswordRequest)
def change_password():
    data: ChangePasswordRequest = request.validated_data
    try:
        accounts.change_password(request.user.id, data.current_password, data.new_password)
    except accounts.AccountError as e:
        return error(e.message, status=e.status)
    return jsonify({"status": "success", "message": "Password updated"}), 200


@auth_bp.route("/session", methods=["GET"])
@auth_required
def current_session():
    ctx = session_service.build(request.user)
    return jsonify({"status": "success", "session": ctx.to_dict()}), 200
