from flask import Blueprint, request, jsonify, current_app
from flask_limiter.util import get_remote_address
from extensions import limiter
from app.version import API_PREFIX
from app.schemas.auth import LoginRequest, RefreshRequest, RegisterRequest
from app.services.accounts import get_user_profile, login_user, register_user
from app.utils import (
    auth_required,
    create_access_token,
    create_refresh_token,
    current_user,
    decode_token,
    error,
    ok,
    TokenError,
    validate_schema,
)


auth_bp = Blueprint("auth", __name__, url_prefix=f"{API_PREFIX}/auth")


def _session_payload(user):
    return {
        "status": "success",
        "access_token": create_access_token(user.uid, user.role),
        "refresh_token": create_refresh_token(user.uid),
        "expires_in": current_app.config["ACCESS_TOKEN_LIFETIME_MIN"] * 60,
        "user": user.to_dict(),
    }


@auth_bp.route("/register", methods=["POST"])
@limiter.limit(
    lambda: current_app.config["REGISTER_LIMIT_PER_IP"],
    key_func=get_remote_address,
    error_message="Too many registrations from this IP",
)
@validate_schema(RegisterRequest)
def register():
    """Create a customer or seller account.
    ---
    tags: [Auth]
    responses:
      201: {description: Account created, tokens issued}
      409: {description: Email already registered}
    """
    data = request.validated_data
    user = register_user(data.email, data.password, data.role)
    return jsonify(_session_payload(user)), 201


@auth_bp.route("/login", methods=["POST"])
@limiter.limit(
    lambda: current_app.config["LOGIN_LIMIT_PER_IP"],
    key_func=get_remote_address,
    error_message="Too many logins from this IP",
)
@validate_schema(LoginRequest)
def login():
    """Sign in with email and password.
    ---
    tags: [Auth]
    responses:
      200: {description: Tokens issued}
      401: {description: Incorrect email or password}
    """
    data = request.validated_data
    user = login_user(data.email, data.password)
    return jsonify(_session_payload(user)), 200


@auth_bp.route("/logout", methods=["POST"])
def logout():
    auth = request.headers.get("Authorization", "")
    if not auth.startswith("Bearer "):
        return error("Token missing", status=401)
    try:
        decode_token(auth.split(" ", 1)[1])
    except TokenError as e:
        return error(str(e), status=401)
    return jsonify({"status": "success", "message": "Logged out"}), 200


@auth_bp.route("/refresh", methods=["POST"])
@validate_schema(RefreshRequest)
def refresh_tokens():
    try:
        payload = decode_token(request.validated_data.refresh_token, expected_type="refresh")
    except TokenError as e:
        return error(str(e), status=401)

    user = get_user_profile(payload.get("sub"))
    if not user:
        return error("Account not found", status=401)
    if user.is_disabled:
        return error("Account has been disabled", status=403)
    return jsonify(_session_payload(user)), 200


@auth_bp.route("/me", methods=["GET"])
@auth_required
def me():
    return ok(current_user().to_dict())
