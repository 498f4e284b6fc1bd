from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required, get_jwt_identity, get_jwt, create_access_token

from gramasathi.services.auth_service import login_user, public_user, signup_user
from gramasathi.services.validation import require_object
from gramasathi.utils.authz import load_current_user, login_required
from gramasathi.utils.rate_limit import rate_limited

auth_bp = Blueprint("auth", __name__)


@auth_bp.post("/register")
@rate_limited("RATE_LIMIT_AUTH_PER_MINUTE", "auth")
def register():
    data = require_object(request.get_json(force=True, silent=True))
    resp = signup_user(data)
    return jsonify({"success": True, **resp}), 201


@auth_bp.post("/login")
@rate_limited("RATE_LIMIT_AUTH_PER_MINUTE", "auth")
def login():
    data = require_object(request.get_json(force=True, silent=True))
    resp = login_user(data)
    return jsonify({"success": True, **resp}), 200


@auth_bp.post("/refresh")
@jwt_required(refresh=True)
def refresh():
    role = get_jwt().get("role")
    new_access = create_access_token(
        identity=get_jwt_identity(), additional_claims={"role": role}
    )
    return jsonify({"success": True, "accessToken": new_access}), 200


@auth_bp.get("/me")
@login_required
def me():
    return jsonify({"success": True, "user": public_user(load_current_user())}), 200
