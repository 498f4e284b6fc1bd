from flask import Blueprint, request, jsonify

from gramasathi.services import profile_service
from gramasathi.services.campaign_service import campaigns_for_organizer
from gramasathi.services.validation import require_object
from gramasathi.utils.authz import load_current_user, login_required

profile_bp = Blueprint("profile", __name__)


@profile_bp.put("/")
@login_required
def update_profile():
    data = require_object(request.get_json(force=True, silent=True))
    user = profile_service.update_profile(load_current_user(), data)
    return jsonify({"success": True, "user": user}), 200


@profile_bp.post("/upload-picture")
@login_required
def upload_picture():
    resp = profile_service.upload_picture(
        load_current_user(), request.files.get("profilePicture")
    )
    return jsonify({"success": True, **resp}), 200


@profile_bp.get("/my-campaigns")
@login_required
def my_campaigns():
    items = campaigns_for_organizer(load_current_user()["id"])
    return jsonify({"success": True, "count": len(items), "data": items}), 200


@profile_bp.get("/my-donations")
@login_required
def my_donations():
    items = profile_service.my_donations(load_current_user())
    return jsonify({"success": True, "count": len(items), "data": items}), 200


@profile_bp.put("/change-password")
@login_required
def change_password():
    data = require_object(request.get_json(force=True, silent=True))
    profile_service.change_password(load_current_user(), data)
    return jsonify({"success": True, "message": "Password updated successfully"}), 200
