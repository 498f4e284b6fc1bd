from flask import Blueprint, request, jsonify

from gramasathi.services.camp_service import create_camp, search_camps
from gramasathi.services.validation import require_object
from gramasathi.utils.authz import load_current_user, login_required

camps_bp = Blueprint("camps", __name__)


# GET /api/camps?startDate=&endDate=&lat=&lng=&radius=(km)
@camps_bp.get("/")
def list_camps():
    items = search_camps(request.args)
    return jsonify({"success": True, "count": len(items), "data": items}), 200


@camps_bp.post("/")
@login_required
def create():
    data = require_object(request.get_json(force=True, silent=True))
    camp = create_camp(data, created_by=load_current_user()["id"])
    return jsonify({"success": True, "data": camp}), 201
