from flask import Blueprint, request, jsonify

from gramasathi.services import campaign_service, donation_service
from gramasathi.services.validation import require_object
from gramasathi.utils.authz import load_current_user, login_required

campaigns = Blueprint("campaigns", __name__)


def _payload():
    """Multipart forms carry image uploads; everything else is JSON."""
    if request.files or request.form:
        return request.form
    return require_object(request.get_json(force=True, silent=True))


# GET /api/campaigns?category=&status=&search=
@campaigns.get("/")
def list_campaigns():
    items = campaign_service.query_campaigns(
        category=request.args.get("category"),
        status=request.args.get("status"),
        search=request.args.get("search"),
    )
    return jsonify({"success": True, "count": len(items), "data": items}), 200


@campaigns.get("/<campaign_id>")
def get_campaign(campaign_id):
    return jsonify(
        {"success": True, "data": campaign_service.campaign_detail(campaign_id)}
    ), 200


# POST /api/campaigns  JSON or multipart with up to 5 "images"
@campaigns.post("/")
@login_required
def create():
    camp = campaign_service.create_campaign(
        _payload(), load_current_user(), files=request.files.getlist("images")
    )
    return jsonify({"success": True, "data": camp}), 201


# PUT /api/campaigns/<id>  { title?, description?, category?, targetAmount?, endDate?,
#                            beneficiaries?, village?, district?, state?, images?, status? }
@campaigns.put("/<campaign_id>")
@login_required
def update(campaign_id):
    camp = campaign_service.update_campaign(
        campaign_id, _payload(), load_current_user()
    )
    return jsonify({"success": True, "data": camp}), 200


# POST /api/campaigns/<id>/donate  { amount, message?, anonymous? }
@campaigns.post("/<campaign_id>/donate")
@login_required
def donate(campaign_id):
    body = _payload()
    camp = donation_service.record_donation(
        campaign_id,
        body.get("amount"),
        load_current_user(),
        message=body.get("message"),
        anonymous=body.get("anonymous", False),
    )
    return jsonify({"success": True, "data": camp}), 200


# POST /api/campaigns/<id>/update  { title, content } + up to 3 "images"
@campaigns.post("/<campaign_id>/update")
@login_required
def post_update(campaign_id):
    body = _payload()
    camp = campaign_service.post_update(
        campaign_id,
        load_current_user(),
        title=body.get("title"),
        content=body.get("content"),
        files=request.files.getlist("images"),
    )
    return jsonify({"success": True, "data": camp}), 200


@campaigns.get("/<campaign_id>/progress")
def campaign_progress(campaign_id):
    return jsonify(
        {"success": True, "data": campaign_service.campaign_progress(campaign_id)}
    ), 200
