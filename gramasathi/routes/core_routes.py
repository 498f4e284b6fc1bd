from flask import Blueprint, jsonify

core = Blueprint("core", __name__)


@core.get("/")
def root():
    return "GramaSathi API is running", 200, {"Content-Type": "text/plain; charset=utf-8"}


@core.get("/__ping")
def ping():
    return jsonify({"ok": True}), 200


@core.get("/api")
def api_index():
    return jsonify(
        {
            "endpoints": {
                "auth": [
                    "/api/auth/register (POST)",
                    "/api/auth/login (POST)",
                    "/api/auth/refresh (POST)",
                    "/api/auth/me (GET)",
                ],
                "campaigns": [
                    "/api/campaigns (GET, POST)",
                    "/api/campaigns/<id> (GET, PUT)",
                    "/api/campaigns/<id>/donate (POST)",
                    "/api/campaigns/<id>/update (POST)",
                    "/api/campaigns/<id>/progress (GET)",
                ],
                "profile": [
                    "/api/profile (PUT)",
                    "/api/profile/upload-picture (POST)",
                    "/api/profile/my-campaigns (GET)",
                    "/api/profile/my-donations (GET)",
                    "/api/profile/change-password (PUT)",
                ],
                "camps": ["/api/camps (GET, POST)"],
            }
        }
    )
