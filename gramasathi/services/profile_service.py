from typing import Any, Dict, List, Mapping

from gramasathi.errors import NotFound, ValidationError
from gramasathi.models import campaign as campaign_model
from gramasathi.models import user as user_model
from gramasathi.services.auth_service import (
    MIN_PASSWORD_LENGTH,
    hash_password,
    public_user,
    verify_password,
)
from gramasathi.services.campaign_service import serialize_donor
from gramasathi.services.media_service import store_images
from gramasathi.utils.media_validators import MAX_SIZE_PROFILE_IMAGE

# wire name -> column
PROFILE_WIRE_FIELDS = {
    "name": "name",
    "phone": "phone",
    "village": "village",
    "district": "district",
    "state": "state",
    "preferredLanguage": "preferred_language",
}


def update_profile(user: Mapping, data: Mapping) -> Dict[str, Any]:
    # blank values leave the stored field untouched
    changes = {}
    for wire, column in PROFILE_WIRE_FIELDS.items():
        value = data.get(wire)
        if isinstance(value, str) and value.strip():
            changes[column] = value.strip()
    updated = user_model.update_profile(user["id"], **changes)
    if not updated:
        raise NotFound("User not found")
    return public_user(updated)


def upload_picture(user: Mapping, file) -> Dict[str, Any]:
    if file is None or not file.filename:
        raise ValidationError("No file uploaded")
    (url,) = store_images(
        [file],
        folder="profiles",
        owner_id=user["id"],
        max_count=1,
        max_bytes=MAX_SIZE_PROFILE_IMAGE,
    )
    updated = user_model.set_profile_picture(user["id"], url)
    if not updated:
        raise NotFound("User not found")
    return {"profilePicture": url, "user": public_user(updated)}


def my_donations(user: Mapping) -> List[Dict[str, Any]]:
    """The user's own donor entries grouped per campaign, newest campaign first."""
    grouped: Dict[str, Dict[str, Any]] = {}
    for row in campaign_model.list_donations_by_user(user["id"]):
        entry = grouped.get(row["campaign_id"])
        if entry is None:
            images = row.get("images") or []
            entry = grouped[row["campaign_id"]] = {
                "campaignId": row["campaign_id"],
                "title": row["title"],
                "description": row["description"],
                "image": images[0] if images else "",
                "status": row["status"],
                "donations": [],
            }
        donation = serialize_donor(row)
        donation.pop("user")
        entry["donations"].append(donation)
    return list(grouped.values())


def change_password(user: Mapping, data: Mapping) -> None:
    current = data.get("currentPassword") or ""
    new = data.get("newPassword") or ""
    if not verify_password(current, user_model.get_password_hash(user["id"])):
        raise ValidationError("Current password is incorrect")
    if not isinstance(new, str):
        raise ValidationError(
            "Password must be a string", {"newPassword": "must be a string"}
        )
    if len(new) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters",
            {"newPassword": "too short"},
        )
    user_model.update_password_hash(user["id"], hash_password(new))
