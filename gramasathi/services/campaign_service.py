import math
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List, Mapping, Optional
from uuid import UUID

from flask import current_app

from gramasathi.errors import NotFound, ValidationError
from gramasathi.models import campaign as campaign_model
from gramasathi.realtime import broadcast
from gramasathi.services.media_service import store_images
from gramasathi.services.validation import (
    CampaignStatus,
    Category,
    parse_choice,
    text_fields,
    validate_campaign_changes,
    validate_campaign_draft,
)
from gramasathi.utils import cache
from gramasathi.utils.authz import ensure_can_manage_campaign
from gramasathi.utils.media_validators import MAX_SIZE_CAMPAIGN_IMAGE

SECONDS_PER_DAY = 24 * 60 * 60
MAX_CAMPAIGN_IMAGES = 5
MAX_UPDATE_IMAGES = 3


def _is_uuid(v: str) -> bool:
    try:
        UUID(str(v))
        return True
    except ValueError:
        return False


def _number(value) -> float | int:
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    return value


def _iso(value) -> Optional[str]:
    return value.isoformat() if isinstance(value, datetime) else value


def progress_percentage(raised, target) -> int:
    """min(round(raised / target * 100), 100), rounding halves up."""
    raised, target = Decimal(str(raised)), Decimal(str(target))
    if target <= 0:
        return 100
    pct = (raised / target * 100).quantize(Decimal(1), rounding=ROUND_HALF_UP)
    return max(0, min(int(pct), 100))


def days_remaining(end_date: datetime, now: Optional[datetime] = None) -> int:
    now = now or datetime.now(timezone.utc)
    seconds = (end_date - now).total_seconds()
    return max(0, math.ceil(seconds / SECONDS_PER_DAY))


def serialize_donor(row: Mapping) -> Dict[str, Any]:
    """Anonymous entries never expose who gave, whoever is asking."""
    anonymous = bool(row.get("anonymous"))
    donor = None
    if not anonymous and row.get("donor_id"):
        donor = {
            "id": row["donor_id"],
            "name": row.get("donor_name"),
            "profilePicture": row.get("donor_picture"),
        }
    return {
        "id": row["id"],
        "user": donor,
        "amount": _number(row["amount"]),
        "message": row.get("message"),
        "anonymous": anonymous,
        "date": _iso(row.get("created_at")),
    }


def serialize_update(row: Mapping) -> Dict[str, Any]:
    return {
        "id": row["id"],
        "title": row["title"],
        "content": row["content"],
        "images": list(row.get("images") or []),
        "date": _iso(row.get("created_at")),
    }


def serialize_campaign(
    row: Mapping,
    donors: Optional[List[Mapping]] = None,
    updates: Optional[List[Mapping]] = None,
) -> Dict[str, Any]:
    out = {
        "id": row["id"],
        "title": row["title"],
        "description": row["description"],
        "category": row["category"],
        "targetAmount": _number(row["target_amount"]),
        "raisedAmount": _number(row["raised_amount"]),
        "startDate": _iso(row["start_date"]),
        "endDate": _iso(row["end_date"]),
        "location": {
            "village": row.get("village"),
            "district": row.get("district"),
            "state": row.get("state"),
        },
        "organizer": {
            "id": row["organizer_id"],
            "name": row.get("organizer_name"),
            "email": row.get("organizer_email"),
            "profilePicture": row.get("organizer_picture"),
        },
        "beneficiaries": row["beneficiaries"],
        "images": list(row.get("images") or []),
        "status": row["status"],
        "donorCount": row.get("donor_count", 0),
        "progressPercentage": progress_percentage(
            row["raised_amount"], row["target_amount"]
        ),
        "daysRemaining": days_remaining(row["end_date"]),
        "createdAt": _iso(row.get("created_at")),
        "updatedAt": _iso(row.get("updated_at")),
    }
    if donors is not None:
        out["donors"] = [serialize_donor(d) for d in donors]
    if updates is not None:
        out["updates"] = [serialize_update(u) for u in updates]
    return out


def progress_snapshot(row: Mapping) -> Dict[str, Any]:
    return {
        "campaignId": row["id"],
        "targetAmount": _number(row["target_amount"]),
        "raisedAmount": _number(row["raised_amount"]),
        "progressPercentage": progress_percentage(
            row["raised_amount"], row["target_amount"]
        ),
        "daysRemaining": days_remaining(row["end_date"]),
        "donorCount": row.get("donor_count", 0),
        "status": row["status"],
    }


def load_campaign(campaign_id: str) -> Dict[str, Any]:
    if not _is_uuid(campaign_id):
        raise NotFound("Campaign not found")
    row = campaign_model.get_campaign(campaign_id)
    if not row:
        raise NotFound("Campaign not found")
    return row


def campaign_detail(campaign_id: str) -> Dict[str, Any]:
    row = load_campaign(campaign_id)
    return serialize_campaign(
        row,
        donors=campaign_model.list_donors(campaign_id),
        updates=campaign_model.list_updates(campaign_id),
    )


def query_campaigns(
    category: Optional[str] = None,
    status: Optional[str] = None,
    search: Optional[str] = None,
) -> List[Dict[str, Any]]:
    errors = {}
    filters: Dict[str, Any] = {}
    if category:
        try:
            filters["category"] = parse_choice(category, Category).value
        except ValueError as e:
            errors["category"] = f"category {e}"
    if status:
        try:
            filters["status"] = parse_choice(status, CampaignStatus).value
        except ValueError as e:
            errors["status"] = f"status {e}"
    if errors:
        raise ValidationError("Invalid filter", errors)
    search = (search or "").strip()
    if search:
        filters["search"] = search
    rows = campaign_model.list_campaigns(**filters)
    return [serialize_campaign(r) for r in rows]


def campaigns_for_organizer(user_id: str) -> List[Dict[str, Any]]:
    return [
        serialize_campaign(r)
        for r in campaign_model.list_campaigns(organizer_id=user_id)
    ]


def _log_orphaned(urls: List[str]) -> None:
    if urls:
        current_app.logger.error(
            "store write failed, orphaned uploads: %s", ", ".join(urls)
        )


def create_campaign(data: Mapping, organizer: Mapping, files=None) -> Dict[str, Any]:
    draft = validate_campaign_draft(data)
    draft.images = store_images(
        files,
        folder="charity",
        owner_id=organizer["id"],
        max_count=MAX_CAMPAIGN_IMAGES,
        max_bytes=MAX_SIZE_CAMPAIGN_IMAGE,
    )
    try:
        row = campaign_model.insert_campaign(
            organizer_id=organizer["id"],
            title=draft.title,
            description=draft.description,
            category=draft.category.value,
            target_amount=draft.target_amount,
            start_date=draft.start_date,
            end_date=draft.end_date,
            beneficiaries=draft.beneficiaries,
            village=draft.village,
            district=draft.district,
            state=draft.state,
            images=draft.images,
        )
    except Exception:
        _log_orphaned(draft.images)
        raise
    current_app.logger.info("campaign %s created by %s", row["id"], organizer["id"])
    return serialize_campaign(row, donors=[], updates=[])


def update_campaign(
    campaign_id: str, data: Mapping, acting_user: Mapping
) -> Dict[str, Any]:
    current = load_campaign(campaign_id)
    ensure_can_manage_campaign(acting_user, current)
    fields, new_status = validate_campaign_changes(data, current)
    row = campaign_model.update_campaign(
        campaign_id, fields, new_status=new_status.value if new_status else None
    )
    if not row:
        raise NotFound("Campaign not found")
    cache.invalidate(cache.progress_key(campaign_id))
    return serialize_campaign(
        row,
        donors=campaign_model.list_donors(campaign_id),
        updates=campaign_model.list_updates(campaign_id),
    )


def post_update(
    campaign_id: str,
    acting_user: Mapping,
    *,
    title: Optional[str],
    content: Optional[str],
    files=None,
) -> Dict[str, Any]:
    current = load_campaign(campaign_id)
    ensure_can_manage_campaign(acting_user, current)
    errors: Dict[str, str] = {}
    texts = text_fields(
        {"title": title, "content": content}, ("title", "content"), errors
    )
    title, content = texts["title"], texts["content"]
    if not title:
        errors.setdefault("title", "Title is required")
    if not content:
        errors.setdefault("content", "Content is required")
    if errors:
        raise ValidationError("Validation failed", errors)

    images = store_images(
        files,
        folder="charity",
        owner_id=campaign_id,
        max_count=MAX_UPDATE_IMAGES,
        max_bytes=MAX_SIZE_CAMPAIGN_IMAGE,
    )
    try:
        entry = campaign_model.insert_update(
            campaign_id,
            author_id=acting_user["id"],
            title=title,
            content=content,
            images=images,
        )
    except Exception:
        _log_orphaned(images)
        raise
    broadcast("campaign_update", campaign_id, serialize_update(entry))
    return campaign_detail(campaign_id)


def campaign_progress(campaign_id: str) -> Dict[str, Any]:
    if not _is_uuid(campaign_id):
        raise NotFound("Campaign not found")
    key = cache.progress_key(campaign_id)
    cached = cache.get_json(key)
    if cached:
        return cached
    snapshot = progress_snapshot(load_campaign(campaign_id))
    cache.set_json(key, snapshot, current_app.config["PROGRESS_CACHE_SECONDS"])
    return snapshot
