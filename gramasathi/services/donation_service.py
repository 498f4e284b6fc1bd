from typing import Any, Dict, Mapping, Optional

from flask import current_app

from gramasathi.errors import ValidationError
from gramasathi.metrics import DONATION_AMOUNT, DONATIONS
from gramasathi.models import campaign as campaign_model
from gramasathi.realtime import broadcast
from gramasathi.services.campaign_service import campaign_detail, load_campaign
from gramasathi.services.validation import (
    CampaignStatus,
    parse_amount,
    parse_bool,
    parse_text,
)
from gramasathi.utils import cache

MAX_MESSAGE_LENGTH = 500
PROGRESS_FIELDS = (
    "targetAmount",
    "raisedAmount",
    "progressPercentage",
    "daysRemaining",
    "donorCount",
    "status",
)


def record_donation(
    campaign_id: str,
    amount: Any,
    acting_user: Mapping,
    message: Optional[str] = None,
    anonymous: Any = False,
) -> Dict[str, Any]:
    """
    Append a donor entry and bump the campaign totals. The increment and the
    completed-status transition happen in the store as one UPDATE, never as a
    read-modify-write here.
    """
    current = load_campaign(campaign_id)

    try:
        amount = parse_amount(amount)
    except ValueError as e:
        raise ValidationError(f"Amount {e}", {"amount": f"amount {e}"})

    try:
        message = parse_text(message)
    except ValueError as e:
        raise ValidationError(f"Message {e}", {"message": f"message {e}"})
    if message and len(message) > MAX_MESSAGE_LENGTH:
        raise ValidationError(
            "Message too long",
            {"message": f"message must be at most {MAX_MESSAGE_LENGTH} characters"},
        )

    if current["status"] == CampaignStatus.CANCELLED.value:
        raise ValidationError("Campaign is not accepting donations")

    result = campaign_model.record_donation(
        campaign_id,
        donor_id=acting_user["id"],
        amount=amount,
        message=message,
        anonymous=parse_bool(anonymous),
    )
    if result is None:
        # cancelled between the read above and the write; load_campaign raises
        # NotFound if it disappeared instead
        load_campaign(campaign_id)
        raise ValidationError("Campaign is not accepting donations")

    DONATIONS.labels(category=current["category"]).inc()
    DONATION_AMOUNT.labels(category=current["category"]).inc(float(amount))
    if result["status"] != current["status"]:
        current_app.logger.info(
            "campaign %s reached its target (%s/%s)",
            campaign_id,
            result["raised_amount"],
            result["target_amount"],
        )

    cache.invalidate(cache.progress_key(campaign_id))
    detail = campaign_detail(campaign_id)
    progress = {"campaignId": detail["id"], **{k: detail[k] for k in PROGRESS_FIELDS}}
    broadcast("donation", campaign_id, progress)
    return detail

