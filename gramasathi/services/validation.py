"""
Input validation for campaign payloads.

Payloads arrive either as JSON objects or as multipart form fields (all
strings), so every parser accepts both native values and their string forms.
Validation collects every failing field before raising, and always runs before
any database call.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple

from gramasathi.errors import ValidationError

MAX_AMOUNT = Decimal("9999999999.99")
LOCATION_FIELDS = ("village", "district", "state")


class Category(str, Enum):
    ELDERLY = "elderly"
    DISABLED = "disabled"
    CHILDREN = "children"
    WOMEN = "women"
    OTHER = "other"


class CampaignStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


@dataclass
class CampaignDraft:
    title: str
    description: str
    category: Category
    target_amount: Decimal
    end_date: datetime
    beneficiaries: int
    start_date: Optional[datetime] = None
    village: Optional[str] = None
    district: Optional[str] = None
    state: Optional[str] = None
    images: List[str] = field(default_factory=list)


def parse_amount(value: Any, *, minimum: Decimal = Decimal("0.01")) -> Decimal:
    if value is None or isinstance(value, bool) or str(value).strip() == "":
        raise ValueError("must be a number")
    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValueError("must be a number")
    if not amount.is_finite():
        raise ValueError("must be a number")
    if amount < minimum:
        raise ValueError(f"must be at least {minimum}")
    if amount > MAX_AMOUNT:
        raise ValueError(f"must be at most {MAX_AMOUNT}")
    if amount.as_tuple().exponent < -2:
        raise ValueError("must have at most 2 decimal places")
    return amount


def parse_positive_int(value: Any) -> int:
    if value is None or isinstance(value, bool) or str(value).strip() == "":
        raise ValueError("must be a whole number")
    try:
        number = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValueError("must be a whole number")
    if not number.is_finite() or number != number.to_integral_value():
        raise ValueError("must be a whole number")
    if number < 1:
        raise ValueError("must be at least 1")
    return int(number)


def parse_datetime(value: Any) -> datetime:
    """ISO-8601 date or datetime; naive values are taken as UTC."""
    if isinstance(value, datetime):
        parsed = value
    else:
        text = str(value or "").strip()
        if not text:
            raise ValueError("is required")
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            raise ValueError("must be an ISO-8601 date")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() in ("1", "true", "yes", "on")


def parse_choice(value: Any, enum_cls):
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValueError(f"must be one of: {allowed}")


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def parse_text(value: Any) -> Optional[str]:
    """Free-text JSON fields: strings only, blanks become None."""
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError("must be a string")
    return value.strip() or None


def text_fields(
    data: Mapping, keys, errors: Dict[str, str]
) -> Dict[str, Optional[str]]:
    """parse_text over several keys; non-strings are recorded in errors."""
    out: Dict[str, Optional[str]] = {}
    for key in keys:
        try:
            out[key] = parse_text(data.get(key))
        except ValueError as e:
            errors[key] = f"{key} {e}"
            out[key] = None
    return out


def require_object(body: Any) -> Mapping:
    if body is None:
        return {}
    if not isinstance(body, Mapping):
        raise ValidationError("Request body must be a JSON object")
    return body


def location_fields(data: Mapping) -> Dict[str, Optional[str]]:
    """Location may be top-level fields or a nested "location" object."""
    nested = data.get("location")
    out = {}
    for key in LOCATION_FIELDS:
        if isinstance(nested, Mapping) and key in nested:
            out[key] = _text(nested.get(key))
        elif key in data:
            out[key] = _text(data.get(key))
    return out


def validate_campaign_draft(data: Mapping) -> CampaignDraft:
    errors: Dict[str, str] = {}
    values: Dict[str, Any] = {}

    for key in ("title", "description"):
        text = _text(data.get(key))
        if text is None:
            errors[key] = f"{key.capitalize()} is required"
        values[key] = text

    if _text(data.get("category")) is None:
        errors["category"] = "Category is required"
    else:
        try:
            values["category"] = parse_choice(data.get("category"), Category)
        except ValueError as e:
            errors["category"] = f"category {e}"

    parsers = (
        ("targetAmount", "target_amount", lambda v: parse_amount(v, minimum=Decimal(1))),
        ("endDate", "end_date", parse_datetime),
        ("beneficiaries", "beneficiaries", parse_positive_int),
    )
    for wire, attr, parse in parsers:
        try:
            values[attr] = parse(data.get(wire))
        except ValueError as e:
            errors[wire] = f"{wire} {e}"

    if _text(data.get("startDate")) is not None:
        try:
            values["start_date"] = parse_datetime(data.get("startDate"))
        except ValueError as e:
            errors["startDate"] = f"startDate {e}"

    start = values.get("start_date") or datetime.now(timezone.utc)
    if values.get("end_date") and "endDate" not in errors and values["end_date"] < start:
        errors["endDate"] = "endDate must not precede the start date"

    if errors:
        raise ValidationError("Validation failed", errors)

    return CampaignDraft(
        title=values["title"],
        description=values["description"],
        category=values["category"],
        target_amount=values["target_amount"],
        end_date=values["end_date"],
        beneficiaries=values["beneficiaries"],
        start_date=values.get("start_date"),
        **location_fields(data),
    )


def validate_campaign_changes(
    data: Mapping, current: Mapping
) -> Tuple[Dict[str, Any], Optional[CampaignStatus]]:
    """
    Validate a partial update against the stored campaign. Returns the column
    values to write and the requested status, if any.
    """
    errors: Dict[str, str] = {}
    fields: Dict[str, Any] = {}

    for key in ("title", "description"):
        if key in data:
            text = _text(data.get(key))
            if text is None:
                errors[key] = f"{key.capitalize()} cannot be empty"
            fields[key] = text

    if "category" in data:
        try:
            fields["category"] = parse_choice(data.get("category"), Category).value
        except ValueError as e:
            errors["category"] = f"category {e}"

    parsers = (
        ("targetAmount", "target_amount", lambda v: parse_amount(v, minimum=Decimal(1))),
        ("endDate", "end_date", parse_datetime),
        ("beneficiaries", "beneficiaries", parse_positive_int),
    )
    for wire, attr, parse in parsers:
        if wire in data:
            try:
                fields[attr] = parse(data.get(wire))
            except ValueError as e:
                errors[wire] = f"{wire} {e}"

    if "end_date" in fields and fields["end_date"] < current["start_date"]:
        errors["endDate"] = "endDate must not precede the start date"

    fields.update(location_fields(data))

    if "images" in data:
        images = data.get("images")
        if not isinstance(images, list) or not all(isinstance(i, str) for i in images):
            errors["images"] = "images must be a list of image references"
        else:
            fields["images"] = images

    new_status = None
    if "status" in data:
        try:
            requested = parse_choice(data.get("status"), CampaignStatus)
        except ValueError as e:
            errors["status"] = f"status {e}"
        else:
            if requested.value != current["status"]:
                if (
                    requested is not CampaignStatus.CANCELLED
                    or current["status"] != CampaignStatus.ACTIVE.value
                ):
                    errors["status"] = (
                        f"cannot change status from {current['status']} to {requested.value}"
                    )
                else:
                    new_status = requested

    if errors:
        raise ValidationError("Validation failed", errors)
    return fields, new_status
