from typing import Any, Dict, List, Mapping, Optional

from gramasathi.errors import ValidationError
from gramasathi.models import health_camp as camp_model
from gramasathi.services.validation import parse_datetime, text_fields


def _float(value: Any, name: str, low: float, high: float) -> float:
    if isinstance(value, bool):
        raise ValueError(f"{name} must be a number")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be a number")
    if not low <= number <= high:
        raise ValueError(f"{name} must be between {low} and {high}")
    return number


def serialize_camp(row: Mapping) -> Dict[str, Any]:
    return {
        "id": row["id"],
        "title": row["title"],
        "description": row.get("description"),
        "date": row["date"].isoformat(),
        "location": {
            "type": "Point",
            "coordinates": [row["longitude"], row["latitude"]],
        },
        "organizer": row.get("organizer"),
        "services": list(row.get("services") or []),
        "contact": row.get("contact"),
        "createdAt": row["created_at"].isoformat() if row.get("created_at") else None,
    }


def search_camps(args: Mapping) -> List[Dict[str, Any]]:
    errors = {}
    filters: Dict[str, Any] = {}
    for wire, key in (("startDate", "start_date"), ("endDate", "end_date")):
        if args.get(wire):
            try:
                filters[key] = parse_datetime(args.get(wire))
            except ValueError as e:
                errors[wire] = f"{wire} {e}"

    if args.get("lat") and args.get("lng") and args.get("radius"):
        try:
            lat = _float(args.get("lat"), "lat", -90, 90)
            lng = _float(args.get("lng"), "lng", -180, 180)
            filters["near"] = (lng, lat)
            filters["radius_km"] = _float(args.get("radius"), "radius", 0, 20037.5)
        except ValueError as e:
            errors["location"] = str(e)

    if errors:
        raise ValidationError("Invalid filter", errors)
    return [serialize_camp(r) for r in camp_model.list_camps(**filters)]


def create_camp(data: Mapping, created_by: Optional[str]) -> Dict[str, Any]:
    errors: Dict[str, str] = {}
    texts = text_fields(data, ("title", "description", "organizer", "contact"), errors)
    if not texts["title"]:
        errors.setdefault("title", "Title is required")

    date = None
    try:
        date = parse_datetime(data.get("date"))
    except ValueError as e:
        errors["date"] = f"date {e}"

    location = data.get("location") or {}
    coords = data.get("coordinates") or (
        location.get("coordinates") if isinstance(location, Mapping) else None
    )
    lng = lat = None
    if not isinstance(coords, (list, tuple)) or len(coords) != 2:
        errors["coordinates"] = "coordinates must be [longitude, latitude]"
    else:
        try:
            lng = _float(coords[0], "longitude", -180, 180)
            lat = _float(coords[1], "latitude", -90, 90)
        except ValueError as e:
            errors["coordinates"] = str(e)

    services = data.get("services") or []
    if not isinstance(services, list) or not all(isinstance(s, str) for s in services):
        errors["services"] = "services must be a list of strings"

    if errors:
        raise ValidationError("Validation failed", errors)

    row = camp_model.insert_camp(
        title=texts["title"],
        description=texts["description"],
        date=date,
        longitude=lng,
        latitude=lat,
        organizer=texts["organizer"],
        services=[s.strip() for s in services if s.strip()],
        contact=texts["contact"],
        created_by=created_by,
    )
    return serialize_camp(row)
