from decimal import Decimal
from typing import Any

from gramasathi.utils.db import db_cursor, row_to_dict, rows_to_dicts

CAMPAIGN_SELECT = """
SELECT
  c.id::text AS id,
  c.organizer_id::text AS organizer_id,
  c.title, c.description,
  c.category::text AS category,
  c.target_amount, c.raised_amount,
  c.start_date, c.end_date,
  c.village, c.district, c.state,
  c.beneficiaries, c.images,
  c.status::text AS status,
  c.created_at, c.updated_at,
  u.name AS organizer_name,
  u.email::text AS organizer_email,
  u.profile_picture AS organizer_picture,
  (SELECT COUNT(*) FROM campaign_donors d WHERE d.campaign_id = c.id)::int AS donor_count
FROM campaigns c
JOIN users u ON u.id = c.organizer_id
"""

# columns an organizer may change through update_campaign
EDITABLE_COLUMNS = (
    "title",
    "description",
    "category",
    "target_amount",
    "end_date",
    "village",
    "district",
    "state",
    "beneficiaries",
    "images",
)


def _like_pattern(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def insert_campaign(
    *,
    organizer_id: str,
    title: str,
    description: str,
    category: str,
    target_amount: Decimal,
    start_date,
    end_date,
    beneficiaries: int,
    village: str | None = None,
    district: str | None = None,
    state: str | None = None,
    images: list[str] | None = None,
) -> dict[str, Any]:
    sql = """
    INSERT INTO campaigns (
        organizer_id, title, description, category, target_amount,
        start_date, end_date, village, district, state, beneficiaries, images
    )
    VALUES (%s, %s, %s, %s, %s, COALESCE(%s, now()), %s, %s, %s, %s, %s, %s)
    RETURNING id::text
    """
    with db_cursor() as cur:
        cur.execute(
            sql,
            (
                organizer_id,
                title,
                description,
                category,
                target_amount,
                start_date,
                end_date,
                village,
                district,
                state,
                beneficiaries,
                list(images or []),
            ),
        )
        campaign_id = cur.fetchone()[0]
    return get_campaign(campaign_id)


def get_campaign(campaign_id: str) -> dict[str, Any] | None:
    with db_cursor() as cur:
        cur.execute(CAMPAIGN_SELECT + " WHERE c.id = %s", (campaign_id,))
        return row_to_dict(cur, cur.fetchone())


def list_campaigns(
    *,
    category: str | None = None,
    status: str | None = None,
    search: str | None = None,
    organizer_id: str | None = None,
) -> list[dict[str, Any]]:
    where, params = [], []
    if category:
        where.append("c.category = %s")
        params.append(category)
    if status:
        where.append("c.status = %s")
        params.append(status)
    if search:
        pattern = _like_pattern(search)
        where.append("(c.title ILIKE %s OR c.description ILIKE %s)")
        params.extend([pattern, pattern])
    if organizer_id:
        where.append("c.organizer_id = %s")
        params.append(organizer_id)
    sql = CAMPAIGN_SELECT
    if where:
        sql += " WHERE " + " AND ".join(where)
    sql += " ORDER BY c.created_at DESC"
    with db_cursor() as cur:
        cur.execute(sql, tuple(params))
        return rows_to_dicts(cur, cur.fetchall())


def update_campaign(
    campaign_id: str, fields: dict[str, Any], *, new_status: str | None = None
) -> dict[str, Any] | None:
    """
    Apply the given editable columns. The status column is recomputed in the
    same statement: an explicit new_status only applies to an active campaign,
    and an active campaign whose raised amount now covers the target completes.
    """
    sets = []
    params: dict[str, Any] = {"id": campaign_id, "new_status": new_status}
    for key in EDITABLE_COLUMNS:
        if key in fields:
            sets.append(f"{key} = %({key})s")
            params[key] = fields[key]
    params["target"] = fields.get("target_amount")
    sets.append(
        """status = CASE
            WHEN status = 'active' AND %(new_status)s::campaign_status IS NOT NULL
              THEN %(new_status)s::campaign_status
            WHEN status = 'active'
                 AND raised_amount >= COALESCE(%(target)s::numeric, target_amount)
              THEN 'completed'::campaign_status
            ELSE status
          END"""
    )
    sets.append("updated_at = now()")
    sql = f"UPDATE campaigns SET {', '.join(sets)} WHERE id = %(id)s RETURNING id::text"
    with db_cursor() as cur:
        cur.execute(sql, params)
        row = cur.fetchone()
    if not row:
        return None
    return get_campaign(row[0])


def record_donation(
    campaign_id: str,
    *,
    donor_id: str,
    amount: Decimal,
    message: str | None = None,
    anonymous: bool = False,
) -> dict[str, Any] | None:
    """
    Add amount to raised_amount and complete the campaign once the target is
    covered, in a single UPDATE, then append the donor entry in the same
    transaction. The UPDATE holds the row lock until commit, so concurrent
    donations serialize on it instead of overwriting each other.

    Returns None when the campaign is missing or cancelled.
    """
    bump = """
    UPDATE campaigns
    SET raised_amount = raised_amount + %(amount)s,
        status = CASE
          WHEN status = 'active' AND raised_amount + %(amount)s >= target_amount
            THEN 'completed'::campaign_status
          ELSE status
        END,
        updated_at = now()
    WHERE id = %(id)s AND status <> 'cancelled'
    RETURNING id::text, raised_amount, target_amount, status::text AS status
    """
    entry = """
    INSERT INTO campaign_donors (campaign_id, user_id, amount, message, anonymous)
    VALUES (%s, %s, %s, %s, %s)
    RETURNING id::text AS id, user_id::text AS donor_id, amount, message, anonymous,
              created_at
    """
    with db_cursor() as cur:
        cur.execute(bump, {"amount": amount, "id": campaign_id})
        totals = row_to_dict(cur, cur.fetchone())
        if totals is None:
            return None
        cur.execute(entry, (campaign_id, donor_id, amount, message, anonymous))
        donor = row_to_dict(cur, cur.fetchone())
    return {**totals, "donor": donor}


def list_donors(campaign_id: str) -> list[dict[str, Any]]:
    sql = """
    SELECT d.id::text AS id, d.user_id::text AS donor_id, d.amount, d.message,
           d.anonymous, d.created_at, u.name AS donor_name,
           u.profile_picture AS donor_picture
    FROM campaign_donors d
    LEFT JOIN users u ON u.id = d.user_id
    WHERE d.campaign_id = %s
    ORDER BY d.created_at ASC, d.id
    """
    with db_cursor() as cur:
        cur.execute(sql, (campaign_id,))
        return rows_to_dicts(cur, cur.fetchall())


def insert_update(
    campaign_id: str,
    *,
    author_id: str,
    title: str,
    content: str,
    images: list[str] | None = None,
) -> dict[str, Any]:
    sql = """
    INSERT INTO campaign_updates (campaign_id, author_user_id, title, content, images)
    VALUES (%s, %s, %s, %s, %s)
    RETURNING id::text AS id, title, content, images, created_at
    """
    with db_cursor() as cur:
        cur.execute(sql, (campaign_id, author_id, title, content, list(images or [])))
        row = row_to_dict(cur, cur.fetchone())
        cur.execute(
            "UPDATE campaigns SET updated_at = now() WHERE id = %s", (campaign_id,)
        )
        return row


def list_updates(campaign_id: str) -> list[dict[str, Any]]:
    sql = """
    SELECT id::text AS id, title, content, images, created_at
    FROM campaign_updates
    WHERE campaign_id = %s
    ORDER BY created_at ASC, id
    """
    with db_cursor() as cur:
        cur.execute(sql, (campaign_id,))
        return rows_to_dicts(cur, cur.fetchall())


def list_donations_by_user(user_id: str) -> list[dict[str, Any]]:
    sql = """
    SELECT c.id::text AS campaign_id, c.title, c.description, c.images,
           c.status::text AS status, d.id::text AS id, d.amount, d.message,
           d.anonymous, d.created_at
    FROM campaign_donors d
    JOIN campaigns c ON c.id = d.campaign_id
    WHERE d.user_id = %s
    ORDER BY c.created_at DESC, d.created_at ASC
    """
    with db_cursor() as cur:
        cur.execute(sql, (user_id,))
        return rows_to_dicts(cur, cur.fetchall())
