from typing import Any

from gramasathi.utils.db import db_cursor, row_to_dict, rows_to_dicts

EARTH_RADIUS_KM = 6378.1

CAMP_COLUMNS = """
    id::text AS id, title, description, date, longitude, latitude,
    organizer, services, contact, created_by::text AS created_by, created_at
"""


def insert_camp(
    *,
    title: str,
    date,
    longitude: float,
    latitude: float,
    description: str | None = None,
    organizer: str | None = None,
    services: list[str] | None = None,
    contact: str | None = None,
    created_by: str | None = None,
) -> dict[str, Any]:
    sql = f"""
    INSERT INTO health_camps (title, description, date, longitude, latitude,
                              organizer, services, contact, created_by)
    VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s)
    RETURNING {CAMP_COLUMNS}
    """
    with db_cursor() as cur:
        cur.execute(
            sql,
            (
                title,
                description,
                date,
                longitude,
                latitude,
                organizer,
                list(services or []),
                contact,
                created_by,
            ),
        )
        return row_to_dict(cur, cur.fetchone())


def list_camps(
    *,
    start_date=None,
    end_date=None,
    near: tuple[float, float] | None = None,
    radius_km: float | None = None,
) -> list[dict[str, Any]]:
    """
    near is (longitude, latitude). Distance is great-circle (haversine) on a
    sphere of EARTH_RADIUS_KM.
    """
    where, params = [], []
    if start_date is not None:
        where.append("date >= %s")
        params.append(start_date)
    if end_date is not None:
        where.append("date <= %s")
        params.append(end_date)
    if near is not None and radius_km is not None:
        lng, lat = near
        where.append(
            """
            2 * %s * asin(sqrt(least(1.0,
              power(sin(radians(latitude - %s) / 2), 2)
              + cos(radians(%s)) * cos(radians(latitude))
                * power(sin(radians(longitude - %s) / 2), 2)
            ))) <= %s
            """
        )
        params.extend([EARTH_RADIUS_KM, lat, lat, lng, radius_km])
    sql = f"SELECT {CAMP_COLUMNS} FROM health_camps"
    if where:
        sql += " WHERE " + " AND ".join(where)
    sql += " ORDER BY date ASC"
    with db_cursor() as cur:
        cur.execute(sql, tuple(params))
        return rows_to_dicts(cur, cur.fetchall())
