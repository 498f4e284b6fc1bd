from gramasathi.utils.db import db_cursor, row_to_dict
from typing import Optional, Dict, Any

USER_COLUMNS = """
    id::text AS id, email::text AS email, name, phone, village, district, state,
    preferred_language, role::text AS role, profile_picture, created_at, updated_at
"""

PROFILE_FIELDS = (
    "name",
    "phone",
    "village",
    "district",
    "state",
    "preferred_language",
)


def get_user_by_email(email: str) -> Optional[Dict[str, Any]]:
    sql = f"SELECT {USER_COLUMNS}, password_hash FROM users WHERE email = %s"
    with db_cursor() as cur:
        cur.execute(sql, (email,))
        return row_to_dict(cur, cur.fetchone())


def get_user_by_id(user_id: str) -> Optional[Dict[str, Any]]:
    sql = f"SELECT {USER_COLUMNS} FROM users WHERE id = %s"
    with db_cursor() as cur:
        cur.execute(sql, (user_id,))
        return row_to_dict(cur, cur.fetchone())


def get_password_hash(user_id: str) -> Optional[str]:
    with db_cursor() as cur:
        cur.execute("SELECT password_hash FROM users WHERE id = %s", (user_id,))
        row = cur.fetchone()
        return row[0] if row else None


def create_user(
    *,
    email: str,
    password_hash: str,
    name: str,
    phone: Optional[str] = None,
    village: Optional[str] = None,
    district: Optional[str] = None,
    state: Optional[str] = None,
    preferred_language: Optional[str] = None,
    role: str = "user",
) -> Dict[str, Any]:
    sql = f"""
    INSERT INTO users (email, password_hash, name, phone, village, district, state,
                       preferred_language, role)
    VALUES (%s, %s, %s, %s, %s, %s, %s, COALESCE(%s, 'en'), %s)
    RETURNING {USER_COLUMNS}
    """
    with db_cursor() as cur:
        cur.execute(
            sql,
            (
                email,
                password_hash,
                name,
                phone,
                village,
                district,
                state,
                preferred_language,
                role,
            ),
        )
        return row_to_dict(cur, cur.fetchone())


def update_profile(user_id: str, **fields) -> Optional[Dict[str, Any]]:
    sets, params = [], []
    for key in PROFILE_FIELDS:
        if fields.get(key) is not None:
            sets.append(f"{key} = %s")
            params.append(fields[key])
    if not sets:
        return get_user_by_id(user_id)
    sets.append("updated_at = now()")
    params.append(user_id)
    sql = f"UPDATE users SET {', '.join(sets)} WHERE id = %s RETURNING {USER_COLUMNS}"
    with db_cursor() as cur:
        cur.execute(sql, tuple(params))
        return row_to_dict(cur, cur.fetchone())


def set_profile_picture(user_id: str, url: str) -> Optional[Dict[str, Any]]:
    sql = f"""
    UPDATE users SET profile_picture = %s, updated_at = now()
    WHERE id = %s
    RETURNING {USER_COLUMNS}
    """
    with db_cursor() as cur:
        cur.execute(sql, (url, user_id))
        return row_to_dict(cur, cur.fetchone())


def update_password_hash(user_id: str, password_hash: str) -> bool:
    with db_cursor() as cur:
        cur.execute(
            "UPDATE users SET password_hash = %s, updated_at = now() WHERE id = %s",
            (password_hash, user_id),
        )
        return cur.rowcount > 0

