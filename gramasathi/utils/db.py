from contextlib import contextmanager
import psycopg2
import os
from dotenv import load_dotenv

load_dotenv()


def get_db_connection():
    """
    Connect to PostgreSQL. Uses DATABASE_URL if set (e.g. for a managed instance);
    otherwise falls back to DB_HOST, DB_NAME, DB_USER, DB_PASSWORD, DB_PORT.
    """
    url = os.getenv("DATABASE_URL")
    if url:
        return psycopg2.connect(url)
    return psycopg2.connect(
        host=os.getenv("DB_HOST", "127.0.0.1"),
        database=os.getenv("DB_NAME", "gramasathi_dev"),
        user=os.getenv("DB_USER", "dev"),
        password=os.getenv("DB_PASSWORD", "dev"),
        port=os.getenv("DB_PORT", "65432"),
    )


def rows_to_dicts(cur, rows) -> list[dict]:
    cols = [c[0] for c in cur.description]
    return [dict(zip(cols, r)) for r in rows]


def row_to_dict(cur, row) -> dict | None:
    if not row:
        return None
    cols = [c[0] for c in cur.description]
    return dict(zip(cols, row))


@contextmanager
def db_cursor():
    """
    Yield a cursor inside one transaction: committed when the block exits
    cleanly, rolled back on error. The connection is always closed.
    """
    conn = get_db_connection()
    try:
        with conn, conn.cursor() as cur:
            yield cur
    finally:
        conn.close()
