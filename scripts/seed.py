#!/usr/bin/env python3
"""
Seed database with demo data.

Usage: poetry run python scripts/seed.py [--force]
Requires: migrations applied (poetry run alembic upgrade head)
"""
import os
import sys

# Ensure the package is on path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import bcrypt
from gramasathi.utils.db import db_cursor

DEMO_EMAIL = "demo@example.com"
ADMIN_EMAIL = "admin@example.com"


def _hash(pw: str) -> str:
    return bcrypt.hashpw(pw.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def seed():
    with db_cursor() as cur:
        cur.execute("SELECT COUNT(*) FROM users WHERE email = %s", (DEMO_EMAIL,))
        if cur.fetchone()[0] > 0:
            print("Already seeded (demo@example.com exists). Use --force to re-seed.")
            return

        # 1. Demo organizer + admin
        cur.execute(
            """
            INSERT INTO users (email, password_hash, name, village, district, state)
            VALUES (%s, %s, 'Demo Organizer', 'Rampur', 'Varanasi', 'Uttar Pradesh')
            RETURNING id
            """,
            (DEMO_EMAIL, _hash("demo123456")),
        )
        user_id = cur.fetchone()[0]
        cur.execute(
            """
            INSERT INTO users (email, password_hash, name, role)
            VALUES (%s, %s, 'Admin', 'admin')
            ON CONFLICT (email) DO NOTHING
            """,
            (ADMIN_EMAIL, _hash("admin123456")),
        )

        # 2. Campaigns
        cur.execute(
            """
            INSERT INTO campaigns (organizer_id, title, description, category,
                                   target_amount, end_date, village, district, state,
                                   beneficiaries)
            VALUES
                (%s, 'Winter blankets for elders', 'Warm blankets for 40 elders in Rampur',
                 'elderly', 20000, now() + interval '30 days',
                 'Rampur', 'Varanasi', 'Uttar Pradesh', 40),
                (%s, 'Wheelchairs for the village', 'Two wheelchairs for the health sub-centre',
                 'disabled', 15000, now() + interval '45 days',
                 'Rampur', 'Varanasi', 'Uttar Pradesh', 2),
                (%s, 'School bags and books', 'Supplies for the primary school',
                 'children', 8000, now() + interval '20 days',
                 'Rampur', 'Varanasi', 'Uttar Pradesh', 60)
            RETURNING id
            """,
            (user_id, user_id, user_id),
        )
        campaign_ids = [r[0] for r in cur.fetchall()]

        # 3. Donations on the first campaign; totals kept in step with the entries
        amounts = (2500, 5000, 1000)
        for amount in amounts:
            cur.execute(
                """
                INSERT INTO campaign_donors (campaign_id, user_id, amount, message)
                VALUES (%s, %s, %s, 'Jai ho!')
                """,
                (campaign_ids[0], user_id, amount),
            )
        cur.execute(
            "UPDATE campaigns SET raised_amount = %s WHERE id = %s",
            (sum(amounts), campaign_ids[0]),
        )

        # 4. Health camp
        cur.execute(
            """
            INSERT INTO health_camps (title, description, date, longitude, latitude,
                                      organizer, services, created_by)
            VALUES ('Free eye check-up camp', 'Cataract screening',
                    now() + interval '7 days', 82.9739, 25.3176, 'District Hospital',
                    ARRAY['eye check-up', 'free spectacles'], %s)
            """,
            (user_id,),
        )

    print("Seeded successfully.")
    print("  Demo user: demo@example.com / demo123456")
    print("  Admin: admin@example.com / admin123456")
    print("  Campaigns: 3 (elderly, disabled, children)")
    print("  Donations: 3 on first campaign")


def force_seed():
    """Clear demo data and re-seed. Use with caution."""
    with db_cursor() as cur:
        cur.execute(
            "DELETE FROM health_camps WHERE created_by IN (SELECT id FROM users WHERE email = %s)",
            (DEMO_EMAIL,),
        )
        # donor and update entries go with their campaign
        cur.execute(
            "DELETE FROM campaigns WHERE organizer_id IN (SELECT id FROM users WHERE email = %s)",
            (DEMO_EMAIL,),
        )
        cur.execute(
            "DELETE FROM users WHERE email IN (%s, %s)", (DEMO_EMAIL, ADMIN_EMAIL)
        )
    print("Cleared demo data. Seeding...")
    seed()


if __name__ == "__main__":
    if "--force" in sys.argv:
        force_seed()
    else:
        seed()
