"""users table with closed role enum

Revision ID: 0001_users
Revises:
Create Date: 2025-03-01

"""

from alembic import op

revision = "0001_users"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.execute(
        """
    CREATE EXTENSION IF NOT EXISTS "pgcrypto";
    CREATE EXTENSION IF NOT EXISTS "citext";

    DO $$
    BEGIN
      IF NOT EXISTS (SELECT 1 FROM pg_type WHERE typname = 'user_role') THEN
        CREATE TYPE user_role AS ENUM ('user','admin');
      END IF;
    END$$;

    CREATE TABLE IF NOT EXISTS users (
      id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
      email CITEXT NOT NULL UNIQUE,
      password_hash TEXT NOT NULL,
      name TEXT NOT NULL,
      phone TEXT NULL,
      village TEXT NULL,
      district TEXT NULL,
      state TEXT NULL,
      preferred_language TEXT NOT NULL DEFAULT 'en',
      role user_role NOT NULL DEFAULT 'user',
      profile_picture TEXT NULL,
      created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
      updated_at TIMESTAMPTZ NOT NULL DEFAULT now()
    );
    """
    )


def downgrade() -> None:
    op.execute(
        """
    DROP TABLE IF EXISTS users;
    DO $$
    BEGIN
      IF EXISTS (SELECT 1 FROM pg_type WHERE typname = 'user_role') THEN
        DROP TYPE user_role;
      END IF;
    END$$;
    """
    )
