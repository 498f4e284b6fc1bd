"""health camps

Revision ID: 0003_health_camps
Revises: 0002_campaigns
Create Date: 2025-03-08

"""

from alembic import op

revision = "0003_health_camps"
down_revision = "0002_campaigns"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.execute(
        """
    CREATE TABLE IF NOT EXISTS health_camps (
      id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
      title TEXT NOT NULL,
      description TEXT NULL,
      date TIMESTAMPTZ NOT NULL,
      longitude DOUBLE PRECISION NOT NULL CHECK (longitude BETWEEN -180 AND 180),
      latitude DOUBLE PRECISION NOT NULL CHECK (latitude BETWEEN -90 AND 90),
      organizer TEXT NULL,
      services TEXT[] NOT NULL DEFAULT '{}',
      contact TEXT NULL,
      created_by UUID NULL REFERENCES users(id) ON DELETE SET NULL,
      created_at TIMESTAMPTZ NOT NULL DEFAULT now()
    );
    CREATE INDEX IF NOT EXISTS idx_health_camps_date ON health_camps(date);
    """
    )


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS health_camps;")
