"""charity campaigns with owned donor and update entries

Revision ID: 0002_campaigns
Revises: 0001_users
Create Date: 2025-03-01

"""

from alembic import op

revision = "0002_campaigns"
down_revision = "0001_users"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.execute(
        """
    DO $$
    BEGIN
      IF NOT EXISTS (SELECT 1 FROM pg_type WHERE typname = 'campaign_status') THEN
        CREATE TYPE campaign_status AS ENUM ('active','completed','cancelled');
      END IF;
      IF NOT EXISTS (SELECT 1 FROM pg_type WHERE typname = 'campaign_category') THEN
        CREATE TYPE campaign_category AS ENUM ('elderly','disabled','children','women','other');
      END IF;
    END$$;

    CREATE TABLE IF NOT EXISTS campaigns (
      id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
      organizer_id UUID NOT NULL REFERENCES users(id),
      title TEXT NOT NULL,
      description TEXT NOT NULL,
      category campaign_category NOT NULL,
      target_amount NUMERIC(12,2) NOT NULL CHECK (target_amount >= 1),
      raised_amount NUMERIC(12,2) NOT NULL DEFAULT 0 CHECK (raised_amount >= 0),
      start_date TIMESTAMPTZ NOT NULL DEFAULT now(),
      end_date TIMESTAMPTZ NOT NULL,
      village TEXT NULL,
      district TEXT NULL,
      state TEXT NULL,
      beneficiaries INTEGER NOT NULL CHECK (beneficiaries >= 1),
      images TEXT[] NOT NULL DEFAULT '{}',
      status campaign_status NOT NULL DEFAULT 'active',
      created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
      updated_at TIMESTAMPTZ NOT NULL DEFAULT now()
    );
    CREATE INDEX IF NOT EXISTS idx_campaigns_created ON campaigns(created_at DESC);
    CREATE INDEX IF NOT EXISTS idx_campaigns_category_status ON campaigns(category, status);
    CREATE INDEX IF NOT EXISTS idx_campaigns_organizer ON campaigns(organizer_id);

    CREATE TABLE IF NOT EXISTS campaign_donors (
      id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
      campaign_id UUID NOT NULL REFERENCES campaigns(id) ON DELETE CASCADE,
      user_id UUID NULL REFERENCES users(id) ON DELETE SET NULL,
      amount NUMERIC(12,2) NOT NULL CHECK (amount > 0),
      message TEXT NULL,
      anonymous BOOLEAN NOT NULL DEFAULT false,
      created_at TIMESTAMPTZ NOT NULL DEFAULT now()
    );
    CREATE INDEX IF NOT EXISTS idx_campaign_donors_campaign
      ON campaign_donors(campaign_id, created_at);
    CREATE INDEX IF NOT EXISTS idx_campaign_donors_user ON campaign_donors(user_id);

    CREATE TABLE IF NOT EXISTS campaign_updates (
      id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
      campaign_id UUID NOT NULL REFERENCES campaigns(id) ON DELETE CASCADE,
      author_user_id UUID NULL REFERENCES users(id) ON DELETE SET NULL,
      title TEXT NOT NULL,
      content TEXT NOT NULL,
      images TEXT[] NOT NULL DEFAULT '{}',
      created_at TIMESTAMPTZ NOT NULL DEFAULT now()
    );
    CREATE INDEX IF NOT EXISTS idx_campaign_updates_campaign
      ON campaign_updates(campaign_id, created_at);
    """
    )


def downgrade() -> None:
    op.execute(
        """
    DROP TABLE IF EXISTS campaign_updates;
    DROP TABLE IF EXISTS campaign_donors;
    DROP TABLE IF EXISTS campaigns;
    DO $$
    BEGIN
      IF EXISTS (SELECT 1 FROM pg_type WHERE typname = 'campaign_category') THEN
        DROP TYPE campaign_category;
      END IF;
      IF EXISTS (SELECT 1 FROM pg_type WHERE typname = 'campaign_status') THEN
        DROP TYPE campaign_status;
      END IF;
    END$$;
    """
    )
