"""
Fixtures for the PostgreSQL-backed suite. Set TEST_DATABASE_URL to a scratch
database; every table is truncated between tests.
"""

import os
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[2]
TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL")

if not TEST_DATABASE_URL:
    collect_ignore_glob = ["test_*.py"]


@pytest.fixture(scope="session")
def migrated_db():
    from alembic import command
    from alembic.config import Config

    os.environ["DATABASE_URL"] = TEST_DATABASE_URL
    cfg = Config()
    cfg.set_main_option("script_location", str(ROOT / "alembic"))
    command.upgrade(cfg, "head")
    return TEST_DATABASE_URL


@pytest.fixture
def db(migrated_db):
    from gramasathi.utils.db import db_cursor

    yield
    with db_cursor() as cur:
        cur.execute(
            "TRUNCATE campaign_donors, campaign_updates, campaigns, health_camps, users"
            " CASCADE"
        )


@pytest.fixture
def pg_app(db, monkeypatch):
    from gramasathi import create_app
    from gramasathi.utils import cache, rate_limit
    from tests.conftest import TEST_CONFIG
    from tests.fakes import FakeRedis

    monkeypatch.setattr(cache, "_client", FakeRedis())
    rate_limit.reset()
    return create_app(dict(TEST_CONFIG))
