"""002: create listings table

Revision ID: 002
Revises: 001
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE listings (
            id              VARCHAR(64)         PRIMARY KEY,
            title           VARCHAR(200)        NOT NULL,
            address         TEXT                NOT NULL DEFAULT '',
            city            VARCHAR(100)        NOT NULL,
            monthly_price   INT                 NOT NULL,
            owner_id        VARCHAR(64)         NOT NULL,
            latitude        DOUBLE PRECISION,
            longitude       DOUBLE PRECISION,
            amenities       TEXT[]              NOT NULL DEFAULT '{}',
            created_at      TIMESTAMPTZ         NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ         NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_listings_price        CHECK (monthly_price > 0),
            CONSTRAINT ck_listings_latitude     CHECK (latitude IS NULL OR latitude BETWEEN -90 AND 90),
            CONSTRAINT ck_listings_longitude    CHECK (longitude IS NULL OR longitude BETWEEN -180 AND 180),
            CONSTRAINT ck_listings_coords_pair  CHECK ((latitude IS NULL) = (longitude IS NULL))
        );
    """)
    op.execute("CREATE INDEX idx_listings_city_price ON listings (LOWER(city), monthly_price);")
    op.execute("CREATE INDEX idx_listings_created ON listings (created_at DESC, id DESC);")
    op.execute("""
        CREATE TRIGGER trg_listings_updated_at
            BEFORE UPDATE ON listings
            FOR EACH ROW EXECUTE FUNCTION fn_touch_updated_at();
    """)
    op.execute("COMMENT ON TABLE listings IS 'Rooms/PGs offered by owners; prices in whole rupees';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS listings CASCADE;")
