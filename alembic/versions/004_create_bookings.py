"""004: create bookings table

Revision ID: 004
Revises: 003
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "004"
down_revision: Union[str, None] = "003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE bookings (
            id                          VARCHAR(64)     PRIMARY KEY,
            listing_id                  VARCHAR(64)     NOT NULL REFERENCES listings (id),
            tenant_id                   VARCHAR(64)     NOT NULL,
            owner_id                    VARCHAR(64)     NOT NULL,
            negotiation_id              VARCHAR(64)     REFERENCES negotiations (id),
            monthly_rent                INT             NOT NULL,
            security_deposit            INT             NOT NULL,
            move_in_date                DATE            NOT NULL,
            duration_months             INT             NOT NULL,
            status                      VARCHAR(20)     NOT NULL DEFAULT 'pending',
            payment_status              VARCHAR(20)     NOT NULL DEFAULT 'pending',
            payment_method              VARCHAR(20),
            transaction_id              VARCHAR(128),
            tenant_confirmed_payment    BOOLEAN         NOT NULL DEFAULT FALSE,
            owner_confirmed_payment     BOOLEAN         NOT NULL DEFAULT FALSE,
            paid_at                     TIMESTAMPTZ,
            created_at                  TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at                  TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_bookings_rent             CHECK (monthly_rent > 0),
            CONSTRAINT ck_bookings_deposit          CHECK (security_deposit >= 0),
            CONSTRAINT ck_bookings_duration         CHECK (duration_months > 0),
            CONSTRAINT ck_bookings_status           CHECK (
                status IN ('pending', 'confirmed', 'active', 'cancelled', 'completed')
            ),
            CONSTRAINT ck_bookings_payment_status   CHECK (payment_status IN ('pending', 'paid')),
            CONSTRAINT ck_bookings_payment_method   CHECK (
                payment_method IS NULL OR payment_method IN ('online', 'offline')
            ),
            CONSTRAINT ck_bookings_paid_at          CHECK ((payment_status = 'paid') = (paid_at IS NOT NULL))
        );
    """)
    op.execute("CREATE INDEX idx_bookings_tenant ON bookings (tenant_id, created_at DESC, id DESC);")
    op.execute("CREATE INDEX idx_bookings_owner ON bookings (owner_id, created_at DESC, id DESC);")
    # At most one open booking per negotiation
    op.execute("""
        CREATE UNIQUE INDEX uq_bookings_open_negotiation
        ON bookings (negotiation_id)
        WHERE negotiation_id IS NOT NULL AND status IN ('pending', 'confirmed', 'active');
    """)
    op.execute("""
        CREATE TRIGGER trg_bookings_updated_at
            BEFORE UPDATE ON bookings
            FOR EACH ROW EXECUTE FUNCTION fn_touch_updated_at();
    """)
    op.execute("COMMENT ON TABLE bookings IS 'Tenancy bookings; rent and deposit frozen at creation';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS bookings CASCADE;")
