"""003: create negotiations table

Revision ID: 003
Revises: 002
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE negotiations (
            id                  VARCHAR(64)     PRIMARY KEY,
            listing_id          VARCHAR(64)     NOT NULL REFERENCES listings (id),
            tenant_id           VARCHAR(64)     NOT NULL,
            owner_id            VARCHAR(64)     NOT NULL,
            original_price      INT             NOT NULL,
            proposed_price      INT             NOT NULL,
            duration_months     INT             NOT NULL DEFAULT 1,
            status              VARCHAR(20)     NOT NULL DEFAULT 'proposed',
            counter_offer       INT,
            final_price         INT,
            message             TEXT,
            owner_response      TEXT,
            created_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            expires_at          TIMESTAMPTZ,
            response_date       TIMESTAMPTZ,
            updated_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_negotiations_parties      CHECK (tenant_id <> owner_id),
            CONSTRAINT ck_negotiations_original     CHECK (original_price > 0),
            CONSTRAINT ck_negotiations_proposed     CHECK (proposed_price > 0),
            CONSTRAINT ck_negotiations_counter      CHECK (counter_offer IS NULL OR counter_offer > 0),
            CONSTRAINT ck_negotiations_duration     CHECK (duration_months > 0),
            CONSTRAINT ck_negotiations_status       CHECK (
                status IN ('proposed', 'countered', 'accepted', 'rejected', 'expired')
            ),
            CONSTRAINT ck_negotiations_final_iff_accepted CHECK (
                (status = 'accepted') = (final_price IS NOT NULL)
            )
        );
    """)
    op.execute("CREATE INDEX idx_negotiations_tenant ON negotiations (tenant_id, created_at DESC, id DESC);")
    op.execute("CREATE INDEX idx_negotiations_owner ON negotiations (owner_id, created_at DESC, id DESC);")
    op.execute("""
        CREATE INDEX idx_negotiations_open_expiry
        ON negotiations (expires_at)
        WHERE status IN ('proposed', 'countered');
    """)
    op.execute("""
        CREATE TRIGGER trg_negotiations_updated_at
            BEFORE UPDATE ON negotiations
            FOR EACH ROW EXECUTE FUNCTION fn_touch_updated_at();
    """)
    op.execute("COMMENT ON TABLE negotiations IS 'Tenant/owner price negotiation on a listing';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS negotiations CASCADE;")
