"""create certificate config and school cluster tables"""

from alembic import op
import sqlalchemy as sa

revision = "0001_certificate_configs"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "school_clusters",
        sa.Column("cluster_id", sa.String(64), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
    )
    op.create_table(
        "certificate_configs",
        sa.Column("context_key", sa.String(64), primary_key=True),
        sa.Column("config", sa.JSON(), nullable=False),
        sa.Column(
            "updated_at",
            sa.DateTime(),
            server_default=sa.func.now(),
        ),
    )


def downgrade() -> None:
    op.drop_table("certificate_configs")
    op.drop_table("school_clusters")
