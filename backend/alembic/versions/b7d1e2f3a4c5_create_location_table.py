"""create_location_table

Revision ID: b7d1e2f3a4c5
Revises:
Create Date: 2026-10-19 09:12:40.518203

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'b7d1e2f3a4c5'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "location",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("name", sa.String(length=255), nullable=True),
        sa.Column("address", sa.String(length=512), nullable=False, server_default=""),
        sa.Column("lat", sa.Float(), nullable=True),
        sa.Column("lng", sa.Float(), nullable=True),
        sa.Column("stage", sa.String(length=32), nullable=False, server_default="survey"),
        sa.Column("marker", sa.JSON(), nullable=True),
        sa.Column("businesses", sa.JSON(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_location_position", "location", ["position"])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("ix_location_position", table_name="location", if_exists=True)
    op.drop_table("location", if_exists=True)
