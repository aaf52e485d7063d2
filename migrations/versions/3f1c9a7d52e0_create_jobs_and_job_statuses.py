"""create jobs and job_statuses tables

Revision ID: 3f1c9a7d52e0
Revises:
Create Date: 2026-10-19 09:12:40.118204

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "3f1c9a7d52e0"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


JOB_STATUSES = ["queued", "running", "succeeded", "failed", "canceled"]


def upgrade() -> None:
    """Upgrade schema."""
    job_statuses = op.create_table(
        "job_statuses",
        sa.Column("id", sa.SmallInteger, primary_key=True),
        sa.Column("status", sa.Text, nullable=False, unique=True),
    )
    op.bulk_insert(
        job_statuses,
        [{"id": i, "status": s} for i, s in enumerate(JOB_STATUSES, start=1)],
    )

    op.create_table(
        "jobs",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column(
            "idempotency_key",
            sa.String(200),
            nullable=True,
            comment="Caller-supplied idempotency key",
        ),
        sa.Column(
            "job_status_id",
            sa.SmallInteger,
            sa.ForeignKey("job_statuses.id"),
            nullable=False,
        ),
        sa.Column(
            "payload", sa.JSON, nullable=False, comment="Caller-supplied job parameters"
        ),
        sa.Column("result", sa.JSON, nullable=True, comment="Job result data"),
        sa.Column("error", sa.JSON, nullable=True, comment="Job error details"),
        # Timestamps
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column("updated_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("finished_at", sa.TIMESTAMP(timezone=True), nullable=True),
        # NULL keys never collide, so key-less jobs are unconstrained
        sa.UniqueConstraint("idempotency_key", name="uq_jobs_idempotency_key"),
    )

    op.create_index("ix_jobs_created_at", "jobs", ["created_at"])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("ix_jobs_created_at", table_name="jobs")
    op.drop_table("jobs")
    op.drop_table("job_statuses")
