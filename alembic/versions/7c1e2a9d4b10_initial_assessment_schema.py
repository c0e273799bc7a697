"""initial assessment schema

Revision ID: 7c1e2a9d4b10
Revises:
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "7c1e2a9d4b10"
down_revision = None
branch_labels = None
depends_on = None


JSONType = sa.JSON().with_variant(postgresql.JSONB(), "postgresql")


def _timestamps() -> list:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("auth_id", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("full_name", sa.String(length=255), nullable=True),
        sa.Column("band", sa.String(length=50), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_users_auth_id", "users", ["auth_id"], unique=True)

    op.create_table(
        "teams",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "assessment_attempts",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.Uuid(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("assessment_id", sa.String(length=255), nullable=False),
        sa.Column("role", sa.String(length=255), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="not_started"),
        sa.Column("total_questions", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("answered_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("progress_percent", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("last_activity_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("submitted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("duration_seconds", sa.Numeric(10, 2), nullable=True),
        sa.Column("average_seconds_per_question", sa.Numeric(10, 2), nullable=True),
        sa.Column("question_timings", JSONType, nullable=True),
        sa.Column("cheating_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("cheating_events", JSONType, nullable=True),
        sa.Column("ai_status", sa.String(length=20), nullable=False, server_default="idle"),
        sa.Column("last_ai_error", sa.Text(), nullable=True),
        sa.Column("ai_model", sa.String(length=100), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_assessment_attempts_user_id", "assessment_attempts", ["user_id"])
    op.create_index("ix_assessment_attempts_user_assessment", "assessment_attempts", ["user_id", "assessment_id"])
    op.create_index("ix_assessment_attempts_user_created", "assessment_attempts", ["user_id", "created_at"])

    op.create_table(
        "assessment_answers",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("assessment_attempt_id", sa.Uuid(), sa.ForeignKey("assessment_attempts.id"), nullable=False),
        sa.Column("question_id", sa.String(length=255), nullable=False),
        sa.Column("user_answer_text", sa.Text(), nullable=True),
        sa.Column("selected_option_id", sa.String(length=255), nullable=True),
        sa.Column("time_spent_seconds", sa.Integer(), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("assessment_attempt_id", "question_id", name="uq_assessment_answers_attempt_question"),
    )
    op.create_index("ix_assessment_answers_assessment_attempt_id", "assessment_answers", ["assessment_attempt_id"])

    op.create_table(
        "assessment_results",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.Uuid(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("assessment_id", sa.String(length=255), nullable=False),
        sa.Column("assessment_attempt_id", sa.Uuid(), sa.ForeignKey("assessment_attempts.id"), nullable=False),
        sa.Column("strengths", JSONType, nullable=True),
        sa.Column("weaknesses", JSONType, nullable=True),
        sa.Column("development_suggestions", JSONType, nullable=True),
        sa.Column("recommended_roles", JSONType, nullable=True),
        sa.Column("skill_scores", JSONType, nullable=True),
        sa.Column("summary", JSONType, nullable=True),
        sa.Column("ai_summary", sa.Text(), nullable=True),
        sa.Column("analysis_model", sa.String(length=100), nullable=True),
        sa.Column("analysis_completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("insight_locale", sa.String(length=10), nullable=True),
        sa.Column("team_fit_id", sa.Uuid(), sa.ForeignKey("teams.id"), nullable=True),
        sa.Column("hr_review_status", sa.String(length=50), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("assessment_attempt_id", name="uq_assessment_results_assessment_attempt_id"),
    )
    op.create_index("ix_assessment_results_user_id", "assessment_results", ["user_id"])


def downgrade() -> None:
    op.drop_index("ix_assessment_results_user_id", table_name="assessment_results")
    op.drop_table("assessment_results")
    op.drop_index("ix_assessment_answers_assessment_attempt_id", table_name="assessment_answers")
    op.drop_table("assessment_answers")
    op.drop_index("ix_assessment_attempts_user_created", table_name="assessment_attempts")
    op.drop_index("ix_assessment_attempts_user_assessment", table_name="assessment_attempts")
    op.drop_index("ix_assessment_attempts_user_id", table_name="assessment_attempts")
    op.drop_table("assessment_attempts")
    op.drop_table("teams")
    op.drop_index("ix_users_auth_id", table_name="users")
    op.drop_table("users")
