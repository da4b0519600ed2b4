"""Initial forum schema

Revision ID: 3c1f0a7d9b21
Revises:
Create Date: 2026-10-19 09:12:44.518204

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '3c1f0a7d9b21'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade():
    op.create_table(
        "users",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("username", sa.String(30), nullable=False),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("hashed_password", sa.String(), nullable=False),
        sa.Column("bio", sa.String(500), nullable=True),
        sa.Column("avatar", sa.String(), nullable=True),
        sa.Column("reputation", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_users_id", "users", ["id"])
    op.create_index("ix_users_username", "users", ["username"], unique=True)
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    # accepted_solution_id gets its FK once solutions exists
    op.create_table(
        "problems",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("images", sa.JSON(), nullable=False),
        sa.Column("location", sa.JSON(), nullable=True),
        sa.Column("author_id", sa.Integer, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("status", sa.String(10), nullable=False, server_default="open"),
        sa.Column("accepted_solution_id", sa.Integer, nullable=True),
        sa.Column("views", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("status IN ('open', 'solved', 'closed')", name="ck_problems_status"),
    )
    op.create_index("ix_problems_id", "problems", ["id"])
    op.create_index("ix_problems_author_id", "problems", ["author_id"])
    op.create_index("ix_problems_status", "problems", ["status"])
    op.create_index("ix_problems_created_at", "problems", ["created_at"])

    op.create_table(
        "problem_tags",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("problem_id", sa.Integer, sa.ForeignKey("problems.id", ondelete="CASCADE"), nullable=False),
        sa.Column("tag", sa.String(50), nullable=False),
        sa.UniqueConstraint("problem_id", "tag", name="uq_problem_tags_problem_tag"),
    )
    op.create_index("ix_problem_tags_problem_id", "problem_tags", ["problem_id"])
    op.create_index("ix_problem_tags_tag", "problem_tags", ["tag"])

    op.create_table(
        "solutions",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("problem_id", sa.Integer, sa.ForeignKey("problems.id", ondelete="CASCADE"), nullable=False),
        sa.Column("author_id", sa.Integer, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("images", sa.JSON(), nullable=False),
        sa.Column("upvotes", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("downvotes", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("is_accepted", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("upvotes >= 0", name="ck_solutions_upvotes_nonneg"),
        sa.CheckConstraint("downvotes >= 0", name="ck_solutions_downvotes_nonneg"),
    )
    op.create_index("ix_solutions_id", "solutions", ["id"])
    op.create_index("ix_solutions_problem_id", "solutions", ["problem_id"])
    op.create_index("ix_solutions_author_id", "solutions", ["author_id"])
    op.create_index("ix_solutions_created_at", "solutions", ["created_at"])

    with op.batch_alter_table("problems") as batch:
        batch.create_foreign_key(
            "fk_problems_accepted_solution_id",
            "solutions",
            ["accepted_solution_id"], ["id"],
            ondelete="SET NULL",
        )

    op.create_table(
        "votes",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("solution_id", sa.Integer, sa.ForeignKey("solutions.id", ondelete="CASCADE"), nullable=False),
        sa.Column("vote_type", sa.String(10), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("user_id", "solution_id", name="uq_votes_user_solution"),
        sa.CheckConstraint("vote_type IN ('upvote', 'downvote')", name="ck_votes_vote_type"),
    )
    op.create_index("ix_votes_id", "votes", ["id"])
    op.create_index("ix_votes_user_id", "votes", ["user_id"])
    op.create_index("ix_votes_solution_id", "votes", ["solution_id"])


def downgrade():
    op.drop_table("votes")
    with op.batch_alter_table("problems") as batch:
        batch.drop_constraint("fk_problems_accepted_solution_id", type_="foreignkey")
    op.drop_table("solutions")
    op.drop_table("problem_tags")
    op.drop_table("problems")
    op.drop_table("users")
