from sqlalchemy import (
    Column, Integer, String, ForeignKey, Text, DateTime, Boolean, JSON,
    UniqueConstraint, CheckConstraint,
)
from sqlalchemy.orm import relationship
from datetime import datetime
from database import Base

PROBLEM_STATUSES = ("open", "solved", "closed")
VOTE_TYPES = ("upvote", "downvote")


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(30), unique=True, nullable=False, index=True)
    email = Column(String, unique=True, nullable=False, index=True)
    hashed_password = Column(String, nullable=False)
    bio = Column(String(500), nullable=True)
    avatar = Column(String, nullable=True)
    # signed on purpose: downvotes can push it below zero
    reputation = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    problems = relationship("Problem", back_populates="author")
    solutions = relationship("Solution", back_populates="author")
    votes = relationship("Vote", back_populates="user", passive_deletes=True)


class Problem(Base):
    __tablename__ = "problems"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    images = Column(JSON, nullable=False, default=list)
    # {"type": "Point", "coordinates": [lng, lat], "address": "..."}
    location = Column(JSON, nullable=True)
    author_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    status = Column(String(10), nullable=False, default="open", index=True)
    accepted_solution_id = Column(
        Integer,
        ForeignKey(
            "solutions.id",
            use_alter=True,
            name="fk_problems_accepted_solution_id",
            ondelete="SET NULL",
        ),
        nullable=True,
    )
    views = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    __table_args__ = (
        CheckConstraint("status IN ('open', 'solved', 'closed')", name="ck_problems_status"),
    )

    author = relationship("User", back_populates="problems")
    tag_rows = relationship(
        "ProblemTag",
        back_populates="problem",
        cascade="all, delete-orphan",
        order_by="ProblemTag.id",
    )
    solutions = relationship(
        "Solution",
        back_populates="problem",
        foreign_keys="Solution.problem_id",
        passive_deletes=True,
    )
    accepted_solution = relationship("Solution", foreign_keys=[accepted_solution_id], post_update=True)

    @property
    def tags(self):
        return [row.tag for row in self.tag_rows]

    def set_tags(self, tags):
        """Replace the tag set, keeping rows for tags that survive."""
        wanted = list(dict.fromkeys(tags))
        self.tag_rows = [row for row in self.tag_rows if row.tag in wanted]
        present = {row.tag for row in self.tag_rows}
        for tag in wanted:
            if tag not in present:
                self.tag_rows.append(ProblemTag(tag=tag))


class ProblemTag(Base):
    __tablename__ = "problem_tags"

    id = Column(Integer, primary_key=True)
    problem_id = Column(Integer, ForeignKey("problems.id", ondelete="CASCADE"), nullable=False, index=True)
    tag = Column(String(50), nullable=False, index=True)

    __table_args__ = (
        UniqueConstraint("problem_id", "tag", name="uq_problem_tags_problem_tag"),
    )

    problem = relationship("Problem", back_populates="tag_rows")


class Solution(Base):
    __tablename__ = "solutions"

    id = Column(Integer, primary_key=True, index=True)
    problem_id = Column(Integer, ForeignKey("problems.id", ondelete="CASCADE"), nullable=False, index=True)
    author_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    content = Column(Text, nullable=False)
    images = Column(JSON, nullable=False, default=list)
    upvotes = Column(Integer, nullable=False, default=0)
    downvotes = Column(Integer, nullable=False, default=0)
    is_accepted = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    __table_args__ = (
        CheckConstraint("upvotes >= 0", name="ck_solutions_upvotes_nonneg"),
        CheckConstraint("downvotes >= 0", name="ck_solutions_downvotes_nonneg"),
    )

    problem = relationship("Problem", back_populates="solutions", foreign_keys=[problem_id])
    author = relationship("User", back_populates="solutions")
    votes = relationship("Vote", back_populates="solution", cascade="all, delete-orphan", passive_deletes=True)


class Vote(Base):
    __tablename__ = "votes"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    solution_id = Column(Integer, ForeignKey("solutions.id", ondelete="CASCADE"), nullable=False, index=True)
    vote_type = Column(String(10), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # one vote per (user, solution), enforced by the database
    __table_args__ = (
        UniqueConstraint("user_id", "solution_id", name="uq_votes_user_solution"),
        CheckConstraint("vote_type IN ('upvote', 'downvote')", name="ck_votes_vote_type"),
    )

    user = relationship("User", back_populates="votes")
    solution = relationship("Solution", back_populates="votes")
