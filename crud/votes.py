# crud/votes.py
"""
Voting & reputation bookkeeping for solutions.

A Vote row is the source of truth for "did this user vote and how". The
upvotes/downvotes columns on Solution are a cache of those rows, kept in step
inside the same transaction as the vote write and the author's reputation
change.
"""
import logging
from typing import NamedTuple, Optional

from sqlalchemy import case, func, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from models import Solution, Vote, VOTE_TYPES
from crud.reputation import VOTE_DELTAS, adjust_reputation
from utils.errors import InvalidInput, NotFound

logger = logging.getLogger("crowdsolve.votes")

COUNTERS = {
    "upvote": Solution.upvotes,
    "downvote": Solution.downvotes,
}


class VoteOutcome(NamedTuple):
    action: str          # "recorded" | "removed" | "changed"
    upvotes: int
    downvotes: int


def _shift_counters(db: Session, solution_id: int, increment: Optional[str] = None,
                    decrement: Optional[str] = None) -> None:
    values = {}
    if increment:
        col = COUNTERS[increment]
        values[col.key] = col + 1
    if decrement:
        col = COUNTERS[decrement]
        # floored at zero
        values[col.key] = case((col > 0, col - 1), else_=0)
    db.execute(
        update(Solution)
        .where(Solution.id == solution_id)
        .values(**values)
        .execution_options(synchronize_session=False)
    )


def get_vote(db: Session, voter_id: Optional[int], solution_id: int) -> Optional[str]:
    if voter_id is None:
        return None
    vote = (
        db.query(Vote)
        .filter(Vote.user_id == voter_id, Vote.solution_id == solution_id)
        .first()
    )
    return vote.vote_type if vote else None


def cast_vote(db: Session, voter_id: int, solution_id: int, vote_type: str) -> VoteOutcome:
    """
    Record, toggle off, or flip a user's vote on a solution.

    - no vote yet        -> create it, +1 on its counter, author +2 / -1
    - same type again    -> delete it, -1 on its counter, reverse the delta
    - the other type     -> flip it, move one count across, author +3 / -3
    """
    if vote_type not in VOTE_TYPES:
        raise InvalidInput("Invalid vote type")

    solution = db.query(Solution).filter(Solution.id == solution_id).first()
    if not solution:
        raise NotFound("Solution not found")
    author_id = solution.author_id

    existing = (
        db.query(Vote)
        .filter(Vote.user_id == voter_id, Vote.solution_id == solution_id)
        .first()
    )

    try:
        if existing is None:
            db.add(Vote(user_id=voter_id, solution_id=solution_id, vote_type=vote_type))
            db.flush()
            _shift_counters(db, solution_id, increment=vote_type)
            adjust_reputation(db, author_id, VOTE_DELTAS[vote_type])
            action = "recorded"
        elif existing.vote_type == vote_type:
            db.delete(existing)
            _shift_counters(db, solution_id, decrement=vote_type)
            adjust_reputation(db, author_id, -VOTE_DELTAS[vote_type])
            action = "removed"
        else:
            old_type = existing.vote_type
            existing.vote_type = vote_type
            _shift_counters(db, solution_id, increment=vote_type, decrement=old_type)
            adjust_reputation(db, author_id, VOTE_DELTAS[vote_type] - VOTE_DELTAS[old_type])
            action = "changed"
        db.commit()
    except IntegrityError:
        # lost a race against the same user's other request
        db.rollback()
        logger.warning("Duplicate vote by user %s on solution %s", voter_id, solution_id)
        raise InvalidInput("Vote already recorded")
    except Exception:
        db.rollback()
        raise

    db.refresh(solution)
    logger.info(
        "Vote %s: user=%s solution=%s type=%s -> up=%s down=%s",
        action, voter_id, solution_id, vote_type, solution.upvotes, solution.downvotes,
    )
    return VoteOutcome(action, solution.upvotes, solution.downvotes)


def recount_votes(db: Session, solution_id: int) -> VoteOutcome:
    """Rebuild a solution's counters from its Vote rows."""
    solution = db.query(Solution).filter(Solution.id == solution_id).first()
    if not solution:
        raise NotFound("Solution not found")

    counts = dict(
        db.query(Vote.vote_type, func.count(Vote.id))
        .filter(Vote.solution_id == solution_id)
        .group_by(Vote.vote_type)
        .all()
    )
    solution.upvotes = counts.get("upvote", 0)
    solution.downvotes = counts.get("downvote", 0)
    db.commit()
    db.refresh(solution)
    return VoteOutcome("recounted", solution.upvotes, solution.downvotes)
