# crud/reputation.py
from sqlalchemy import update
from sqlalchemy.orm import Session

from models import User

# Fixed reputation deltas. Upvotes pay more than downvotes cost.
SOLUTION_CREATED = 5
UPVOTE = 2
DOWNVOTE = -1
ACCEPTED = 15

VOTE_DELTAS = {
    "upvote": UPVOTE,
    "downvote": DOWNVOTE,
}


def adjust_reputation(db: Session, user_id: int, delta: int) -> None:
    """Relative UPDATE so concurrent adjustments don't overwrite each other. Caller commits."""
    if not delta:
        return
    db.execute(
        update(User)
        .where(User.id == user_id)
        .values(reputation=User.reputation + delta)
        .execution_options(synchronize_session=False)
    )
