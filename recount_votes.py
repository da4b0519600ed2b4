import logging
import sys

from sqlalchemy.orm import Session

from database import SessionLocal
from crud.votes import recount_votes
from models import Solution

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("crowdsolve.recount_votes")


def recount(db: Session, solution_ids=None) -> int:
    """Rebuild upvote/downvote counters from the vote rows. Returns how many solutions were rewritten."""
    if not solution_ids:
        solution_ids = [row.id for row in db.query(Solution.id).order_by(Solution.id).all()]

    for solution_id in solution_ids:
        outcome = recount_votes(db, solution_id)
        logger.info("Solution %s: up=%s down=%s", solution_id, outcome.upvotes, outcome.downvotes)
    return len(solution_ids)


if __name__ == "__main__":
    ids = [int(arg) for arg in sys.argv[1:]]
    db = SessionLocal()
    try:
        count = recount(db, ids)
    finally:
        db.close()
    logger.info("Recounted %s solution(s)", count)
