# crud/solutions.py
import logging
from typing import List, Optional, Tuple

from sqlalchemy import update
from sqlalchemy.orm import Session, selectinload

from models import Problem, Solution, Vote
from schemas import SolutionCreate
from crud import reputation
from crud.pagination import page_window
from utils.errors import Forbidden, InvalidInput, NotFound

logger = logging.getLogger("crowdsolve.solutions")

ALLOWED_UPDATES = {"content", "images"}

SORT_COLUMNS = {
    "votes": Solution.upvotes - Solution.downvotes,
    "upvotes": Solution.upvotes,
    "created_at": Solution.created_at,
}


def _load(db: Session):
    return db.query(Solution).options(
        selectinload(Solution.author),
        selectinload(Solution.problem),
    )


def get_solution(db: Session, solution_id: int) -> Solution:
    solution = _load(db).filter(Solution.id == solution_id).first()
    if not solution:
        raise NotFound("Solution not found")
    return solution


def _owned_solution(db: Session, requester_id: int, solution_id: int) -> Solution:
    solution = db.query(Solution).filter(Solution.id == solution_id).first()
    if not solution:
        raise NotFound("Solution not found")
    if solution.author_id != requester_id:
        raise Forbidden("Not authorized")
    return solution


def create_solution(db: Session, author_id: int, problem_id: int, payload: SolutionCreate) -> Solution:
    problem = db.query(Problem.id).filter(Problem.id == problem_id).first()
    if not problem:
        raise NotFound("Problem not found")

    solution = Solution(
        problem_id=problem_id,
        author_id=author_id,
        content=payload.content,
        images=list(payload.images),
        upvotes=0,
        downvotes=0,
        is_accepted=False,
    )
    try:
        db.add(solution)
        db.flush()
        reputation.adjust_reputation(db, author_id, reputation.SOLUTION_CREATED)
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info("Solution %s posted on problem %s by user %s", solution.id, problem_id, author_id)
    return get_solution(db, solution.id)


def list_problem_solutions(db: Session, problem_id: int) -> List[Solution]:
    """Accepted answer first, then most upvoted, then newest."""
    if not db.query(Problem.id).filter(Problem.id == problem_id).first():
        raise NotFound("Problem not found")

    return (
        _load(db)
        .filter(Solution.problem_id == problem_id)
        .order_by(
            Solution.is_accepted.desc(),
            Solution.upvotes.desc(),
            Solution.created_at.desc(),
            Solution.id.desc(),
        )
        .all()
    )


def list_solutions(
    db: Session,
    sort_by: str = "votes",
    order: str = "desc",
    status: Optional[str] = None,
    page: int = 1,
    limit: int = 10,
) -> Tuple[List[Solution], int]:
    if sort_by not in SORT_COLUMNS:
        raise InvalidInput("Invalid sort field")
    if order not in ("asc", "desc"):
        raise InvalidInput("Invalid sort order")

    qry = db.query(Solution)
    if status:
        qry = qry.filter(Solution.is_accepted.is_(status == "accepted"))

    total = qry.count()
    column = SORT_COLUMNS[sort_by]
    ordering = column.desc() if order == "desc" else column.asc()
    tiebreak = Solution.id.desc() if order == "desc" else Solution.id.asc()

    offset, limit = page_window(page, limit)
    solutions = (
        qry.options(selectinload(Solution.author), selectinload(Solution.problem))
        .order_by(ordering, tiebreak)
        .offset(offset)
        .limit(limit)
        .all()
    )
    return solutions, total


def update_solution(db: Session, requester_id: int, solution_id: int, updates: dict) -> Solution:
    solution = _owned_solution(db, requester_id, solution_id)

    if not set(updates) <= ALLOWED_UPDATES:
        raise InvalidInput("Invalid updates")

    if updates.get("content") is not None:
        solution.content = updates["content"]
    if updates.get("images") is not None:
        solution.images = list(updates["images"])

    db.commit()
    return get_solution(db, solution_id)


def delete_solution(db: Session, requester_id: int, solution_id: int) -> None:
    solution = _owned_solution(db, requester_id, solution_id)

    try:
        problem = db.query(Problem).filter(Problem.id == solution.problem_id).first()
        if problem and problem.accepted_solution_id == solution.id:
            # keep status == solved  <=>  accepted solution set
            problem.accepted_solution_id = None
            problem.status = "open"
            db.flush()
        db.query(Vote).filter(Vote.solution_id == solution.id).delete(synchronize_session=False)
        db.delete(solution)
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info("Solution %s deleted by user %s", solution_id, requester_id)


def accept_solution(db: Session, requester_id: int, solution_id: int) -> None:
    """
    Mark a solution as the accepted answer of its problem.

    Only the problem's author may accept. Any previously accepted solution is
    unflagged, the problem flips to solved, and the solution's author gets the
    acceptance bonus. The bonus is not taken back if acceptance later moves to
    another solution.
    """
    solution = db.query(Solution).filter(Solution.id == solution_id).first()
    if not solution:
        raise NotFound("Solution not found")

    problem = db.query(Problem).filter(Problem.id == solution.problem_id).first()
    if not problem:
        raise NotFound("Problem not found")

    if problem.author_id != requester_id:
        raise Forbidden("Only the problem author can accept solutions")

    previous_id = problem.accepted_solution_id
    try:
        if previous_id is not None and previous_id != solution.id:
            db.execute(
                update(Solution)
                .where(Solution.id == previous_id)
                .values(is_accepted=False)
                .execution_options(synchronize_session=False)
            )
        solution.is_accepted = True
        problem.accepted_solution_id = solution.id
        problem.status = "solved"
        reputation.adjust_reputation(db, solution.author_id, reputation.ACCEPTED)
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(
        "Solution %s accepted for problem %s (previous: %s)",
        solution_id, problem.id, previous_id,
    )
