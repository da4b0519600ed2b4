# crud/problems.py
import logging
from typing import List, Optional, Tuple

from sqlalchemy import func, or_, select, update
from sqlalchemy.orm import Session, selectinload

from models import Problem, ProblemTag, Solution, Vote
from schemas import ProblemCreate
from crud.pagination import page_window
from utils.errors import Forbidden, InvalidInput, NotFound

logger = logging.getLogger("crowdsolve.problems")

ALLOWED_UPDATES = {"title", "description", "tags", "status"}


def _load(db: Session):
    return db.query(Problem).options(
        selectinload(Problem.author),
        selectinload(Problem.tag_rows),
    )


def _owned_problem(db: Session, requester_id: int, problem_id: int) -> Problem:
    problem = db.query(Problem).filter(Problem.id == problem_id).first()
    if not problem:
        raise NotFound("Problem not found")
    if problem.author_id != requester_id:
        raise Forbidden("Not authorized")
    return problem


def create_problem(db: Session, author_id: int, payload: ProblemCreate) -> Problem:
    problem = Problem(
        title=payload.title,
        description=payload.description,
        images=list(payload.images),
        location=payload.location.model_dump() if payload.location else None,
        author_id=author_id,
        status="open",
        views=0,
    )
    problem.set_tags(payload.tags)
    db.add(problem)
    db.commit()
    db.refresh(problem)
    logger.info("Problem %s created by user %s", problem.id, author_id)
    return problem


def get_problem(db: Session, problem_id: int, count_view: bool = True) -> Problem:
    """Fetch one problem. Every read counts as a view; there is no per-viewer dedup."""
    exists = db.query(Problem.id).filter(Problem.id == problem_id).first()
    if not exists:
        raise NotFound("Problem not found")

    if count_view:
        db.execute(
            update(Problem)
            .where(Problem.id == problem_id)
            .values(views=Problem.views + 1)
            .execution_options(synchronize_session=False)
        )
        db.commit()

    return _load(db).filter(Problem.id == problem_id).first()


def list_problems(
    db: Session,
    status: Optional[str] = None,
    tag: Optional[str] = None,
    search: Optional[str] = None,
    page: int = 1,
    limit: int = 10,
) -> Tuple[List[Problem], int]:
    qry = db.query(Problem)

    if status:
        qry = qry.filter(Problem.status == status)
    if tag:
        qry = qry.filter(Problem.tag_rows.any(ProblemTag.tag == tag.strip().lower()))
    if search:
        term = search.strip().lower()
        qry = qry.filter(or_(
            func.lower(Problem.title).contains(term, autoescape=True),
            func.lower(Problem.description).contains(term, autoescape=True),
            Problem.tag_rows.any(ProblemTag.tag.contains(term, autoescape=True)),
        ))

    total = qry.count()
    offset, limit = page_window(page, limit)
    problems = (
        qry.options(selectinload(Problem.author), selectinload(Problem.tag_rows))
        .order_by(Problem.created_at.desc(), Problem.id.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )
    return problems, total


def update_problem(db: Session, requester_id: int, problem_id: int, updates: dict) -> Problem:
    problem = _owned_problem(db, requester_id, problem_id)

    # all-or-nothing: one stray key rejects the whole update
    if not set(updates) <= ALLOWED_UPDATES:
        raise InvalidInput("Invalid updates")

    for key in ("title", "description", "tags", "status"):
        if key in updates and updates[key] is None:
            raise InvalidInput("Invalid updates")

    if "status" in updates and updates["status"] != problem.status:
        new_status = updates["status"]
        if new_status not in ("open", "closed"):
            raise InvalidInput("A problem is marked solved by accepting a solution")
        if problem.accepted_solution_id is not None:
            raise InvalidInput("Status of a solved problem cannot be changed")

    if "title" in updates:
        problem.title = updates["title"]
    if "description" in updates:
        problem.description = updates["description"]
    if "tags" in updates:
        problem.set_tags(updates["tags"])
    if "status" in updates:
        problem.status = updates["status"]

    db.commit()
    return _load(db).filter(Problem.id == problem_id).first()


def delete_problem(db: Session, requester_id: int, problem_id: int) -> int:
    """Delete a problem and every solution under it. Returns the number of solutions removed."""
    problem = _owned_problem(db, requester_id, problem_id)

    solution_ids = select(Solution.id).where(Solution.problem_id == problem.id)
    try:
        # drop the accepted reference first so the solutions can go
        problem.accepted_solution_id = None
        db.flush()
        db.query(Vote).filter(Vote.solution_id.in_(solution_ids)).delete(synchronize_session=False)
        removed = (
            db.query(Solution)
            .filter(Solution.problem_id == problem.id)
            .delete(synchronize_session=False)
        )
        db.delete(problem)
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info("Problem %s deleted with %s solution(s)", problem_id, removed)
    return removed
