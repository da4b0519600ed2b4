# problems.py
from fastapi import APIRouter, Depends, Query, status
from typing import Optional
from sqlalchemy.orm import Session

from database import get_db
from models import User
from schemas import (
    ProblemCreate, ProblemUpdate, ProblemEnvelope, ProblemListOut,
    SolutionCreate, SolutionEnvelope, SolutionListOut, MessageResponse,
)
from crud import problems as problems_crud
from crud import solutions as solutions_crud
from crud.pagination import DEFAULT_LIMIT, MAX_LIMIT, pagination
from routers.auth import get_current_user

router = APIRouter(prefix="/api/problems", tags=["Problems"])


@router.get("", response_model=ProblemListOut)
def list_problems(
    db: Session = Depends(get_db),
    status: Optional[str] = None,
    tag: Optional[str] = None,
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_LIMIT, ge=1, le=MAX_LIMIT),
):
    problems, total = problems_crud.list_problems(
        db, status=status, tag=tag, search=search, page=page, limit=limit,
    )
    return {"problems": problems, "pagination": pagination(page, limit, total)}


@router.post("", response_model=ProblemEnvelope, status_code=status.HTTP_201_CREATED)
def create_problem(
    payload: ProblemCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    problem = problems_crud.create_problem(db, user.id, payload)
    return {"problem": problems_crud.get_problem(db, problem.id, count_view=False)}


@router.get("/{problem_id}", response_model=ProblemEnvelope)
def get_problem(problem_id: int, db: Session = Depends(get_db)):
    return {"problem": problems_crud.get_problem(db, problem_id)}


@router.patch("/{problem_id}", response_model=ProblemEnvelope)
def update_problem(
    problem_id: int,
    payload: ProblemUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    updates = payload.model_dump(exclude_unset=True)
    return {"problem": problems_crud.update_problem(db, user.id, problem_id, updates)}


@router.delete("/{problem_id}", response_model=MessageResponse)
def delete_problem(
    problem_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    problems_crud.delete_problem(db, user.id, problem_id)
    return {"message": "Problem deleted successfully"}


# --- SOLUTIONS ---

@router.get("/{problem_id}/solutions", response_model=SolutionListOut)
def list_solutions_for_problem(problem_id: int, db: Session = Depends(get_db)):
    return {"solutions": solutions_crud.list_problem_solutions(db, problem_id)}


@router.post(
    "/{problem_id}/solutions",
    response_model=SolutionEnvelope,
    status_code=status.HTTP_201_CREATED,
)
def create_solution(
    problem_id: int,
    payload: SolutionCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return {"solution": solutions_crud.create_solution(db, user.id, problem_id, payload)}
