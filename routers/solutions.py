# solutions.py
from fastapi import APIRouter, Depends, Query
from typing import Literal, Optional
from sqlalchemy.orm import Session

from database import get_db
from models import User
from schemas import (
    SolutionUpdate, SolutionEnvelope, SolutionPageOut, MessageResponse,
    VoteRequest, VoteResult, UserVoteOut,
)
from crud import solutions as solutions_crud
from crud import votes as votes_crud
from crud.pagination import DEFAULT_LIMIT, MAX_LIMIT, pagination
from routers.auth import get_current_user, get_optional_user

router = APIRouter(prefix="/api/solutions", tags=["Solutions"])

VOTE_MESSAGES = {
    "recorded": "Vote recorded",
    "removed": "Vote removed",
    "changed": "Vote changed",
}


@router.get("", response_model=SolutionPageOut)
def list_solutions(
    db: Session = Depends(get_db),
    sort_by: Literal["votes", "upvotes", "created_at"] = "votes",
    order: Literal["asc", "desc"] = "desc",
    status: Optional[Literal["accepted", "pending"]] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_LIMIT, ge=1, le=MAX_LIMIT),
):
    solutions, total = solutions_crud.list_solutions(
        db, sort_by=sort_by, order=order, status=status, page=page, limit=limit,
    )
    return {"solutions": solutions, "pagination": pagination(page, limit, total)}


@router.get("/{solution_id}", response_model=SolutionEnvelope)
def get_solution(solution_id: int, db: Session = Depends(get_db)):
    return {"solution": solutions_crud.get_solution(db, solution_id)}


@router.patch("/{solution_id}", response_model=SolutionEnvelope)
def update_solution(
    solution_id: int,
    payload: SolutionUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    updates = payload.model_dump(exclude_unset=True)
    return {"solution": solutions_crud.update_solution(db, user.id, solution_id, updates)}


@router.delete("/{solution_id}", response_model=MessageResponse)
def delete_solution(
    solution_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    solutions_crud.delete_solution(db, user.id, solution_id)
    return {"message": "Solution deleted successfully"}


@router.post("/{solution_id}/vote", response_model=VoteResult)
def vote_solution(
    solution_id: int,
    payload: VoteRequest,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    outcome = votes_crud.cast_vote(db, user.id, solution_id, payload.vote_type)
    return {
        "message": VOTE_MESSAGES[outcome.action],
        "upvotes": outcome.upvotes,
        "downvotes": outcome.downvotes,
    }


@router.get("/{solution_id}/vote", response_model=UserVoteOut)
def get_user_vote(
    solution_id: int,
    db: Session = Depends(get_db),
    user: Optional[User] = Depends(get_optional_user),
):
    return {"user_vote": votes_crud.get_vote(db, user.id if user else None, solution_id)}


@router.post("/{solution_id}/accept", response_model=MessageResponse)
def accept_solution(
    solution_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    solutions_crud.accept_solution(db, user.id, solution_id)
    return {"message": "Solution accepted successfully"}
