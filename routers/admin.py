from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session, selectinload

from database import get_db
from models import User, Problem, Solution
from schemas import AdminStatsOut
from routers.auth import get_current_user

router = APIRouter(prefix="/api/admin", tags=["Admin"])

RECENT_LIMIT = 5
TOP_USERS_LIMIT = 10


@router.get("/stats", response_model=AdminStatsOut)
def get_stats(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    stats = {
        "total_users": db.query(User).count(),
        "total_problems": db.query(Problem).count(),
        "total_solutions": db.query(Solution).count(),
        "solved_problems": db.query(Problem).filter(Problem.status == "solved").count(),
        "open_problems": db.query(Problem).filter(Problem.status == "open").count(),
    }

    recent_problems = (
        db.query(Problem)
        .options(selectinload(Problem.author), selectinload(Problem.tag_rows))
        .order_by(Problem.created_at.desc(), Problem.id.desc())
        .limit(RECENT_LIMIT)
        .all()
    )
    recent_solutions = (
        db.query(Solution)
        .options(selectinload(Solution.author), selectinload(Solution.problem))
        .order_by(Solution.created_at.desc(), Solution.id.desc())
        .limit(RECENT_LIMIT)
        .all()
    )
    top_users = (
        db.query(User)
        .order_by(User.reputation.desc(), User.id.asc())
        .limit(TOP_USERS_LIMIT)
        .all()
    )

    return {
        "stats": stats,
        "recent_problems": recent_problems,
        "recent_solutions": recent_solutions,
        "top_users": top_users,
    }
