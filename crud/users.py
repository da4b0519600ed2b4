# crud/users.py
import logging

from passlib.context import CryptContext
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from models import User, Problem, Solution
from utils.errors import InvalidInput, NotFound, Unauthenticated

logger = logging.getLogger("crowdsolve.users")

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

DUPLICATE_USER = "User with this email or username already exists"
PROFILE_FIELDS = {"bio", "avatar"}
RECENT_LIMIT = 10


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def get_user(db: Session, user_id: int):
    return db.query(User).filter(User.id == user_id).first()


def register_user(db: Session, username: str, email: str, password: str) -> User:
    username = username.strip()
    email = email.strip().lower()

    # one combined lookup so the error never says which field collided
    existing = db.query(User.id).filter(or_(User.email == email, User.username == username)).first()
    if existing:
        raise InvalidInput(DUPLICATE_USER)

    user = User(username=username, email=email, hashed_password=hash_password(password))
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise InvalidInput(DUPLICATE_USER)
    db.refresh(user)
    logger.info("Registered user %s (%s)", user.id, user.username)
    return user


def authenticate(db: Session, email: str, password: str) -> User:
    email = (email or "").strip().lower()
    user = db.query(User).filter(User.email == email).first()
    if not user or not verify_password(password, user.hashed_password):
        raise Unauthenticated("Invalid credentials")
    return user


def update_profile(db: Session, user: User, updates: dict) -> User:
    if not set(updates) <= PROFILE_FIELDS:
        raise InvalidInput("Invalid updates")
    for key, value in updates.items():
        setattr(user, key, value)
    db.commit()
    db.refresh(user)
    return user


def remove_avatar(db: Session, user: User) -> User:
    user.avatar = None
    db.commit()
    db.refresh(user)
    return user


def user_profile(db: Session, username: str) -> dict:
    user = db.query(User).filter(User.username == username).first()
    if not user:
        raise NotFound("User not found")

    problems = (
        db.query(Problem)
        .filter(Problem.author_id == user.id)
        .order_by(Problem.created_at.desc(), Problem.id.desc())
        .limit(RECENT_LIMIT)
        .all()
    )
    solutions = (
        db.query(Solution)
        .filter(Solution.author_id == user.id)
        .order_by(Solution.created_at.desc(), Solution.id.desc())
        .limit(RECENT_LIMIT)
        .all()
    )
    stats = {
        "problem_count": db.query(Problem).filter(Problem.author_id == user.id).count(),
        "solution_count": db.query(Solution).filter(Solution.author_id == user.id).count(),
        "accepted_solution_count": (
            db.query(Solution)
            .filter(Solution.author_id == user.id, Solution.is_accepted.is_(True))
            .count()
        ),
    }
    return {"user": user, "problems": problems, "solutions": solutions, "stats": stats}
