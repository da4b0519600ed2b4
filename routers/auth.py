from datetime import datetime, timedelta
from typing import Optional
import logging

import jwt
from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.orm import Session

from database import get_db
from models import User
from schemas import RegisterRequest, LoginRequest, UserEnvelope, MessageResponse
from crud import users as users_crud
from settings import settings as app_settings
from utils.errors import Unauthenticated

logger = logging.getLogger("crowdsolve.auth")

router = APIRouter(prefix="/api/auth", tags=["Auth"])

SECRET_KEY = app_settings.SECRET_KEY
ALGORITHM = app_settings.JWT_ALGORITHM
COOKIE_NAME = app_settings.SESSION_COOKIE_NAME
SESSION_EXPIRE_DAYS = app_settings.SESSION_EXPIRE_DAYS


# ---------- tokens ----------

def create_session_token(user: User, expires_delta: timedelta = None) -> str:
    expire = datetime.utcnow() + (expires_delta or timedelta(days=SESSION_EXPIRE_DAYS))
    to_encode = {
        "id": user.id,
        "email": user.email,
        "username": user.username,
        "exp": expire,
    }
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def decode_session(token: Optional[str]) -> Optional[dict]:
    """Claims of a valid token, or None. Missing, expired and tampered tokens all read as 'no session'."""
    if not token:
        return None
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except jwt.ExpiredSignatureError:
        return None
    except jwt.InvalidTokenError:
        return None
    if not payload.get("id"):
        return None
    return payload


# ---------- cookies ----------

def set_session_cookie(response: Response, token: str) -> None:
    prod = app_settings.is_prod
    response.set_cookie(
        key=COOKIE_NAME,
        value=token,
        httponly=True,
        secure=prod,
        samesite="none" if prod else "lax",
        path="/",
        max_age=SESSION_EXPIRE_DAYS * 24 * 60 * 60,
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(COOKIE_NAME, path="/")


# ---------- dependencies ----------

def get_optional_user(request: Request, db: Session = Depends(get_db)) -> Optional[User]:
    payload = decode_session(request.cookies.get(COOKIE_NAME))
    if not payload:
        return None
    return users_crud.get_user(db, payload["id"])


def get_current_user(user: Optional[User] = Depends(get_optional_user)) -> User:
    if user is None:
        raise Unauthenticated("Not authenticated")
    return user


# ---------- routes ----------

@router.post("/register", response_model=UserEnvelope, status_code=status.HTTP_201_CREATED)
def register(payload: RegisterRequest, response: Response, db: Session = Depends(get_db)):
    user = users_crud.register_user(db, payload.username, payload.email, payload.password)
    set_session_cookie(response, create_session_token(user))
    return {"user": user}


@router.post("/login", response_model=UserEnvelope)
def login(payload: LoginRequest, response: Response, db: Session = Depends(get_db)):
    user = users_crud.authenticate(db, payload.email, payload.password)
    set_session_cookie(response, create_session_token(user))
    logger.info("User %s logged in", user.id)
    return {"user": user}


@router.post("/logout", response_model=MessageResponse)
def logout(response: Response):
    clear_session_cookie(response)
    return {"message": "Logged out successfully"}


@router.get("/me", response_model=UserEnvelope)
def me(user: User = Depends(get_current_user)):
    return {"user": user}
