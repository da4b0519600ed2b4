from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database import get_db
from models import User
from schemas import AvatarRemovedOut, ProfileUpdate, UserEnvelope, UserProfileOut
from crud import users as users_crud
from routers.auth import get_current_user

router = APIRouter(prefix="/api/users", tags=["Users"])


@router.patch("/profile", response_model=UserEnvelope)
def update_profile(
    payload: ProfileUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    updates = payload.model_dump(exclude_unset=True)
    return {"user": users_crud.update_profile(db, user, updates)}


@router.delete("/avatar", response_model=AvatarRemovedOut)
def remove_avatar(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    user = users_crud.remove_avatar(db, user)
    return {"message": "Avatar removed successfully", "user": user}


@router.get("/{username}", response_model=UserProfileOut)
def get_user_profile(username: str, db: Session = Depends(get_db)):
    return users_crud.user_profile(db, username)
