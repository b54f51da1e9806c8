import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.orm import Session

from kosmos.db import get_db
from kosmos.models.user import User
from kosmos.schemas.users import UserCreateIn, UserOut

router = APIRouter(prefix="/users", tags=["users"])

# accounts are provisioned by the identity provider; this only mirrors them
@router.post("", response_model=UserOut)
def create_user(payload: UserCreateIn, db: Session = Depends(get_db)) -> UserOut:
    email = payload.email.lower().strip()

    user = db.scalar(select(User).where(User.email == email))
    if user is None:
        user = User(email=email, display_name=payload.display_name)
        db.add(user)
        db.commit()
        db.refresh(user)

    return UserOut(id=user.id, email=user.email, display_name=user.display_name)

@router.get("/{user_id}", response_model=UserOut)
def get_user(user_id: uuid.UUID, db: Session = Depends(get_db)) -> UserOut:
    user = db.get(User, user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="user not found")
    return UserOut(id=user.id, email=user.email, display_name=user.display_name)
