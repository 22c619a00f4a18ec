import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from carledger.core.config import ADMIN_EMAILS
from carledger.models.user_model import User
from carledger.schemas.user_schemas import UserCreate, UserOut
from carledger.utils.car_access import get_current_user
from carledger.utils.database import get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])


# Credentials are handled upstream; this only registers the profile
@router.post("/", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def register_user(payload: UserCreate, db: Session = Depends(get_db)):
    exists = db.query(User).filter(User.email == payload.email).first()
    if exists:
        raise HTTPException(status_code=409, detail="Email already registered")

    user = User(email=payload.email, name=payload.name, is_admin=payload.email in ADMIN_EMAILS)
    db.add(user)
    db.commit()
    db.refresh(user)

    logger.info("registered user %s (admin=%s)", user.user_id, user.is_admin)
    return user


@router.get("/me", response_model=UserOut)
def read_me(user: User = Depends(get_current_user)):
    return user
