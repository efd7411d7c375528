from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from database import get_db
from dependencies.get_current_user import get_current_user
from models.user import UserModel
from serializers.user import CurrentUser, UserLogin, UserSignup, UserToken
from services.auth import authenticate_user, register_user

router = APIRouter()


@router.post('/signup', response_model=UserToken, status_code=status.HTTP_201_CREATED)
def signup(user: UserSignup, db: Session = Depends(get_db)):
    new_user = register_user(db, user.name, user.email, user.password)
    return {
        "success": True,
        "message": "User registered successfully",
        "token": new_user.generate_token(),
        "user": new_user,
    }


@router.post('/login', response_model=UserToken)
def login(user: UserLogin, db: Session = Depends(get_db)):
    db_user = authenticate_user(db, user.email, user.password)
    return {
        "success": True,
        "message": "Login successful",
        "token": db_user.generate_token(),
        "user": db_user,
    }


@router.get('/me', response_model=CurrentUser)
def get_me(current_user: UserModel = Depends(get_current_user)):
    return {"success": True, "user": current_user}
