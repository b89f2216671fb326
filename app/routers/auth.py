from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.auth.dependencies import get_token_service
from app.auth.token import TokenService
from app.database import get_db
from app.schemas.user_schema import Credentials, LoginResponse, RegisterResponse
from app.services import users as user_directory

router = APIRouter(tags=["Auth"])


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
def register(payload: Credentials, db: Session = Depends(get_db)):
    user = user_directory.create_user(db, payload.username, payload.password)
    return RegisterResponse(message="User created successfully", username=user.username)


@router.post("/login", response_model=LoginResponse)
def login(
    payload: Credentials,
    db: Session = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
):
    user = user_directory.authenticate(db, payload.username, payload.password)
    token = tokens.issue(user.username)
    return LoginResponse(token=token, username=user.username, message="Login successful")
