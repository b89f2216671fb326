from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.services import users as user_directory

router = APIRouter(prefix="/games", tags=["Games"])


@router.get("/search", response_model=list[str])
def search_games(q: str = "", db: Session = Depends(get_db)):
    return user_directory.search_games(db, q)
