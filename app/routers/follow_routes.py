from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.auth.dependencies import get_current_claim
from app.auth.token import Claim
from app.database import get_db
from app.services import follow_graph

router = APIRouter(tags=["Follow"])


@router.post("/follow/{username}")
def follow_user(username: str, db: Session = Depends(get_db), claim: Claim = Depends(get_current_claim)):
    follow_graph.follow(db, claim.username, username)
    return {"message": "Successfully followed user"}


@router.post("/unfollow/{username}")
def unfollow_user(username: str, db: Session = Depends(get_db), claim: Claim = Depends(get_current_claim)):
    follow_graph.unfollow(db, claim.username, username)
    return {"message": "Successfully unfollowed user"}
