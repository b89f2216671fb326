"""Directed follow edges between users.

The composite primary key on ``followers`` is what actually keeps edges
unique; the existence check before an insert only gives a friendlier error
in the common case.
"""

from __future__ import annotations

import logging

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import AlreadyFollowing, InternalError, NotFollowing, NotFoundError
from app.models.follower import Follower
from app.services import users as user_directory

logger = logging.getLogger(__name__)


def _resolve_pair(db: Session, follower_username: str, target_username: str) -> tuple[int, int]:
    try:
        follower_id = user_directory.get_id(db, follower_username)
        following_id = user_directory.get_id(db, target_username)
    except SQLAlchemyError:
        logger.exception("Error resolving %s -> %s", follower_username, target_username)
        raise InternalError()

    # The follower comes from a validated token, but the account may still be gone
    if follower_id is None or following_id is None:
        raise NotFoundError("User not found")
    return follower_id, following_id


def is_following(db: Session, follower_id: int, target_id: int) -> bool:
    return db.query(
        db.query(Follower)
        .filter(Follower.follower_id == follower_id, Follower.following_id == target_id)
        .exists()
    ).scalar()


def followers_count(db: Session, user_id: int) -> int:
    return db.query(func.count()).select_from(Follower).filter(Follower.following_id == user_id).scalar()


def following_count(db: Session, user_id: int) -> int:
    return db.query(func.count()).select_from(Follower).filter(Follower.follower_id == user_id).scalar()


def follow(db: Session, follower_username: str, target_username: str) -> None:
    # Following yourself is not blocked
    follower_id, following_id = _resolve_pair(db, follower_username, target_username)

    try:
        exists = is_following(db, follower_id, following_id)
    except SQLAlchemyError:
        logger.exception("Error checking existing follow %s -> %s", follower_username, target_username)
        raise InternalError()
    if exists:
        raise AlreadyFollowing()

    db.add(Follower(follower_id=follower_id, following_id=following_id))
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise AlreadyFollowing()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error creating follow %s -> %s", follower_username, target_username)
        raise InternalError()

    logger.info("%s followed %s", follower_username, target_username)


def unfollow(db: Session, follower_username: str, target_username: str) -> None:
    follower_id, following_id = _resolve_pair(db, follower_username, target_username)

    try:
        deleted = (
            db.query(Follower)
            .filter(Follower.follower_id == follower_id, Follower.following_id == following_id)
            .delete(synchronize_session=False)
        )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error deleting follow %s -> %s", follower_username, target_username)
        raise InternalError()

    if deleted == 0:
        raise NotFollowing()

    logger.info("%s unfollowed %s", follower_username, target_username)
