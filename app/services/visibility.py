"""Which parts of a profile a viewer is allowed to see.

Decided fresh on every request: privacy flags and follow edges change at any
time, so nothing here is cached.
"""

from __future__ import annotations

import logging
from typing import Optional, Union

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import InternalError, NotFoundError
from app.models.user import User
from app.schemas.user_schema import ProfileOut, ReducedProfileOut, UserOut
from app.services import follow_graph
from app.services import users as user_directory

logger = logging.getLogger(__name__)


def can_view_full(viewer: Optional[str], target_username: str, is_private: bool, following: bool) -> bool:
    if viewer is not None and viewer == target_username:
        return True
    if not is_private:
        return True
    return following


def user_out(user: User) -> UserOut:
    return UserOut(
        id=user.id,
        username=user.username,
        twitch_username=user.twitch_username,
        discord_username=user.discord_username,
        instagram_handle=user.instagram_handle,
        youtube_channel=user.youtube_channel,
        connected_games=user.connected_games,
        is_private=user.is_private,
    )


def get_profile(db: Session, target_username: str, viewer: Optional[str]) -> Union[ProfileOut, ReducedProfileOut]:
    """Profile of ``target_username`` as seen by ``viewer`` (None when anonymous).

    Any store failure here fails the whole request; partial data is never returned.
    """
    try:
        user = user_directory.get_by_username(db, target_username)
    except SQLAlchemyError:
        logger.exception("Error loading profile %s", target_username)
        raise InternalError()
    if not user:
        raise NotFoundError("User not found")

    try:
        followers = follow_graph.followers_count(db, user.id)
        following = follow_graph.following_count(db, user.id)

        is_following = False
        if viewer is not None:
            viewer_id = user_directory.get_id(db, viewer)
            if viewer_id is not None:
                is_following = follow_graph.is_following(db, viewer_id, user.id)
    except SQLAlchemyError:
        logger.exception("Error getting follow state for %s", target_username)
        raise InternalError()

    if not can_view_full(viewer, user.username, user.is_private, is_following):
        return ReducedProfileOut(
            username=user.username,
            is_private=user.is_private,
            followers_count=followers,
            following_count=following,
            is_following=is_following,
        )

    return ProfileOut(
        **user_out(user).model_dump(),
        followers_count=followers,
        following_count=following,
        is_following=is_following,
    )


def get_own_profile(db: Session, username: str) -> ProfileOut:
    """Full profile for the caller themselves.

    Unlike get_profile, a failed count lookup is only logged and reported as zero.
    """
    try:
        user = user_directory.get_by_username(db, username)
    except SQLAlchemyError:
        logger.exception("Error loading own profile %s", username)
        raise InternalError()
    if not user:
        raise NotFoundError("User not found")

    base = user_out(user)
    followers, following = 0, 0
    try:
        followers = follow_graph.followers_count(db, user.id)
        following = follow_graph.following_count(db, user.id)
    except SQLAlchemyError:
        logger.exception("Error getting follow counts for %s", username)
        db.rollback()
        followers, following = 0, 0

    return ProfileOut(**base.model_dump(), followers_count=followers, following_count=following)
