"""User directory: account records, linked accounts and connected games."""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.auth.password import (
    MAX_PASSWORD_BYTES,
    HashingError,
    VerificationError,
    hash_password,
    verify_password,
)
from app.core.errors import ConflictError, InternalError, NotFoundError, Unauthenticated, ValidationError
from app.models.connected_game import ConnectedGame
from app.models.user import User

logger = logging.getLogger(__name__)

LINKED_ACCOUNT_FIELDS = ("twitch_username", "discord_username", "instagram_handle", "youtube_channel")
GAME_SEARCH_LIMIT = 10


def get_by_username(db: Session, username: str) -> Optional[User]:
    return db.query(User).filter(User.username == username).first()


def get_id(db: Session, username: str) -> Optional[int]:
    return db.query(User.id).filter(User.username == username).scalar()


def _require_user(db: Session, username: str) -> User:
    try:
        user = get_by_username(db, username)
    except SQLAlchemyError:
        logger.exception("Error loading user %s", username)
        raise InternalError()
    if not user:
        raise NotFoundError("User not found")
    return user


def _commit(db: Session, action: str, username: str):
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error %s for user %s", action, username)
        raise InternalError()


def create_user(db: Session, username: str, password: str) -> User:
    username = username.strip()
    password = password.strip()

    if not username or not password:
        raise ValidationError("Username and password are required")
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")

    try:
        exists = get_id(db, username) is not None
    except SQLAlchemyError:
        logger.exception("Error checking username existence for %s", username)
        raise InternalError()
    if exists:
        raise ConflictError("Username already exists")

    try:
        hashed = hash_password(password)
    except HashingError:
        logger.exception("Password hashing error")
        raise InternalError()

    user = User(username=username, password=hashed)
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # Lost the race against a concurrent registration
        db.rollback()
        raise ConflictError("Username already exists")
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error creating user %s", username)
        raise InternalError()

    db.refresh(user)
    logger.info("User created: %s", username)
    return user


def authenticate(db: Session, username: str, password: str) -> User:
    try:
        user = get_by_username(db, username)
    except SQLAlchemyError:
        logger.exception("Error loading user %s for login", username)
        raise InternalError()
    if not user:
        raise Unauthenticated("Invalid credentials")

    try:
        ok = verify_password(user.password, password)
    except VerificationError:
        logger.exception("Stored password hash for %s is malformed", username)
        raise InternalError()
    if not ok:
        raise Unauthenticated("Invalid credentials")
    return user


def list_users(db: Session) -> list[User]:
    try:
        return db.query(User).order_by(User.id.desc()).all()
    except SQLAlchemyError:
        logger.exception("Error fetching users")
        raise InternalError()


def set_linked_account(db: Session, username: str, field: str, value: Optional[str]) -> User:
    """Set one linked-account handle; ``None`` disconnects it."""
    if field not in LINKED_ACCOUNT_FIELDS:
        raise ValueError(f"Unknown linked account field: {field!r}")

    user = _require_user(db, username)
    setattr(user, field, value)
    _commit(db, f"updating {field}", username)
    return user


def set_privacy(db: Session, username: str, is_private: bool) -> User:
    user = _require_user(db, username)
    user.is_private = is_private
    _commit(db, "updating privacy settings", username)
    logger.info("Privacy for %s set to %s", username, is_private)
    return user


def add_game(db: Session, username: str, game_name: str) -> User:
    """Connect a game. Connecting one that is already there changes nothing."""
    if not game_name or not game_name.strip():
        raise ValidationError("Game name is required")

    user = _require_user(db, username)
    if game_name in user.connected_games:
        return user

    user.games.append(ConnectedGame(game_name=game_name))
    try:
        db.commit()
    except IntegrityError:
        # Same game connected concurrently; the set already holds it
        db.rollback()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error connecting game for %s", username)
        raise InternalError()
    return user


def remove_game(db: Session, username: str, game_name: str) -> User:
    user = _require_user(db, username)
    for game in list(user.games):
        if game.game_name == game_name:
            user.games.remove(game)
    _commit(db, "disconnecting game", username)
    return user


def search_games(db: Session, query: str) -> list[str]:
    """Case-insensitive substring match over every user's connected games."""
    if not query:
        raise ValidationError("Search query is required")

    pattern = f"%{query.lower()}%"
    try:
        rows = (
            db.query(ConnectedGame.game_name)
            .filter(func.lower(ConnectedGame.game_name).like(pattern))
            .distinct()
            .order_by(ConnectedGame.game_name)
            .limit(GAME_SEARCH_LIMIT)
            .all()
        )
    except SQLAlchemyError:
        logger.exception("Error searching games for %r", query)
        raise InternalError()
    return [r.game_name for r in rows]
