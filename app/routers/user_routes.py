from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.auth.dependencies import authenticated_body, get_current_claim, get_optional_claim
from app.auth.token import Claim
from app.database import get_db
from app.schemas.user_schema import (
    DiscordConnect,
    GameConnect,
    GameDisconnect,
    InstagramConnect,
    PrivacyUpdate,
    ProfileOut,
    TwitchConnect,
    UserOut,
    YoutubeConnect,
)
from app.services import users as user_directory
from app.services import visibility

router = APIRouter(tags=["User"])


@router.get("/users", response_model=list[UserOut])
def get_all_users(db: Session = Depends(get_db)):
    return [visibility.user_out(user) for user in user_directory.list_users(db)]


@router.get("/profile", response_model=ProfileOut)
def get_my_profile(db: Session = Depends(get_db), claim: Claim = Depends(get_current_claim)):
    return visibility.get_own_profile(db, claim.username)


@router.get("/profile/{username}")
def get_user_profile(
    username: str,
    db: Session = Depends(get_db),
    claim: Optional[Claim] = Depends(get_optional_claim),
):
    viewer = claim.username if claim else None
    # Reduced profiles must not carry the hidden keys at all, not even as nulls
    return visibility.get_profile(db, username, viewer).model_dump(by_alias=True)


@router.post("/privacy")
def update_privacy(
    payload: PrivacyUpdate = Depends(authenticated_body(PrivacyUpdate)),
    db: Session = Depends(get_db),
    claim: Claim = Depends(get_current_claim),
):
    user = user_directory.set_privacy(db, claim.username, payload.is_private)
    return {"message": "Privacy settings updated", "isPrivate": user.is_private}


# === Linked accounts ===

@router.post("/connect/twitch")
def connect_twitch(
    payload: TwitchConnect = Depends(authenticated_body(TwitchConnect)),
    db: Session = Depends(get_db),
    claim: Claim = Depends(get_current_claim),
):
    user_directory.set_linked_account(db, claim.username, "twitch_username", payload.twitch_username)
    return {"message": "Twitch account connected successfully"}


@router.post("/connect/discord")
def connect_discord(
    payload: DiscordConnect = Depends(authenticated_body(DiscordConnect)),
    db: Session = Depends(get_db),
    claim: Claim = Depends(get_current_claim),
):
    user_directory.set_linked_account(db, claim.username, "discord_username", payload.discord_username)
    return {"message": "Discord account connected successfully"}


@router.post("/connect/instagram")
def connect_instagram(
    payload: InstagramConnect = Depends(authenticated_body(InstagramConnect)),
    db: Session = Depends(get_db),
    claim: Claim = Depends(get_current_claim),
):
    user_directory.set_linked_account(db, claim.username, "instagram_handle", payload.instagram_handle)
    return {"message": "Instagram account connected successfully"}


@router.post("/connect/youtube")
def connect_youtube(
    payload: YoutubeConnect = Depends(authenticated_body(YoutubeConnect)),
    db: Session = Depends(get_db),
    claim: Claim = Depends(get_current_claim),
):
    user_directory.set_linked_account(db, claim.username, "youtube_channel", payload.youtube_channel)
    return {"message": "YouTube channel connected successfully"}


@router.post("/disconnect/twitch")
def disconnect_twitch(db: Session = Depends(get_db), claim: Claim = Depends(get_current_claim)):
    user_directory.set_linked_account(db, claim.username, "twitch_username", None)
    return {"message": "Twitch account disconnected successfully"}


@router.post("/disconnect/discord")
def disconnect_discord(db: Session = Depends(get_db), claim: Claim = Depends(get_current_claim)):
    user_directory.set_linked_account(db, claim.username, "discord_username", None)
    return {"message": "Discord account disconnected successfully"}


@router.post("/disconnect/instagram")
def disconnect_instagram(db: Session = Depends(get_db), claim: Claim = Depends(get_current_claim)):
    user_directory.set_linked_account(db, claim.username, "instagram_handle", None)
    return {"message": "Instagram account disconnected successfully"}


@router.post("/disconnect/youtube")
def disconnect_youtube(db: Session = Depends(get_db), claim: Claim = Depends(get_current_claim)):
    user_directory.set_linked_account(db, claim.username, "youtube_channel", None)
    return {"message": "YouTube channel disconnected successfully"}


# === Games ===

@router.post("/connect/game")
def connect_game(
    payload: GameConnect = Depends(authenticated_body(GameConnect)),
    db: Session = Depends(get_db),
    claim: Claim = Depends(get_current_claim),
):
    user_directory.add_game(db, claim.username, payload.game_name)
    return {"message": f"Successfully connected to {payload.game_name}"}


@router.post("/disconnect/game")
def disconnect_game(
    payload: GameDisconnect = Depends(authenticated_body(GameDisconnect)),
    db: Session = Depends(get_db),
    claim: Claim = Depends(get_current_claim),
):
    user_directory.remove_game(db, claim.username, payload.game_name)
    return {"message": "Game disconnected successfully"}
